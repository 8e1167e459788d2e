import datetime
import logging
from typing import List, Optional, Any, Iterable

from sqlalchemy import select, and_, or_, func
from sqlalchemy.exc import IntegrityError

from database.models import Candidate, Skill, AvailabilityStatus, BUSY_AVAILABILITIES
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CandidateRepository(BaseRepository):
    def get_by_id(self, candidate_id: Any) -> Optional[Candidate]:
        return self.db.get(Candidate, candidate_id)

    def create(
        self,
        full_name: str,
        years_of_experience: Optional[int] = None,
        availability: AvailabilityStatus = AvailabilityStatus.AVAILABLE,
        expected_availability_date: Optional[datetime.date] = None,
        resume_path: Optional[str] = None,
        job_level: Optional[str] = None,
        current_role: Optional[str] = None,
    ) -> Candidate:
        candidate = Candidate(
            full_name=full_name,
            years_of_experience=years_of_experience,
            resume_path=resume_path,
            job_level=job_level,
            current_role=current_role,
        )
        candidate.set_availability(availability, expected_availability_date)
        self.db.add(candidate)
        self.db.flush()
        return candidate

    def find_available_or_soon_available(self, threshold_date: datetime.date) -> List[Candidate]:
        """AVAILABLE candidates, plus ON_PROJECT ones free on or before threshold_date."""
        stmt = select(Candidate).where(
            or_(
                Candidate.availability == AvailabilityStatus.AVAILABLE,
                and_(
                    Candidate.availability == AvailabilityStatus.ON_PROJECT,
                    Candidate.expected_availability_date.is_not(None),
                    Candidate.expected_availability_date <= threshold_date,
                ),
            )
        ).order_by(Candidate.id)
        return list(self.db.execute(stmt).scalars().all())

    def find_by_availability(self, statuses: Iterable[AvailabilityStatus] = BUSY_AVAILABILITIES) -> List[Candidate]:
        stmt = select(Candidate).where(
            Candidate.availability.in_(list(statuses))
        ).order_by(Candidate.id)
        return list(self.db.execute(stmt).scalars().all())

    # --- Skills ---

    def get_skill_by_name(self, name: str) -> Optional[Skill]:
        stmt = select(Skill).where(func.lower(Skill.name) == name.strip().lower())
        return self.db.execute(stmt).scalars().first()

    def get_or_create_skill(self, name: str) -> Skill:
        """Case-insensitive find-or-create against the shared vocabulary.

        The insert runs in a savepoint: when a concurrent transaction created
        the same name first, the unique constraint fires and the existing row
        is returned instead.
        """
        cleaned = name.strip()
        skill = self.get_skill_by_name(cleaned)
        if skill is not None:
            return skill

        logger.info(f"New skill found: '{cleaned}'. Saving to master skills list.")
        skill = Skill(name=cleaned[:1].upper() + cleaned[1:])
        try:
            with self.db.begin_nested():
                self.db.add(skill)
                self.db.flush()
        except IntegrityError:
            existing = self.get_skill_by_name(cleaned)
            if existing is None:
                raise
            logger.info(f"Skill '{cleaned}' was created concurrently; reusing it.")
            return existing
        return skill

    def replace_skills(self, candidate: Candidate, names: Iterable[str]) -> List[Skill]:
        skills: List[Skill] = []
        seen = set()
        for name in names:
            if not name or not name.strip():
                continue
            skill = self.get_or_create_skill(name)
            if skill.id in seen:
                continue
            seen.add(skill.id)
            skills.append(skill)
        candidate.skills = skills
        return skills
