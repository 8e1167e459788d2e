"""
Candidate Service - Profile maintenance, resume uploads and skill extraction.

Skill extraction runs in a background thread after a resume upload and
never raises; a failed extraction leaves the previous skills in place.
"""

import datetime
import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from core.documents import FileSystemDocumentStore, TextExtractor, read_document_text
from core.exceptions import CandidateNotFoundError
from core.matcher import SkillExtractor
from database.models import Candidate, AvailabilityStatus
from database.uow import talent_uow

logger = logging.getLogger(__name__)

RESUME_SUBFOLDER = "resumes"


@dataclass
class ProfileUpdate:
    """New profile values. skills=None leaves the current skills unchanged."""
    full_name: str
    years_of_experience: Optional[int] = None
    availability: AvailabilityStatus = AvailabilityStatus.AVAILABLE
    expected_availability_date: Optional[datetime.date] = None
    job_level: Optional[str] = None
    current_role: Optional[str] = None
    skills: Optional[List[str]] = None


@dataclass(frozen=True)
class CandidateProfile:
    id: int
    full_name: str
    availability: AvailabilityStatus
    years_of_experience: Optional[int] = None
    expected_availability_date: Optional[datetime.date] = None
    resume_path: Optional[str] = None
    job_level: Optional[str] = None
    current_role: Optional[str] = None
    skills: List[str] = field(default_factory=list)

    @classmethod
    def from_orm(cls, candidate: Candidate) -> "CandidateProfile":
        return cls(
            id=candidate.id,
            full_name=candidate.full_name,
            availability=candidate.availability,
            years_of_experience=candidate.years_of_experience,
            expected_availability_date=candidate.expected_availability_date,
            resume_path=candidate.resume_path,
            job_level=candidate.job_level,
            current_role=candidate.current_role,
            skills=sorted(s.name for s in candidate.skills),
        )


class CandidateService:
    def __init__(
        self,
        document_store: FileSystemDocumentStore,
        text_extractor: TextExtractor,
        skill_extractor: SkillExtractor,
        uow_factory=talent_uow,
        background: bool = True,
    ):
        self.store = document_store
        self.text_extractor = text_extractor
        self.skill_extractor = skill_extractor
        self.uow_factory = uow_factory
        self.background = background

    def create(
        self,
        full_name: str,
        years_of_experience: Optional[int] = None,
        availability: AvailabilityStatus = AvailabilityStatus.AVAILABLE,
        expected_availability_date: Optional[datetime.date] = None,
        job_level: Optional[str] = None,
        current_role: Optional[str] = None,
    ) -> CandidateProfile:
        with self.uow_factory() as repo:
            candidate = repo.candidates.create(
                full_name=full_name,
                years_of_experience=years_of_experience,
                availability=AvailabilityStatus(availability),
                expected_availability_date=expected_availability_date,
                job_level=job_level,
                current_role=current_role,
            )
            logger.info(f"Created candidate {candidate.id} ({full_name})")
            return CandidateProfile.from_orm(candidate)

    def get_profile(self, candidate_id: int) -> CandidateProfile:
        with self.uow_factory() as repo:
            candidate = repo.candidates.get_by_id(candidate_id)
            if candidate is None:
                raise CandidateNotFoundError(f"Candidate {candidate_id} not found")
            return CandidateProfile.from_orm(candidate)

    def update_profile(self, candidate_id: int, update: ProfileUpdate) -> CandidateProfile:
        """Overwrite profile fields; the expected date is kept only for ON_PROJECT."""
        with self.uow_factory() as repo:
            candidate = repo.candidates.get_by_id(candidate_id)
            if candidate is None:
                raise CandidateNotFoundError(f"Candidate {candidate_id} not found")

            candidate.full_name = update.full_name
            candidate.years_of_experience = update.years_of_experience
            candidate.job_level = update.job_level
            candidate.current_role = update.current_role
            candidate.set_availability(AvailabilityStatus(update.availability), update.expected_availability_date)

            if update.skills is not None:
                repo.candidates.replace_skills(candidate, update.skills)

            repo.flush()
            logger.info(f"Successfully updated profile for candidate {candidate_id}")
            return CandidateProfile.from_orm(candidate)

    def upload_resume(self, candidate_id: int, filename: str, data: bytes) -> str:
        """Store a new resume, then extract skills from it.

        The previous resume file is deleted once the new path is committed.
        Returns the stored relative path.

        Raises:
            CandidateNotFoundError: unknown candidate
            DocumentStorageError: empty or unstorable file
        """
        with self.uow_factory() as repo:
            if repo.candidates.get_by_id(candidate_id) is None:
                raise CandidateNotFoundError(f"Candidate {candidate_id} not found")

        new_path = self.store.store(data, filename, RESUME_SUBFOLDER)
        try:
            with self.uow_factory() as repo:
                candidate = repo.candidates.get_by_id(candidate_id)
                if candidate is None:
                    raise CandidateNotFoundError(f"Candidate {candidate_id} not found")
                old_path = candidate.resume_path
                candidate.resume_path = new_path
        except Exception:
            self.store.delete(new_path)
            raise

        if old_path and old_path != new_path:
            self.store.delete(old_path)

        logger.info(f"Resume for candidate {candidate_id} stored at {new_path}")
        self.schedule_skill_extraction(candidate_id)
        return new_path

    def schedule_skill_extraction(self, candidate_id: int) -> Optional[threading.Thread]:
        if not self.background:
            self.extract_and_save_skills(candidate_id)
            return None

        thread = threading.Thread(
            target=self.extract_and_save_skills,
            args=(candidate_id,),
            name=f"skills-{candidate_id}",
            daemon=True
        )
        thread.start()
        return thread

    def extract_and_save_skills(self, candidate_id: int) -> List[str]:
        """Replace a candidate's skills with those found in their resume.

        Returns the saved skill names, or an empty list when nothing changed.
        """
        logger.info(f"Starting skill extraction for candidate {candidate_id}")
        try:
            with self.uow_factory() as repo:
                candidate = repo.candidates.get_by_id(candidate_id)
                resume_path = candidate.resume_path if candidate is not None else None

            if not resume_path:
                logger.warning(f"Candidate {candidate_id} has no resume; skipping skill extraction.")
                return []

            resume_text = read_document_text(self.store, self.text_extractor, resume_path)
            if not resume_text.strip():
                logger.warning(f"Parsed resume text is empty for candidate {candidate_id}. Aborting skill extraction.")
                return []

            names = self.skill_extractor.extract(resume_text)
            if not names:
                logger.warning(f"LLM returned no skills for candidate {candidate_id}")
                return []

            with self.uow_factory() as repo:
                candidate = repo.candidates.get_by_id(candidate_id)
                if candidate is None:
                    logger.info(f"Candidate {candidate_id} vanished during skill extraction.")
                    return []
                skills = repo.candidates.replace_skills(candidate, names)
                saved = [s.name for s in skills]

            logger.info(f"Successfully updated {len(saved)} skills for candidate {candidate_id}")
            return saved
        except Exception:
            logger.exception(f"Skill extraction failed for candidate {candidate_id}")
            return []
