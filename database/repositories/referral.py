import logging
from typing import List, Optional, Any, Sequence

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from database.models import Referral, ReferralStatus, ACTIVE_REFERRAL_STATUSES, encode_skills
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ReferralRepository(BaseRepository):
    def get_by_id(self, referral_id: Any) -> Optional[Referral]:
        return self.db.get(Referral, referral_id)

    def get_for_update(self, referral_id: Any) -> Optional[Referral]:
        """Load a referral with its candidate, both rows locked where the backend supports it."""
        stmt = select(Referral).options(
            joinedload(Referral.candidate, innerjoin=True)
        ).where(Referral.id == referral_id).with_for_update()
        return self.db.execute(stmt).unique().scalar_one_or_none()

    def get_existing(self, requisition_id: Any, candidate_id: Any) -> Optional[Referral]:
        stmt = select(Referral).where(
            Referral.requisition_id == requisition_id,
            Referral.candidate_id == candidate_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create(
        self,
        requisition_id: Any,
        candidate_id: Any,
        match_score: int,
        justification: Optional[str],
        matching_skills: Optional[Sequence[str]]
    ) -> Referral:
        """Insert a new referral and flush.

        Raises sqlalchemy.exc.IntegrityError when the (requisition, candidate)
        pair already exists.
        """
        referral = Referral(
            requisition_id=requisition_id,
            candidate_id=candidate_id,
            match_score=match_score,
            justification=justification,
            matching_skills=encode_skills(matching_skills),
            status=ReferralStatus.PENDING_REVIEW,
        )
        self.db.add(referral)
        self.db.flush()
        return referral

    def list_for_requisition(self, requisition_id: Any) -> List[Referral]:
        """All referrals for a requisition, best score first."""
        stmt = select(Referral).options(
            joinedload(Referral.candidate)
        ).where(
            Referral.requisition_id == requisition_id
        ).order_by(Referral.match_score.desc(), Referral.id)
        return list(self.db.execute(stmt).unique().scalars().all())

    def find_active_for_candidate(
        self,
        candidate_id: Any,
        exclude_referral_id: Optional[Any] = None
    ) -> Optional[Referral]:
        stmt = select(Referral).options(
            joinedload(Referral.requisition)
        ).where(
            Referral.candidate_id == candidate_id,
            Referral.status.in_(ACTIVE_REFERRAL_STATUSES)
        )
        if exclude_referral_id is not None:
            stmt = stmt.where(Referral.id != exclude_referral_id)
        stmt = stmt.order_by(Referral.updated_at.desc(), Referral.id.desc())
        return self.db.execute(stmt).unique().scalars().first()
