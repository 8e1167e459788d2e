"""
Referral Writer - Persist one scored match per (requisition, candidate).

Every save runs in its own unit of work so a referral that was written
stays written even when sibling candidates in the same batch fail.
"""
import logging
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError

from database.models import Referral, RequisitionStatus
from database.uow import talent_uow

logger = logging.getLogger(__name__)


class ReferralWriter:
    def __init__(self, uow_factory=talent_uow):
        self.uow_factory = uow_factory

    def save(
        self,
        requisition_id: int,
        candidate_id: int,
        score: int,
        justification: Optional[str],
        matching_skills: Optional[Sequence[str]]
    ) -> Optional[Referral]:
        """Insert a PENDING_REVIEW referral.

        Returns None instead of raising when the requisition was deleted or
        closed, or the pair already has a referral (re-delivered trigger).
        """
        try:
            with self.uow_factory() as repo:
                status = repo.requisitions.get_status(requisition_id)
                if status != RequisitionStatus.OPEN:
                    logger.info(
                        f"Requisition {requisition_id} is {status.value if status else 'gone'}; "
                        f"dropping referral for candidate {candidate_id}."
                    )
                    return None

                referral = repo.referrals.create(
                    requisition_id=requisition_id,
                    candidate_id=candidate_id,
                    match_score=score,
                    justification=justification,
                    matching_skills=matching_skills,
                )
        except IntegrityError as e:
            logger.info(
                f"Referral for candidate {candidate_id} and requisition {requisition_id} "
                f"rejected by constraint (already referred?): {e.orig}"
            )
            return None

        logger.info(
            f"SUCCESS: Referral {referral.id} saved for candidate {candidate_id} "
            f"and requisition {requisition_id} (score {score})."
        )
        return referral
