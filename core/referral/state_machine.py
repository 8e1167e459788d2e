"""
Referral State Machine - Apply reviewer decisions to referrals.

    PENDING_REVIEW --> SELECTED   candidate becomes ON_PROJECT
                   --> RESERVED   candidate becomes RESERVED
                   --> REJECTED   candidate untouched

    RESERVED --> REJECTED         candidate back to AVAILABLE

The referral status and the candidate availability are written in the same
unit of work: either both change or neither does.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import (
    ReferralDecisionError,
    ReferralNotFoundError,
    InvalidTransitionError,
    CandidateAlreadyEngagedError,
    DecisionPersistenceError,
)
from database.models import AvailabilityStatus, ReferralStatus, ACTIVE_REFERRAL_STATUSES
from database.uow import talent_uow

logger = logging.getLogger(__name__)

DECISION_STATUSES = (ReferralStatus.SELECTED, ReferralStatus.RESERVED, ReferralStatus.REJECTED)


@dataclass(frozen=True)
class ReferralDecision:
    """Outcome of an applied decision, safe to use after the session closed."""
    referral_id: int
    requisition_id: int
    candidate_id: int
    previous_status: ReferralStatus
    status: ReferralStatus
    candidate_availability: AvailabilityStatus
    availability_changed: bool


def availability_after(
    previous_status: ReferralStatus,
    new_status: ReferralStatus
) -> Optional[AvailabilityStatus]:
    """Candidate availability implied by a transition, or None for no change."""
    if new_status == ReferralStatus.SELECTED:
        return AvailabilityStatus.ON_PROJECT
    if new_status == ReferralStatus.RESERVED:
        return AvailabilityStatus.RESERVED
    if new_status == ReferralStatus.REJECTED and previous_status == ReferralStatus.RESERVED:
        return AvailabilityStatus.AVAILABLE
    return None


def _parse_status(new_status: Union[ReferralStatus, str]) -> ReferralStatus:
    try:
        status = ReferralStatus(new_status)
    except ValueError:
        raise InvalidTransitionError(f"Unknown referral status: {new_status!r}")
    if status not in DECISION_STATUSES:
        raise InvalidTransitionError(
            f"{status.value} is not a reviewer decision; "
            f"expected one of {', '.join(s.value for s in DECISION_STATUSES)}"
        )
    return status


class ReferralStateMachine:
    def __init__(self, uow_factory=talent_uow):
        self.uow_factory = uow_factory

    def apply_decision(self, referral_id: int, new_status: Union[ReferralStatus, str]) -> ReferralDecision:
        """Move a referral to a decision status and update its candidate.

        Raises:
            InvalidTransitionError: new_status is not SELECTED, RESERVED or REJECTED
            ReferralNotFoundError: no referral with this id
            CandidateAlreadyEngagedError: candidate holds another active referral
            DecisionPersistenceError: the write pair could not be committed
        """
        status = _parse_status(new_status)

        try:
            with self.uow_factory() as repo:
                referral = repo.referrals.get_for_update(referral_id)
                if referral is None:
                    raise ReferralNotFoundError(f"Referral {referral_id} not found")

                candidate = referral.candidate
                previous = referral.status

                if status in ACTIVE_REFERRAL_STATUSES:
                    other = repo.referrals.find_active_for_candidate(
                        candidate.id, exclude_referral_id=referral.id
                    )
                    if other is not None:
                        raise CandidateAlreadyEngagedError(
                            f"Candidate {candidate.id} is already {other.status.value} "
                            f"for requisition {other.requisition_id} (referral {other.id})"
                        )

                target = availability_after(previous, status)
                if target is not None:
                    candidate.set_availability(target)
                    logger.info(
                        f"Candidate {candidate.id} availability set to {target.value} "
                        f"({previous.value} -> {status.value} on referral {referral_id})."
                    )

                referral.status = status
                repo.flush()

                decision = ReferralDecision(
                    referral_id=referral.id,
                    requisition_id=referral.requisition_id,
                    candidate_id=candidate.id,
                    previous_status=previous,
                    status=status,
                    candidate_availability=candidate.availability,
                    availability_changed=target is not None,
                )
        except ReferralDecisionError as e:
            logger.warning(f"Decision {status.value} on referral {referral_id} refused: {e}")
            raise
        except SQLAlchemyError as e:
            logger.error(
                f"Decision {status.value} on referral {referral_id} rolled back: {e}",
                exc_info=True
            )
            raise DecisionPersistenceError(
                f"Could not persist decision {status.value} for referral {referral_id}"
            ) from e

        logger.info(f"Referral {referral_id} moved {previous.value} -> {status.value}.")
        return decision
