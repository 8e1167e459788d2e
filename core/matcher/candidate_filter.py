"""
Candidate Filter - Select who gets scored against a requisition.

Two stages:
1. Pool: AVAILABLE now, or ON_PROJECT and free within the horizon.
2. Gate: enough years of experience and a resume on file.

Both stages only read.
"""
import datetime
import logging
from typing import List, Optional, Sequence, TypeVar

from database.models import AvailabilityStatus
from database.repository import TalentRepository

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 90

T = TypeVar('T')


def availability_threshold(horizon_days: int, today: Optional[datetime.date] = None) -> datetime.date:
    return (today or datetime.date.today()) + datetime.timedelta(days=horizon_days)


def is_in_pool(candidate, threshold_date: datetime.date) -> bool:
    """Pool rule as a predicate, matching the repository query."""
    if candidate.availability == AvailabilityStatus.AVAILABLE:
        return True
    if candidate.availability == AvailabilityStatus.ON_PROJECT:
        expected = candidate.expected_availability_date
        return expected is not None and expected <= threshold_date
    return False


def passes_experience_gate(candidate, required_experience: Optional[int]) -> bool:
    """True if the candidate has a resume and at least the required years (NULL counts as 0)."""
    required = required_experience or 0
    years = candidate.years_of_experience or 0
    return years >= required and bool(candidate.resume_path)


class CandidateFilter:
    def __init__(self, horizon_days: int = DEFAULT_HORIZON_DAYS):
        self.horizon_days = horizon_days

    def select_pool(
        self,
        repo: TalentRepository,
        horizon_days: Optional[int] = None,
        today: Optional[datetime.date] = None
    ) -> list:
        horizon = self.horizon_days if horizon_days is None else horizon_days
        threshold = availability_threshold(horizon, today)
        pool = repo.candidates.find_available_or_soon_available(threshold)
        logger.info(f"Found {len(pool)} potential candidates available by {threshold.isoformat()}.")
        return pool

    def apply_experience_gate(self, candidates: Sequence[T], required_experience: Optional[int]) -> List[T]:
        required = required_experience or 0
        eligible = []
        for candidate in candidates:
            years = candidate.years_of_experience or 0
            if years < required:
                logger.warning(
                    f"Skipping candidate {candidate.id} due to insufficient experience "
                    f"(Has: {years}, Requires: {required})."
                )
                continue
            if not candidate.resume_path:
                logger.warning(f"Skipping candidate {candidate.id} because they have no resume file.")
                continue
            eligible.append(candidate)

        logger.info(f"{len(eligible)} of {len(candidates)} candidates pass the experience gate ({required}+ years).")
        return eligible
