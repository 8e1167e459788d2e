"""Data Transfer Objects for the matching pipeline.

Scoring workers run outside the unit of work that loaded the requisition
and the candidate pool, so ORM rows are copied into these plain objects
while the session is still open.
"""

from dataclasses import dataclass
from typing import Optional

from database.models import Requisition, Candidate


@dataclass(frozen=True)
class RequisitionDTO:
    id: int
    title: str
    document_path: str
    required_experience: Optional[int] = None

    @classmethod
    def from_orm(cls, requisition: Requisition) -> "RequisitionDTO":
        return cls(
            id=requisition.id,
            title=requisition.title,
            document_path=requisition.document_path,
            required_experience=requisition.required_experience,
        )


@dataclass(frozen=True)
class CandidateDTO:
    id: int
    full_name: str
    years_of_experience: Optional[int] = None
    resume_path: Optional[str] = None

    @classmethod
    def from_orm(cls, candidate: Candidate) -> "CandidateDTO":
        return cls(
            id=candidate.id,
            full_name=candidate.full_name,
            years_of_experience=candidate.years_of_experience,
            resume_path=candidate.resume_path,
        )
