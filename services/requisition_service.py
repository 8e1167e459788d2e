"""
Requisition Service - Manager-facing operations on requisitions.

Usage:
    service = RequisitionService(document_store, events=event_queue)

    requisition = service.ingest(
        manager_id=7,
        title="Senior Backend Engineer",
        client_name="Acme",
        filename="backend.pdf",
        data=pdf_bytes
    )
    # matching starts once the ingest transaction has committed

    for view in service.recommendations(requisition.id):
        print(view.match_score, view.candidate_name)
"""

import datetime
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from core.documents import FileSystemDocumentStore
from core.exceptions import RequisitionNotFoundError
from core.referral import ReferralStateMachine, ReferralDecision
from database.models import Requisition, Referral, RequisitionStatus, ReferralStatus, AvailabilityStatus
from database.uow import talent_uow
from pipeline.events import RequisitionEventQueue

logger = logging.getLogger(__name__)

REQUISITION_SUBFOLDER = "requisitions"


@dataclass(frozen=True)
class RequisitionView:
    id: int
    title: str
    client_name: Optional[str]
    status: RequisitionStatus
    document_path: str
    manager_id: int
    required_experience: Optional[int] = None
    created_at: Optional[datetime.datetime] = None

    @classmethod
    def from_orm(cls, requisition: Requisition) -> "RequisitionView":
        return cls(
            id=requisition.id,
            title=requisition.title,
            client_name=requisition.client_name,
            status=requisition.status,
            document_path=requisition.document_path,
            manager_id=requisition.manager_id,
            required_experience=requisition.required_experience,
            created_at=requisition.created_at,
        )


@dataclass(frozen=True)
class ReferralView:
    """One recommendation as a reviewer sees it."""
    referral_id: int
    candidate_id: int
    candidate_name: str
    match_score: int
    status: ReferralStatus
    justification: Optional[str] = None
    matching_skills: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    years_of_experience: Optional[int] = None
    current_role: Optional[str] = None
    job_level: Optional[str] = None
    availability: Optional[AvailabilityStatus] = None
    expected_availability_date: Optional[datetime.date] = None

    @classmethod
    def from_orm(cls, referral: Referral) -> "ReferralView":
        candidate = referral.candidate
        return cls(
            referral_id=referral.id,
            candidate_id=candidate.id,
            candidate_name=candidate.full_name,
            match_score=referral.match_score,
            status=referral.status,
            justification=referral.justification,
            matching_skills=referral.matching_skills_list,
            skills=sorted(s.name for s in candidate.skills),
            years_of_experience=candidate.years_of_experience,
            current_role=candidate.current_role,
            job_level=candidate.job_level,
            availability=candidate.availability,
            expected_availability_date=candidate.expected_availability_date,
        )


@dataclass(frozen=True)
class EngagedCandidateView:
    """A busy candidate and the requisition of their active referral, if any."""
    candidate_id: int
    full_name: str
    availability: AvailabilityStatus
    requisition_id: Optional[int] = None
    requisition_title: Optional[str] = None
    client_name: Optional[str] = None


class RequisitionService:
    def __init__(
        self,
        document_store: FileSystemDocumentStore,
        events: Optional[RequisitionEventQueue] = None,
        state_machine: Optional[ReferralStateMachine] = None,
        uow_factory=talent_uow,
    ):
        self.store = document_store
        self.events = events
        self.uow_factory = uow_factory
        self.state_machine = state_machine or ReferralStateMachine(uow_factory=uow_factory)

    def ingest(
        self,
        manager_id: int,
        title: str,
        client_name: Optional[str],
        filename: str,
        data: bytes
    ) -> RequisitionView:
        """Store the document, create the requisition and trigger matching after commit.

        Raises:
            ValueError: if the document is empty
            DocumentStorageError: if the document cannot be stored
        """
        if not data:
            raise ValueError("Requisition document must not be empty")

        document_path = self.store.store(data, filename, REQUISITION_SUBFOLDER)
        logger.info(f"Requisition document stored at relative path: {document_path}")

        try:
            with self.uow_factory() as repo:
                requisition = repo.requisitions.create(
                    title=title,
                    client_name=client_name,
                    document_path=document_path,
                    manager_id=manager_id,
                )
                logger.info(f"Saved new requisition with ID: {requisition.id}")
                if self.events is not None:
                    self.events.publish_after_commit(repo.db, requisition.id)
                view = RequisitionView.from_orm(requisition)
        except Exception:
            self.store.delete(document_path)
            raise

        return view

    def set_status(self, requisition_id: int, status: Union[RequisitionStatus, str]) -> RequisitionView:
        status = RequisitionStatus(status)
        with self.uow_factory() as repo:
            requisition = repo.requisitions.set_status(requisition_id, status)
            if requisition is None:
                raise RequisitionNotFoundError(f"Requisition {requisition_id} not found")
            return RequisitionView.from_orm(requisition)

    def close(self, requisition_id: int) -> RequisitionView:
        return self.set_status(requisition_id, RequisitionStatus.CLOSED)

    def list_for_manager(self, manager_id: int) -> List[RequisitionView]:
        """Requisitions owned by a manager, newest first."""
        with self.uow_factory() as repo:
            return [RequisitionView.from_orm(r) for r in repo.requisitions.list_for_manager(manager_id)]

    def recommendations(self, requisition_id: int) -> List[ReferralView]:
        """Referrals for a requisition, highest match score first."""
        with self.uow_factory() as repo:
            if not repo.requisitions.exists(requisition_id):
                raise RequisitionNotFoundError(f"Requisition {requisition_id} not found")
            return [ReferralView.from_orm(r) for r in repo.referrals.list_for_requisition(requisition_id)]

    def decide(self, referral_id: int, status: Union[ReferralStatus, str]) -> ReferralDecision:
        """Apply a reviewer decision; see ReferralStateMachine.apply_decision."""
        return self.state_machine.apply_decision(referral_id, status)

    def engaged_candidates(self) -> List[EngagedCandidateView]:
        """ON_PROJECT and RESERVED candidates with the requisition they are engaged on."""
        result = []
        with self.uow_factory() as repo:
            for candidate in repo.candidates.find_by_availability():
                active = repo.referrals.find_active_for_candidate(candidate.id)
                requisition = active.requisition if active is not None else None
                result.append(EngagedCandidateView(
                    candidate_id=candidate.id,
                    full_name=candidate.full_name,
                    availability=candidate.availability,
                    requisition_id=requisition.id if requisition else None,
                    requisition_title=requisition.title if requisition else None,
                    client_name=requisition.client_name if requisition else None,
                ))
        return result
