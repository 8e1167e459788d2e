import logging

from sqlalchemy.orm import Session

from database.repositories import RequisitionRepository, CandidateRepository, ReferralRepository

logger = logging.getLogger(__name__)


class TalentRepository:
    """Groups the per-entity repositories behind one Session.

    Usage:
        with talent_uow() as repo:
            requisition = repo.requisitions.get_by_id(requisition_id)
            referrals = repo.referrals.list_for_requisition(requisition_id)
    """

    def __init__(self, db: Session):
        self.db = db
        self.requisitions = RequisitionRepository(db)
        self.candidates = CandidateRepository(db)
        self.referrals = ReferralRepository(db)

    def flush(self) -> None:
        self.db.flush()
