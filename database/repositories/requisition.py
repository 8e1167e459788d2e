import logging
from typing import List, Optional, Any

from sqlalchemy import select

from database.models import Requisition, RequisitionStatus
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class RequisitionRepository(BaseRepository):
    def get_by_id(self, requisition_id: Any) -> Optional[Requisition]:
        return self.db.get(Requisition, requisition_id)

    def exists(self, requisition_id: Any) -> bool:
        stmt = select(Requisition.id).where(Requisition.id == requisition_id)
        return self.db.execute(stmt).scalar_one_or_none() is not None

    def get_status(self, requisition_id: Any) -> Optional[RequisitionStatus]:
        stmt = select(Requisition.status).where(Requisition.id == requisition_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(
        self,
        title: str,
        client_name: Optional[str],
        document_path: str,
        manager_id: int
    ) -> Requisition:
        requisition = Requisition(
            title=title,
            client_name=client_name,
            document_path=document_path,
            manager_id=manager_id,
            status=RequisitionStatus.OPEN,
        )
        self.db.add(requisition)
        self.db.flush()  # Generate ID
        return requisition

    def set_required_experience(self, requisition_id: Any, years: int) -> bool:
        """Store the extracted requirement. Returns False if the requisition is gone."""
        requisition = self.get_by_id(requisition_id)
        if requisition is None:
            return False
        requisition.required_experience = years
        return True

    def set_status(self, requisition_id: Any, status: RequisitionStatus) -> Optional[Requisition]:
        requisition = self.get_by_id(requisition_id)
        if requisition is None:
            return None
        requisition.status = status
        logger.info(f"Updated status of requisition {requisition_id} to {status.value}")
        return requisition

    def list_for_manager(self, manager_id: Any) -> List[Requisition]:
        stmt = select(Requisition).where(
            Requisition.manager_id == manager_id
        ).order_by(Requisition.created_at.desc(), Requisition.id.desc())
        return list(self.db.execute(stmt).scalars().all())
