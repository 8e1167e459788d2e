from sqlalchemy import Column, Integer, Text, TIMESTAMP, Enum, Index, func
from sqlalchemy.orm import relationship

from .base import Base
from .enums import RequisitionStatus


class Requisition(Base):
    """
    A job opening submitted for candidate matching.

    required_experience stays NULL until the matching pipeline extracts it
    from the document; a rerun may overwrite it.
    """
    __tablename__ = 'requisition'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    client_name = Column(Text)
    document_path = Column(Text, nullable=False, unique=True)  # Relative to the document store root
    status = Column(
        Enum(RequisitionStatus, native_enum=False, length=20),
        nullable=False,
        default=RequisitionStatus.OPEN
    )
    required_experience = Column(Integer, nullable=True)
    manager_id = Column(Integer, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    referrals = relationship("Referral", back_populates="requisition", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_requisition_manager', 'manager_id'),
        Index('idx_requisition_status', 'status'),
    )

    def __repr__(self) -> str:
        return f"<Requisition id={self.id} title={self.title!r} status={self.status}>"
