from typing import List, Optional, Sequence

from sqlalchemy import Column, Integer, Text, TIMESTAMP, Enum, ForeignKey, UniqueConstraint, Index, func
from sqlalchemy.orm import relationship

from .base import Base
from .enums import ReferralStatus

SKILL_SEPARATOR = ","


def encode_skills(skills: Optional[Sequence[str]]) -> Optional[str]:
    """Join skills into the stored comma-separated form, keeping order.

    Commas inside a skill name would split it on decode, so they become spaces.
    Blank entries are dropped. Returns None for an empty list.
    """
    if not skills:
        return None
    cleaned = []
    for skill in skills:
        name = " ".join(str(skill).replace(SKILL_SEPARATOR, " ").split())
        if name:
            cleaned.append(name)
    return SKILL_SEPARATOR.join(cleaned) if cleaned else None


def decode_skills(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(SKILL_SEPARATOR) if part.strip()]


class Referral(Base):
    """
    Scored pairing of one requisition with one candidate.

    Created once per (requisition, candidate) by the referral writer; the
    unique constraint is what makes repeated pipeline runs idempotent.
    """
    __tablename__ = 'referral'

    id = Column(Integer, primary_key=True, autoincrement=True)
    requisition_id = Column(Integer, ForeignKey('requisition.id', ondelete='CASCADE'), nullable=False)
    candidate_id = Column(Integer, ForeignKey('candidate.id', ondelete='CASCADE'), nullable=False)

    match_score = Column(Integer, nullable=False)  # 0-100
    justification = Column(Text)
    matching_skills = Column(Text)  # Comma-joined, ordered

    status = Column(
        Enum(ReferralStatus, native_enum=False, length=20),
        nullable=False,
        default=ReferralStatus.PENDING_REVIEW
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    requisition = relationship("Requisition", back_populates="referrals")
    candidate = relationship("Candidate", back_populates="referrals")

    __table_args__ = (
        UniqueConstraint('requisition_id', 'candidate_id', name='uq_referral_requisition_candidate'),
        Index('idx_referral_candidate_status', 'candidate_id', 'status'),
        Index('idx_referral_score', 'requisition_id', 'match_score'),
    )

    @property
    def matching_skills_list(self) -> List[str]:
        return decode_skills(self.matching_skills)

    def __repr__(self) -> str:
        return (
            f"<Referral id={self.id} requisition={self.requisition_id} "
            f"candidate={self.candidate_id} score={self.match_score} status={self.status}>"
        )
