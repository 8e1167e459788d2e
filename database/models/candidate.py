import datetime
from typing import Optional

from sqlalchemy import Column, Integer, Text, TIMESTAMP, Date, Enum, ForeignKey, Table, Index, func
from sqlalchemy.orm import relationship

from .base import Base
from .enums import AvailabilityStatus


candidate_skill = Table(
    'candidate_skill',
    Base.metadata,
    Column('candidate_id', Integer, ForeignKey('candidate.id', ondelete='CASCADE'), primary_key=True),
    Column('skill_id', Integer, ForeignKey('skill.id', ondelete='CASCADE'), primary_key=True),
)


class Skill(Base):
    """Entry of the shared skill vocabulary. Names are unique case-insensitively."""
    __tablename__ = 'skill'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Skill {self.name!r}>"


class Candidate(Base):
    """
    Internal profile eligible for referral against requisitions.

    expected_availability_date is only meaningful while ON_PROJECT; use
    set_availability() so the two fields never disagree.
    """
    __tablename__ = 'candidate'

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(Text, nullable=False)
    years_of_experience = Column(Integer, nullable=True)
    availability = Column(
        Enum(AvailabilityStatus, native_enum=False, length=20),
        nullable=False,
        default=AvailabilityStatus.AVAILABLE
    )
    expected_availability_date = Column(Date, nullable=True)
    resume_path = Column(Text, nullable=True, unique=True)
    job_level = Column(Text)
    current_role = Column(Text)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    skills = relationship("Skill", secondary=candidate_skill, lazy="selectin")
    referrals = relationship("Referral", back_populates="candidate", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_candidate_availability', 'availability'),
    )

    def set_availability(
        self,
        availability: AvailabilityStatus,
        expected_date: Optional[datetime.date] = None
    ) -> None:
        self.availability = availability
        if availability == AvailabilityStatus.ON_PROJECT:
            self.expected_availability_date = expected_date
        else:
            self.expected_availability_date = None

    def __repr__(self) -> str:
        return f"<Candidate id={self.id} name={self.full_name!r} availability={self.availability}>"
