from .base import Base
from .enums import RequisitionStatus, AvailabilityStatus, ReferralStatus, ACTIVE_REFERRAL_STATUSES, BUSY_AVAILABILITIES
from .requisition import Requisition
from .candidate import Candidate, Skill, candidate_skill
from .referral import Referral, encode_skills, decode_skills

__all__ = [
    'Base',
    'RequisitionStatus',
    'AvailabilityStatus',
    'ReferralStatus',
    'ACTIVE_REFERRAL_STATUSES',
    'BUSY_AVAILABILITIES',
    'Requisition',
    'Candidate',
    'Skill',
    'candidate_skill',
    'Referral',
    'encode_skills',
    'decode_skills',
]
