from database.repositories.base import BaseRepository
from database.repositories.requisition import RequisitionRepository
from database.repositories.candidate import CandidateRepository
from database.repositories.referral import ReferralRepository

__all__ = [
    'BaseRepository',
    'RequisitionRepository',
    'CandidateRepository',
    'ReferralRepository',
]
