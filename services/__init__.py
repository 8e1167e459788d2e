"""Collaborator-facing services for requisitions and candidates."""
from services.requisition_service import RequisitionService, RequisitionView, ReferralView, EngagedCandidateView
from services.candidate_service import CandidateService, CandidateProfile, ProfileUpdate

__all__ = [
    'RequisitionService', 'RequisitionView', 'ReferralView', 'EngagedCandidateView',
    'CandidateService', 'CandidateProfile', 'ProfileUpdate',
]
