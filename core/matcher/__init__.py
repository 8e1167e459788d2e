"""Matcher Module - requirement extraction, candidate filtering and LLM scoring."""
from core.matcher.models import RequirementResult, MatchScore
from core.matcher.dto import RequisitionDTO, CandidateDTO
from core.matcher.requirement_extractor import RequirementExtractor
from core.matcher.candidate_filter import CandidateFilter, is_in_pool, passes_experience_gate
from core.matcher.scorer import MatchScorer
from core.matcher.skill_extractor import SkillExtractor

__all__ = [
    'RequirementResult', 'MatchScore',
    'RequisitionDTO', 'CandidateDTO',
    'RequirementExtractor', 'CandidateFilter', 'is_in_pool', 'passes_experience_gate',
    'MatchScorer', 'SkillExtractor',
]
