"""
Match Scorer - Score one candidate resume against one requisition.

A malformed reply raises InferenceResponseError for that candidate only;
the orchestrator decides what a failure means for the batch.
"""
import logging
from typing import Dict, Optional

from core.exceptions import InferenceResponseError
from core.llm.interfaces import LLMProvider
from core.llm.prompts import PromptTemplate, DEFAULT_PROMPTS, MATCH_SCORING
from core.llm.response_parser import parse_json_object, coerce_int
from core.matcher.models import MatchScore

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100


class MatchScorer:
    def __init__(self, ai_service: LLMProvider, prompts: Optional[Dict[str, PromptTemplate]] = None):
        self.ai = ai_service
        self.prompt = (prompts or DEFAULT_PROMPTS)[MATCH_SCORING]

    def build_prompt(self, requisition_text: str, candidate_text: str) -> str:
        return self.prompt.render(requisition_text=requisition_text, candidate_text=candidate_text)

    def score(self, requisition_text: str, candidate_text: str) -> MatchScore:
        """
        Raises:
            InferenceError: transport failure, or a reply missing a usable score
        """
        raw = self.ai.complete(self.build_prompt(requisition_text, candidate_text))
        return self.parse_response(raw)

    @staticmethod
    def parse_response(raw: str) -> MatchScore:
        data = parse_json_object(raw)

        score = coerce_int(data.get('score'), default=None)
        if score is None:
            raise InferenceResponseError(f"Reply has no numeric 'score': {data.get('score')!r}")
        score = max(MIN_SCORE, min(MAX_SCORE, score))

        justification = data.get('justification') or ""
        if not isinstance(justification, str):
            justification = str(justification)

        skills = data.get('matching_skills') or []
        if not isinstance(skills, list):
            raise InferenceResponseError(
                f"Reply 'matching_skills' must be a list, got {type(skills).__name__}"
            )
        matching_skills = [str(s).strip() for s in skills if s is not None and str(s).strip()]

        return MatchScore(score=score, justification=justification.strip(), matching_skills=matching_skills)
