"""
Requirement Extractor - Minimum years of experience from requisition text.

Extraction is fail-open: ``try_extract`` never raises, and anything the
model gets wrong collapses to 0 so matching still runs without the gate.
"""
import logging
from typing import Dict, Optional

from core.llm.interfaces import LLMProvider
from core.llm.prompts import PromptTemplate, DEFAULT_PROMPTS, REQUIREMENT_EXTRACTION
from core.llm.response_parser import parse_json_object, coerce_int
from core.matcher.models import RequirementResult

logger = logging.getLogger(__name__)


class RequirementExtractor:
    def __init__(self, ai_service: LLMProvider, prompts: Optional[Dict[str, PromptTemplate]] = None):
        self.ai = ai_service
        self.prompt = (prompts or DEFAULT_PROMPTS)[REQUIREMENT_EXTRACTION]

    def build_prompt(self, requisition_text: str) -> str:
        return self.prompt.render(requisition_text=requisition_text)

    def extract(self, requisition_text: str) -> RequirementResult:
        """Ask the model for the minimum years of experience.

        Missing, null, negative or non-numeric values become 0.

        Raises:
            InferenceError: transport failure or a reply that is not a JSON object
        """
        raw = self.ai.complete(self.build_prompt(requisition_text))
        data = parse_json_object(raw)
        years = max(0, coerce_int(data.get('required_experience'), default=0))
        return RequirementResult(required_experience=years)

    def try_extract(self, requisition_text: str, requisition_id: Optional[int] = None) -> RequirementResult:
        """Like extract(), but any failure is logged and treated as 0 years."""
        try:
            result = self.extract(requisition_text)
        except Exception as e:
            logger.error(
                f"Failed to extract experience from requisition {requisition_id}. "
                f"Matching will continue without this filter. Error: {e}"
            )
            return RequirementResult(required_experience=0, extracted=False)

        logger.info(
            f"LLM extracted required experience for requisition {requisition_id}: "
            f"{result.required_experience} years."
        )
        return result
