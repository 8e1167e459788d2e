import logging
from typing import Dict, List, Optional

from core.exceptions import InferenceResponseError
from core.llm.interfaces import LLMProvider
from core.llm.prompts import PromptTemplate, DEFAULT_PROMPTS, SKILL_EXTRACTION
from core.llm.response_parser import parse_json_object

logger = logging.getLogger(__name__)


class SkillExtractor:
    """Extract a candidate's technical skills from resume text."""

    def __init__(self, ai_service: LLMProvider, prompts: Optional[Dict[str, PromptTemplate]] = None):
        self.ai = ai_service
        self.prompt = (prompts or DEFAULT_PROMPTS)[SKILL_EXTRACTION]

    def extract(self, resume_text: str) -> List[str]:
        """Return skills in reply order, deduplicated case-insensitively."""
        raw = self.ai.complete(self.prompt.render(resume_text=resume_text))
        data = parse_json_object(raw)

        skills = data.get('skills') or []
        if not isinstance(skills, list):
            raise InferenceResponseError(f"Reply 'skills' must be a list, got {type(skills).__name__}")

        result = []
        seen = set()
        for skill in skills:
            if skill is None:
                continue
            name = str(skill).strip()
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            result.append(name)
        return result
