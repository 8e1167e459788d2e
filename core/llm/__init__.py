"""LLM Module - inference services, prompt templates and reply parsing."""
from core.llm.interfaces import LLMProvider
from core.llm.openai_service import OpenAIService
from core.llm.prompts import PromptTemplate, load_prompt_templates
from core.llm.response_parser import parse_json_object, strip_code_fences

__all__ = [
    'LLMProvider', 'OpenAIService',
    'PromptTemplate', 'load_prompt_templates',
    'parse_json_object', 'strip_code_fences',
]
