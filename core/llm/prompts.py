"""
Prompt templates for the inference service.

Templates are versioned data rather than inline strings: each one carries
the format text and the response keys the parser expects, and a YAML file
can replace any of them without touching pipeline code.

Placeholders use ``string.Template`` syntax (``$requisition_text``) so JSON
examples inside the template need no brace escaping.
"""
import logging
import os
from dataclasses import dataclass, field, replace
from string import Template
from typing import Dict, Optional

import yaml

logger = logging.getLogger(__name__)

REQUIREMENT_EXTRACTION = "requirement_extraction"
MATCH_SCORING = "match_scoring"
SKILL_EXTRACTION = "skill_extraction"


@dataclass(frozen=True)
class PromptTemplate:
    """A named, versioned prompt and the JSON keys its reply must carry."""
    name: str
    version: str
    template: str
    response_schema: Dict[str, str] = field(default_factory=dict)

    def render(self, **values: str) -> str:
        return Template(self.template).substitute(**values)


REQUIREMENT_EXTRACTION_PROMPT = PromptTemplate(
    name=REQUIREMENT_EXTRACTION,
    version="1",
    template="""You are an expert data extraction bot. Analyze the following Job Description text.
Identify the minimum required years of experience.
Return the result ONLY as a valid JSON object with a single key "required_experience" which contains the number as an integer.
If no specific number of years is mentioned, return 0.

Example format: {"required_experience": 5}

Job Description Text:
---
$requisition_text
---
""",
    response_schema={"required_experience": "integer"},
)

MATCH_SCORING_PROMPT = PromptTemplate(
    name=MATCH_SCORING,
    version="1",
    template="""You are an expert HR recruitment assistant. Analyze the following Job Description and Resume.
1. Provide a matching score from 0 to 100.
2. Provide a summary of at most 2 sentences explaining your score.
3. Identify the top 5 to 6 key skills from the resume that directly match the job description's requirements.

Return the result ONLY in a valid JSON format like this:
{"score": 92, "justification": "This is a summary.", "matching_skills": ["Java", "Spring Boot", "Microservices", "REST APIs", "SQL"]}

Do not include ```json and ``` at the start or end, and do not add any other text.

**Job Description:**
$requisition_text

**Resume:**
$candidate_text
""",
    response_schema={
        "score": "integer 0-100",
        "justification": "string",
        "matching_skills": "array of strings",
    },
)

SKILL_EXTRACTION_PROMPT = PromptTemplate(
    name=SKILL_EXTRACTION,
    version="1",
    template="""You are an expert technical recruiter. Analyze the following resume text and extract all relevant technical skills.
Return the result ONLY as a valid JSON object with a single key "skills" which contains an array of strings. Do not include any explanation or introductory text.
Do not include ```json and ``` at the start or end.

Example format:
{"skills": ["Java", "Spring Boot", "React", "PostgreSQL", "AWS", "Agile", "Team Leadership"]}

Resume Text:
---
$resume_text
---
""",
    response_schema={"skills": "array of strings"},
)

DEFAULT_PROMPTS: Dict[str, PromptTemplate] = {
    p.name: p for p in (REQUIREMENT_EXTRACTION_PROMPT, MATCH_SCORING_PROMPT, SKILL_EXTRACTION_PROMPT)
}


def load_prompt_templates(prompts_file: Optional[str] = None) -> Dict[str, PromptTemplate]:
    """Return the default templates, overlaid with any defined in ``prompts_file``.

    The file maps template names to ``{version, template, response_schema}``;
    omitted fields keep their defaults. Unknown names are added as-is.

    Example:
        match_scoring:
          version: "2"
          template: |
            Score $candidate_text against $requisition_text ...
    """
    prompts = dict(DEFAULT_PROMPTS)
    if not prompts_file:
        return prompts

    if not os.path.exists(prompts_file):
        logger.warning(f"Prompts file not found: {prompts_file}, using built-in templates")
        return prompts

    with open(prompts_file, "r", encoding="utf-8") as f:
        overrides = yaml.safe_load(f) or {}

    if not isinstance(overrides, dict):
        raise ValueError(f"Prompts file must contain a mapping, got {type(overrides).__name__}")

    for name, override in overrides.items():
        override = override or {}
        base = prompts.get(name)
        if base is None:
            if 'template' not in override:
                raise ValueError(f"Prompt '{name}' has no template")
            prompts[name] = PromptTemplate(
                name=name,
                version=str(override.get('version', '1')),
                template=override['template'],
                response_schema=override.get('response_schema') or {},
            )
        else:
            prompts[name] = replace(
                base,
                version=str(override.get('version', base.version)),
                template=override.get('template', base.template),
                response_schema=override.get('response_schema', base.response_schema),
            )
        logger.info(f"Loaded prompt override '{name}' (version {prompts[name].version})")

    return prompts
