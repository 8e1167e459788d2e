"""Results produced by the inference-backed matcher components."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class RequirementResult:
    """Structured requirement extracted from a requisition.

    extracted is False when the value is the fail-open fallback rather than
    a model answer; such a value gates one run but is never stored.
    """
    required_experience: int = 0
    extracted: bool = True


@dataclass(frozen=True)
class MatchScore:
    """Score of one candidate against one requisition.

    score is clamped to 0-100; matching_skills keeps the order the model gave.
    """
    score: int
    justification: str = ""
    matching_skills: List[str] = field(default_factory=list)
