"""
Parsing of inference replies that should contain a single JSON object.

Models often wrap JSON in markdown code fences even when told not to, so
every caller strips ```json ... ``` / ``` ... ``` before decoding.
"""
import json
from typing import Any, Dict, Optional

from core.exceptions import InferenceResponseError


def strip_code_fences(raw_text: str) -> str:
    """Remove a leading ```json or ``` fence and a trailing ``` fence."""
    cleaned = (raw_text or "").strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[len("```"):]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-len("```")]
    return cleaned.strip()


def parse_json_object(raw_text: str) -> Dict[str, Any]:
    """Decode a fenced or bare JSON object.

    Raises:
        InferenceResponseError: if the text is not valid JSON or not an object
    """
    cleaned = strip_code_fences(raw_text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InferenceResponseError(
            f"Reply is not valid JSON ({e.msg} at line {e.lineno}, column {e.colno}): {cleaned[:200]!r}"
        ) from e

    if not isinstance(data, dict):
        raise InferenceResponseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def coerce_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Best-effort integer conversion for numeric fields in replies."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, (float, str)):
        try:
            return int(float(value.strip() if isinstance(value, str) else value))
        except (ValueError, OverflowError):
            return default
    return default
