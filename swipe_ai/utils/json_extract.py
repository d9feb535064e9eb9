"""Recover a single JSON object from free-form model output

Models wrap JSON in prose, in ```json fences, or append commentary after
the closing brace. We take the fenced block when there is one and then
slice from the first '{' to the last '}'.
"""
import json
import logging
import re
from typing import Any, Dict

from swipe_ai.errors import MalformedOutputError

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


def extract_json_text(text: str) -> str:
    """Return the candidate JSON slice of a model response"""
    cleaned = (text or "").strip()

    fenced = _FENCED_BLOCK.search(cleaned)
    if fenced:
        cleaned = fenced.group(1).strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        cleaned = cleaned[start:end + 1]

    return cleaned


def parse_json_response(text: str) -> Dict[str, Any]:
    """
    Parse a model response into a JSON object.

    Raises:
        MalformedOutputError: the slice is not valid JSON or not an object
    """
    candidate = extract_json_text(text)
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse model response as JSON: {e} (first 200 chars: {candidate[:200]!r})")
        raise MalformedOutputError(f"Model response is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise MalformedOutputError(
            f"Expected a JSON object in model response, got {type(parsed).__name__}"
        )
    return parsed
