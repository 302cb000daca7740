"""
Best-effort JSON extraction from generator output.

The generator is asked for JSON but often wraps it in prose or markdown
fences. ``parse_json_object`` tries, in order:

1. the whole response
2. the body of a fenced ```json block
3. the substring from the first "{" to the last "}"

and returns ``None`` when none of them decodes to a JSON object.
"""

import json
import re
from typing import Any, Dict, Optional

_FENCE_RE = re.compile(r"```(?:json|xml)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def extract_json_block(text: str) -> str:
    """Substring from the first '{' to the last '}', or the input unchanged."""
    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        return text[start:end + 1]
    return text


def strip_code_fences(text: str) -> str:
    """Return the body of the first fenced block, or the stripped text."""
    match = _FENCE_RE.search(text or "")
    if match:
        return match.group(1).strip()
    return (text or "").strip()


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, dict) else None


def parse_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse a JSON object out of free-form text, or None."""
    if not text or not text.strip():
        return None

    for candidate in (text.strip(), strip_code_fences(text), extract_json_block(text)):
        parsed = _loads_object(candidate)
        if parsed is not None:
            return parsed
    return None


def pretty_json(text: str) -> Optional[str]:
    """Re-indent text when it is valid JSON; None otherwise."""
    try:
        return json.dumps(json.loads(text), indent=2)
    except (json.JSONDecodeError, TypeError):
        return None
