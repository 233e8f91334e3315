"""
Model reply decoding.

Models asked for JSON sometimes wrap the object in a Markdown code
fence; the fence is stripped before decoding.  Anything else that is
not a JSON object holding string values for every required key is a
:class:`~jobdraft.errors.ParseFailure`.  Partial data is never returned.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Dict, Iterable

from ..errors import ParseFailure

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def _strip_fence(content: str) -> str:
    content = content.strip()
    match = _FENCE_RE.match(content)
    return match.group(1) if match else content


def parse_json_object(content: str, required_keys: Iterable[str], *, what: str = "model reply") -> Dict[str, str]:
    """Decode a JSON object and check that each required key holds a string.

    Args:
        content: Raw reply text from the model.
        required_keys: Keys that must be present with string values.
        what: Label used in error messages and logs.

    Returns:
        A dict restricted to ``required_keys``.  Extra keys in the reply
        are dropped.

    Raises:
        ParseFailure: If the text is not JSON, not an object, or a key is
            missing or not a string.
    """
    try:
        data = json.loads(_strip_fence(content or ""))
    except json.JSONDecodeError as exc:
        logger.warning("Failed to decode %s as JSON: %s", what, exc)
        raise ParseFailure(f"{what} is not valid JSON: {exc}", raw=content) from exc
    if not isinstance(data, dict):
        logger.warning("%s decoded to %s, expected an object", what, type(data).__name__)
        raise ParseFailure(f"{what} must be a JSON object", raw=content)
    result: Dict[str, str] = {}
    for key in required_keys:
        if key not in data:
            logger.warning("%s is missing key '%s'", what, key)
            raise ParseFailure(f"{what} is missing required key '{key}'", raw=content)
        value = data[key]
        if not isinstance(value, str):
            logger.warning("%s key '%s' has type %s", what, key, type(value).__name__)
            raise ParseFailure(f"{what} key '{key}' must be a string", raw=content)
        result[key] = value
    return result
