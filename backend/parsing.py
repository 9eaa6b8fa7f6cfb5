"""
JSON recovery for completion-service replies.

The model is asked for bare JSON but sometimes wraps it in a markdown code
block. Each sanitizer rewrites the raw text; they are tried in order and the
first one that yields valid JSON wins.
"""
import json
import logging
from typing import Any, Callable, Sequence

from errors import UpstreamError

logger = logging.getLogger(__name__)

Sanitizer = Callable[[str], str]


def as_is(text: str) -> str:
    return text


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` line and a trailing ``` line."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = lines[1:]  # ```json
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines)
    elif text.endswith("```"):
        text = text[:-3]
    return text.strip()


DEFAULT_SANITIZERS: tuple[Sanitizer, ...] = (as_is, strip_code_fence)


def parse_json_response(text: str, sanitizers: Sequence[Sanitizer] = DEFAULT_SANITIZERS) -> Any:
    if not isinstance(text, str):
        raise UpstreamError(details="unparseable response: reply was not text")

    for sanitize in sanitizers:
        candidate = sanitize(text)
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.warning("JSON parse failed after %s: %s", sanitize.__name__, e)

    raise UpstreamError(details=f"unparseable response: {text[:200]}")
