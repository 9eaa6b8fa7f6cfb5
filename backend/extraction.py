"""
Natural-language todo extraction.

Turns free text like "내일 오후 3시까지 보고서 제출" into an ExtractionResult
used to prefill the todo form. Nothing is persisted here.
"""
import logging
import re
from datetime import date, datetime
from typing import Any, Optional

import config
from completion import CompletionService
from errors import UpstreamError, ValidationError
from models import ELLIPSIS, TITLE_MAX_LENGTH, ExtractionResult, Priority, clean_categories, shorten_title
from parsing import parse_json_response
from prompts import build_extraction_prompt

logger = logging.getLogger(__name__)

PROMPT_MIN_LENGTH = 2
PROMPT_MAX_LENGTH = 500
FALLBACK_TITLE_LENGTH = 30
DEFAULT_DUE_TIME = "09:00"

_WHITESPACE = re.compile(r"\s+")
_TIME = re.compile(r"^(\d{1,2}):(\d{2})$")


def normalize_prompt(raw: Any) -> str:
    """Trim, collapse whitespace runs and enforce the 2..500 length window."""
    if not raw or not isinstance(raw, str):
        raise ValidationError("empty input", "잘못된 입력입니다. 내용을 텍스트로 입력해주세요.")

    prompt = _WHITESPACE.sub(" ", raw.strip())

    if len(prompt) < PROMPT_MIN_LENGTH:
        raise ValidationError("length", "할 일 내용은 최소 2자 이상 구체적으로 입력해주세요.")
    if len(prompt) > PROMPT_MAX_LENGTH:
        raise ValidationError("length", "할 일 내용은 최대 500자까지 입력 가능합니다.")
    return prompt


def parse_priority(value: Any) -> Priority:
    if isinstance(value, str):
        try:
            return Priority(value.strip().lower())
        except ValueError:
            pass
    if value:
        logger.info("Unrecognized priority %r, defaulting to medium", value)
    return Priority.MEDIUM


def parse_due_date(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10]).isoformat()
    except ValueError:
        return None


def parse_due_time(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    match = _TIME.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def coerce_extraction(parsed: Any) -> dict:
    """Validate the upstream JSON shape and keep only well-formed fields."""
    if isinstance(parsed, list) and len(parsed) == 1:
        parsed = parsed[0]
    if not isinstance(parsed, dict):
        raise UpstreamError(details=f"unexpected response shape: {type(parsed).__name__}")

    title = parsed.get("title")
    description = parsed.get("description")
    return {
        "title": title.strip() if isinstance(title, str) else "",
        "description": description.strip() if isinstance(description, str) and description.strip() else None,
        "priority": parsed.get("priority"),
        "category": clean_categories(parsed.get("category")),
        "due_date": parse_due_date(parsed.get("due_date")),
        "due_time": parse_due_time(parsed.get("due_time")),
    }


def post_process(fields: dict, prompt: str, today: date) -> ExtractionResult:
    """Corrections applied to every extraction, whatever the model returned."""
    title = fields["title"]
    description = fields["description"]

    if not title:
        if len(prompt) > FALLBACK_TITLE_LENGTH:
            title = prompt[:FALLBACK_TITLE_LENGTH] + ELLIPSIS
        else:
            title = prompt
        logger.info("Missing title, derived from prompt")
    elif len(title) > TITLE_MAX_LENGTH:
        title, description = shorten_title(title, description)
        logger.info("Title longer than %d chars, truncated", TITLE_MAX_LENGTH)

    due_date = fields["due_date"]
    due_time = fields["due_time"]
    # Past dates from the model are treated as mistakes and moved to today.
    # TODO: let an explicit past date through once the form can mark retroactive entries.
    if due_date and date.fromisoformat(due_date) < today:
        logger.info("Due date %s is in the past, moved to %s", due_date, today.isoformat())
        due_date = today.isoformat()
    if due_date and not due_time:
        due_time = DEFAULT_DUE_TIME
    if not due_date:
        due_time = None

    return ExtractionResult(
        title=title,
        description=description,
        priority=parse_priority(fields["priority"]),
        category=fields["category"],
        due_date=due_date,
        due_time=due_time,
    )


class TodoExtractor:
    def __init__(self, completion: CompletionService):
        self.completion = completion

    async def extract(self, raw: Any, now: datetime) -> ExtractionResult:
        prompt = normalize_prompt(raw)

        reply = await self.completion.complete(
            build_extraction_prompt(now),
            prompt,
            max_tokens=config.EXTRACTION_MAX_TOKENS,
            temperature=config.EXTRACTION_TEMPERATURE,
        )
        parsed = parse_json_response(reply)
        return post_process(coerce_extraction(parsed), prompt, now.date())
