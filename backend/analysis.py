"""
Productivity analysis of a set of todos for a timeframe ("today" or "week").
"""
import json
import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ValidationError as PydanticValidationError

import config
from completion import CompletionService
from errors import ANALYSIS_FAILED_MESSAGE, RATE_LIMITED_MESSAGE, RateLimitedError, UpstreamError, ValidationError
from models import AnalysisResult, TodoSnapshot
from parsing import parse_json_response
from prompts import ANALYSIS_MESSAGE, TIMEFRAME_LABELS, build_analysis_prompt

logger = logging.getLogger(__name__)

TIMEFRAMES = ("today", "week")
MAX_URGENT_TASKS = 3

EMPTY_SUMMARIES = {
    "today": "오늘 예정된 할 일이 없습니다.",
    "week": "이번 주 예정된 할 일이 없습니다.",
}


def empty_analysis(timeframe: str) -> AnalysisResult:
    return AnalysisResult(
        summary=EMPTY_SUMMARIES[timeframe],
        urgentTasks=[],
        insights=["할 일을 추가하면 AI가 분석해드립니다."],
        recommendations=["먼저 오늘 해야 할 일을 기록하는 것부터 시작해보세요."],
    )


def validate_timeframe(timeframe: Any) -> str:
    if timeframe not in TIMEFRAMES:
        raise ValidationError("timeframe", "분석 기간은 'today' 또는 'week'만 가능합니다.")
    return timeframe


def to_snapshots(todos: Any) -> list[TodoSnapshot]:
    """Reduce todos to the fields sent upstream; descriptions never leave the server."""
    if not isinstance(todos, list):
        raise ValidationError("todos", "할 일 목록 데이터가 올바르지 않습니다.")

    snapshots = []
    for todo in todos:
        if isinstance(todo, BaseModel):
            todo = todo.model_dump(mode="json")
        if not isinstance(todo, dict):
            raise ValidationError("todos", "할 일 목록 데이터가 올바르지 않습니다.")
        try:
            snapshots.append(TodoSnapshot.model_validate(todo))
        except PydanticValidationError as e:
            raise ValidationError("todos", "할 일 목록 데이터가 올바르지 않습니다.", details=str(e)) from e
    return snapshots


def _text_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    items = [item if isinstance(item, str) else json.dumps(item, ensure_ascii=False) for item in value]
    return [item.strip() for item in items if item.strip()]


def coerce_analysis(parsed: Any) -> AnalysisResult:
    if not isinstance(parsed, dict):
        raise UpstreamError(details=f"unexpected response shape: {type(parsed).__name__}")
    summary = parsed.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise UpstreamError(details="analysis response has no summary")

    return AnalysisResult(
        summary=summary.strip(),
        urgentTasks=_text_list(parsed.get("urgentTasks"))[:MAX_URGENT_TASKS],
        insights=_text_list(parsed.get("insights")),
        recommendations=_text_list(parsed.get("recommendations")),
    )


class TodoAnalyzer:
    def __init__(self, completion: CompletionService):
        self.completion = completion

    async def analyze(self, todos: Any, timeframe: Any, now: datetime) -> AnalysisResult:
        snapshots = to_snapshots(todos)
        timeframe = validate_timeframe(timeframe)

        if not snapshots:
            return empty_analysis(timeframe)

        todos_json = json.dumps([s.model_dump() for s in snapshots], ensure_ascii=False)
        message = ANALYSIS_MESSAGE.format(timeframe_label=TIMEFRAME_LABELS[timeframe], todos_json=todos_json)

        # Analysis failures always surface as 500; rate limits keep their message.
        try:
            reply = await self.completion.complete(
                build_analysis_prompt(now, timeframe),
                message,
                max_tokens=config.ANALYSIS_MAX_TOKENS,
                temperature=config.ANALYSIS_TEMPERATURE,
            )
            return coerce_analysis(parse_json_response(reply))
        except RateLimitedError as e:
            raise UpstreamError(RATE_LIMITED_MESSAGE, details=e.details) from e
        except UpstreamError as e:
            raise UpstreamError(ANALYSIS_FAILED_MESSAGE, details=e.details) from e
