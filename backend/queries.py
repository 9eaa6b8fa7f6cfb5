"""
In-memory list views over a user's todos: search, priority filter, sort order,
timeframe selection and completion stats.
"""
from datetime import date, datetime, timedelta
from typing import Optional

from models import Todo

PRIORITY_SCORE = {"high": 3, "medium": 2, "low": 1}
SORT_ORDERS = ("dueDate", "priority", "title", "created")
WEEKDAY_LABELS = ["월", "화", "수", "목", "금", "토", "일"]


def _due_day(todo: Todo) -> Optional[date]:
    if not todo.due_date:
        return None
    try:
        return date.fromisoformat(todo.due_date[:10])
    except ValueError:
        return None


def filter_todos(todos: list[Todo], search: str = "", priority: str = "all") -> list[Todo]:
    needle = (search or "").lower()
    result = []
    for todo in todos:
        matches_search = needle in todo.title.lower() or (
            todo.description is not None and needle in todo.description.lower()
        )
        matches_priority = priority == "all" or todo.priority.value == priority
        if matches_search and matches_priority:
            result.append(todo)
    return result


def sort_todos(todos: list[Todo], order: str = "dueDate") -> list[Todo]:
    if order == "dueDate":
        # Undated todos go last
        return sorted(todos, key=lambda t: (t.due_date is None, t.due_date or ""))
    if order == "priority":
        return sorted(todos, key=lambda t: PRIORITY_SCORE[t.priority.value], reverse=True)
    if order == "title":
        return sorted(todos, key=lambda t: t.title)
    return sorted(todos, key=lambda t: t.created_at, reverse=True)


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def select_for_timeframe(todos: list[Todo], timeframe: str, now: datetime) -> list[Todo]:
    """Todos due today, or due within the current Monday-start week."""
    today = now.date()
    start = week_start(today)
    end = start + timedelta(days=7)

    result = []
    for todo in todos:
        day = _due_day(todo)
        if day is None:
            continue
        if timeframe == "today" and day == today:
            result.append(todo)
        elif timeframe == "week" and start <= day < end:
            result.append(todo)
    return result


def timeframe_stats(todos: list[Todo], timeframe: str, now: datetime) -> dict:
    targets = select_for_timeframe(todos, timeframe, now)
    total = len(targets)
    completed = sum(1 for t in targets if t.completed)

    start = week_start(now.date())
    weekly = []
    for offset, label in enumerate(WEEKDAY_LABELS):
        day = start + timedelta(days=offset)
        day_todos = [t for t in todos if _due_day(t) == day]
        weekly.append({
            "day": label,
            "date": day.isoformat(),
            "completed": sum(1 for t in day_todos if t.completed),
            "total": len(day_todos),
        })

    return {
        "timeframe": timeframe,
        "total": total,
        "completed": completed,
        "rate": 0 if total == 0 else int(completed * 100 / total + 0.5),
        "pending": total - completed,
        "weekly": weekly,
    }
