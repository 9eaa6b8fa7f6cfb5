from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Any, Optional

TITLE_MAX_LENGTH = 50
ELLIPSIS = "..."


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def clean_categories(value) -> list[str]:
    """Trim labels, drop empties and duplicates. Accepts a list or 'a, b' text."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return []
    result = []
    for item in value:
        if not isinstance(item, str):
            continue
        label = item.strip()
        if label and label not in result:
            result.append(label)
    return result


def shorten_title(title: str, description: Optional[str]) -> tuple[str, Optional[str]]:
    """
    Cut titles longer than TITLE_MAX_LENGTH to 47 chars plus an ellipsis.
    The full title moves into description when description is empty.
    """
    if len(title) <= TITLE_MAX_LENGTH:
        return title, description
    if not description:
        description = title
    return title[:TITLE_MAX_LENGTH - len(ELLIPSIS)] + ELLIPSIS, description


class Todo(BaseModel):
    id: str
    owner_id: str
    title: str
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: list[str] = Field(default_factory=list)
    due_date: Optional[str] = None  # ISO format: YYYY-MM-DDTHH:MM
    completed: bool = False
    created_at: str  # ISO format datetime string


class TodoCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: list[str] = Field(default_factory=list)
    due_date: Optional[str] = None  # YYYY-MM-DD
    due_time: Optional[str] = None  # HH:MM

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return clean_categories(v)

    @model_validator(mode="after")
    def shorten_long_title(self):
        self.title, self.description = shorten_title(self.title, self.description)
        return self


class TodoUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)  # shortened against the stored description
    description: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[list[str]] = None
    due_date: Optional[str] = None  # YYYY-MM-DD
    due_time: Optional[str] = None  # HH:MM
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        if v is None:
            return v
        return clean_categories(v)


class ExtractionResult(BaseModel):
    title: str
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: list[str] = Field(default_factory=list)
    due_date: Optional[str] = None  # YYYY-MM-DD
    due_time: Optional[str] = None  # HH:MM


class TodoSnapshot(BaseModel):
    """The fields of a todo that are sent upstream for analysis."""
    title: str
    priority: Optional[str] = None
    due_date: Optional[str] = None
    due_time: Optional[str] = None
    completed: bool = False
    category: list[str] = Field(default_factory=list)
    created_at: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return clean_categories(v)


class AnalysisResult(BaseModel):
    summary: str
    urgentTasks: list[str] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class GenerateTodoRequest(BaseModel):
    # Left untyped so non-text prompts reach the extractor and come back as 400s.
    prompt: Any = None


class AnalyzeTodosRequest(BaseModel):
    todos: Any = None
    timeframe: Any = None
