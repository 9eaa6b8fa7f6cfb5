from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import Literal, Optional
import logging
import uuid

import config
from analysis import TodoAnalyzer
from completion import CompletionService, build_completion_service
from errors import TodoAppError, UpstreamError, ValidationError
from extraction import TodoExtractor
from models import AnalysisResult, AnalyzeTodosRequest, GenerateTodoRequest, Todo, TodoCreate, TodoUpdate, shorten_title
from queries import filter_todos, select_for_timeframe, sort_todos, timeframe_stats
from database import (
    init_db,
    combine_due,
    get_todos,
    get_todo_db,
    create_todo_db,
    update_todo_db,
    delete_todo_db,
)

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    init_db()
    app.state.completion = build_completion_service()
    yield
    # Shutdown
    await app.state.completion.aclose()

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TodoAppError)
async def todo_app_error_handler(_request: Request, exc: TodoAppError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error("Upstream failure: %s (%s)", exc.message, exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "잘못된 요청입니다. 입력을 확인해주세요.", "details": str(exc.errors())},
    )


# --- Dependencies ---

def get_owner_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Identity of the signed-in user, forwarded by the auth layer in front of us."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_completion_service(request: Request) -> CompletionService:
    return request.app.state.completion


def get_now() -> datetime:
    return datetime.now(config.APP_TIMEZONE)


def _stored_due(due_date: Optional[str], due_time: Optional[str]) -> Optional[str]:
    try:
        return combine_due(due_date, due_time)
    except ValueError as e:
        raise ValidationError("due_date", "날짜 또는 시간 형식이 올바르지 않습니다.", details=str(e)) from e


# --- Todo records ---

@app.get("/todos")
def list_todos(
    search: str = "",
    priority: Literal["all", "high", "medium", "low"] = "all",
    sort: Literal["dueDate", "priority", "title", "created"] = "dueDate",
    owner_id: str = Depends(get_owner_id),
) -> list[Todo]:
    return sort_todos(filter_todos(get_todos(owner_id), search, priority), sort)


@app.post("/todos")
def create_todo(todo_data: TodoCreate, owner_id: str = Depends(get_owner_id)) -> Todo:
    return create_todo_db(
        str(uuid.uuid4()),
        owner_id,
        todo_data.title,
        todo_data.description,
        todo_data.priority.value,
        todo_data.category,
        _stored_due(todo_data.due_date, todo_data.due_time),
    )


@app.get("/todos/stats")
def get_stats(
    timeframe: Literal["today", "week"] = "today",
    owner_id: str = Depends(get_owner_id),
    now: datetime = Depends(get_now),
) -> dict:
    return timeframe_stats(get_todos(owner_id), timeframe, now)


@app.post("/todos/analysis")
async def analyze_my_todos(
    timeframe: Literal["today", "week"] = "today",
    owner_id: str = Depends(get_owner_id),
    completion: CompletionService = Depends(get_completion_service),
    now: datetime = Depends(get_now),
) -> AnalysisResult:
    """Analyze the signed-in user's todos due in the timeframe."""
    targets = select_for_timeframe(get_todos(owner_id), timeframe, now)
    return await TodoAnalyzer(completion).analyze(targets, timeframe, now)


@app.patch("/todos/{todo_id}")
def update_todo(todo_id: str, todo_data: TodoUpdate, owner_id: str = Depends(get_owner_id)) -> Todo:
    changes = todo_data.model_dump(mode="json", exclude_unset=True)

    # Only description and due_date can be cleared with null
    for field in ("title", "priority", "category", "completed"):
        if field in changes and changes[field] is None:
            del changes[field]

    current = get_todo_db(owner_id, todo_id)
    if not current:
        raise HTTPException(status_code=404, detail="Todo not found")

    if "title" in changes:
        description = changes["description"] if "description" in changes else current.description
        title, description = shorten_title(changes["title"], description)
        changes["title"] = title
        if description != current.description:
            changes["description"] = description

    due_date = changes.pop("due_date", None)
    due_time = changes.pop("due_time", None)
    if "due_date" in todo_data.model_fields_set:
        changes["due_date"] = _stored_due(due_date, due_time)
    elif due_time and current.due_date:
        changes["due_date"] = _stored_due(current.due_date[:10], due_time)

    result = update_todo_db(owner_id, todo_id, **changes)
    if not result:
        raise HTTPException(status_code=404, detail="Todo not found")
    return result


@app.delete("/todos/{todo_id}")
def delete_todo(todo_id: str, owner_id: str = Depends(get_owner_id)) -> dict:
    if not delete_todo_db(owner_id, todo_id):
        raise HTTPException(status_code=404, detail="Todo not found")
    return {"status": "deleted"}


# --- AI endpoints ---

@app.post("/api/generate-todo")
async def generate_todo(
    request: GenerateTodoRequest,
    completion: CompletionService = Depends(get_completion_service),
    now: datetime = Depends(get_now),
) -> dict:
    """Turn a natural-language prompt into todo fields for the form."""
    todo = await TodoExtractor(completion).extract(request.prompt, now)
    return {"todo": todo.model_dump(mode="json")}


@app.post("/api/analyze-todos")
async def analyze_todos(
    request: AnalyzeTodosRequest,
    completion: CompletionService = Depends(get_completion_service),
    now: datetime = Depends(get_now),
) -> AnalysisResult:
    return await TodoAnalyzer(completion).analyze(request.todos, request.timeframe, now)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
