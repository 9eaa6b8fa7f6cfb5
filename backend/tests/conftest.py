"""
Shared pytest fixtures for backend tests.
Uses a temp-file SQLite database and a scripted completion service.
"""
import pytest
import sqlite3
import sys
import os
from datetime import datetime
from zoneinfo import ZoneInfo

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database
from completion import CompletionService

NOW = datetime(2024, 1, 1, 8, 0, tzinfo=ZoneInfo("Asia/Seoul"))  # a Monday
OWNER = "user-1"


class FakeCompletion(CompletionService):
    """Returns queued replies in order and records every call."""

    def __init__(self):
        self.replies: list[str] = []
        self.error: Exception | None = None
        self.calls: list[dict] = []
        self.closed = False

    async def complete(self, system: str, message: str, *, max_tokens: int, temperature: float) -> str:
        self.calls.append({"system": system, "message": message, "max_tokens": max_tokens})
        if self.error:
            raise self.error
        return self.replies.pop(0)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def completion():
    return FakeCompletion()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def test_db(monkeypatch, tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because database.py opens new connections per operation.
    """
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(database, "DATABASE_PATH", db_path)
    monkeypatch.setattr(database, "init_db", lambda: None)

    # Create tables directly (skip alembic for tests)
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE todos (
            id TEXT PRIMARY KEY,
            owner_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT,
            priority TEXT NOT NULL DEFAULT 'medium'
                CHECK (priority IN ('high', 'medium', 'low')),
            category TEXT NOT NULL DEFAULT '[]',
            due_date TEXT,
            completed INTEGER DEFAULT 0,
            created_at TEXT NOT NULL
        );
    """)
    conn.commit()
    conn.close()

    yield db_path


@pytest.fixture
def app_client(test_db, completion, monkeypatch):
    """
    Create a test client for the FastAPI app signed in as OWNER.
    Skips alembic and swaps in the fake completion service and a fixed clock.
    """
    from fastapi.testclient import TestClient
    import main

    # Skip alembic in tests - tables already created by test_db fixture
    monkeypatch.setattr(main, "init_db", lambda: None)

    main.app.dependency_overrides[main.get_completion_service] = lambda: completion
    main.app.dependency_overrides[main.get_now] = lambda: NOW
    with TestClient(main.app, headers={"X-User-Id": OWNER}) as client:
        yield client
    main.app.dependency_overrides.clear()
