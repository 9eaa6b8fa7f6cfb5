import sqlite3
import json
import logging
from datetime import datetime
from typing import Optional
from contextlib import contextmanager

import config
from models import Todo

logger = logging.getLogger(__name__)

DATABASE_PATH = config.DATABASE_PATH

# Columns a caller may change through update_todo_db
UPDATABLE_FIELDS = ("title", "description", "priority", "category", "due_date", "completed")


@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db():
    """Initialize database by running Alembic migrations."""
    import subprocess
    import os

    # Run alembic upgrade from the backend directory
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    env = dict(os.environ, DATABASE_PATH=os.path.abspath(DATABASE_PATH))
    subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=backend_dir,
        env=env,
        check=True
    )
    logger.info("Database ready at %s", DATABASE_PATH)


def combine_due(due_date: Optional[str], due_time: Optional[str] = None) -> Optional[str]:
    """
    Build the stored due_date (YYYY-MM-DDTHH:MM) from form fields.
    A date without a time is stored at 00:00. Raises ValueError on bad input.
    """
    if not due_date:
        return None
    day = datetime.strptime(due_date[:10], "%Y-%m-%d").date()
    if due_time:
        clock = datetime.strptime(due_time, "%H:%M").time()
        return f"{day.isoformat()}T{clock.strftime('%H:%M')}"
    return f"{day.isoformat()}T00:00"


def _row_to_todo(row) -> Todo:
    """Convert a database row to a Todo model."""
    return Todo(
        id=row["id"],
        owner_id=row["owner_id"],
        title=row["title"],
        description=row["description"],
        priority=row["priority"] or "medium",
        category=json.loads(row["category"] or "[]"),
        due_date=row["due_date"],
        completed=bool(row["completed"]),
        created_at=row["created_at"],
    )


def get_todos(owner_id: str) -> list[Todo]:
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM todos WHERE owner_id = ? ORDER BY created_at DESC",
            (owner_id,)
        ).fetchall()
        return [_row_to_todo(row) for row in rows]


def get_todo_db(owner_id: str, todo_id: str) -> Optional[Todo]:
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM todos WHERE id = ? AND owner_id = ?",
            (todo_id, owner_id)
        ).fetchone()
        return _row_to_todo(row) if row else None


def create_todo_db(
    todo_id: str,
    owner_id: str,
    title: str,
    description: Optional[str] = None,
    priority: str = "medium",
    category: Optional[list[str]] = None,
    due_date: Optional[str] = None,
) -> Todo:
    """Insert a todo owned by owner_id. due_date is YYYY-MM-DDTHH:MM or None."""
    created_at = datetime.now(config.APP_TIMEZONE).isoformat()
    category = category or []

    with get_db() as conn:
        conn.execute(
            """INSERT INTO todos
               (id, owner_id, title, description, priority, category, due_date, completed, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)""",
            (todo_id, owner_id, title, description, priority, json.dumps(category, ensure_ascii=False), due_date, created_at)
        )
        conn.commit()

    return Todo(
        id=todo_id,
        owner_id=owner_id,
        title=title,
        description=description,
        priority=priority,
        category=category,
        due_date=due_date,
        completed=False,
        created_at=created_at,
    )


def update_todo_db(owner_id: str, todo_id: str, /, **updates) -> Optional[Todo]:
    """
    Update a todo with any fields provided.
    Only updates fields that differ from current values.
    Returns None when the todo does not exist or belongs to someone else.
    """
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM todos WHERE id = ? AND owner_id = ?",
            (todo_id, owner_id)
        ).fetchone()
        if not row:
            return None

        changes = {}
        for field, new_value in updates.items():
            if field not in UPDATABLE_FIELDS:
                continue
            # Convert to SQLite storage form before comparing
            if isinstance(new_value, bool):
                new_value = int(new_value)
            elif field == "category":
                new_value = json.dumps(new_value or [], ensure_ascii=False)
            if new_value != row[field]:
                changes[field] = new_value

        if changes:
            set_clause = ", ".join(f"{field} = ?" for field in changes.keys())
            values = list(changes.values()) + [todo_id, owner_id]
            conn.execute(f"UPDATE todos SET {set_clause} WHERE id = ? AND owner_id = ?", values)
            conn.commit()

        updated_row = conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,)).fetchone()
        return _row_to_todo(updated_row)


def delete_todo_db(owner_id: str, todo_id: str) -> bool:
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM todos WHERE id = ? AND owner_id = ?", (todo_id, owner_id))
        conn.commit()
        return cursor.rowcount > 0
