"""Persistence of tasks."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from agentcom.database import Database, generate_id

_SELECT_COLUMNS = """
    SELECT
        id, title, description, status, priority, assigned_to, created_by,
        blocked_by, result, created_at, updated_at
    FROM tasks
"""


class TaskNotFoundError(LookupError):
    """Raised when no task matches the lookup."""

    def __init__(self, message: str = "task not found") -> None:
        super().__init__(message)


@dataclass
class Task:
    """A task row.  Empty strings stand for unset optional fields."""

    title: str = ""
    description: str = ""
    status: str = ""
    priority: str = ""
    assigned_to: str = ""
    created_by: str = ""
    blocked_by: str = ""
    result: str = ""
    id: str = ""
    created_at: str = ""
    updated_at: str = ""


def _nullable(value: str) -> str | None:
    return value if value else None


def _task_from_row(row: sqlite3.Row) -> Task:
    return Task(
        id=row["id"],
        title=row["title"],
        description=row["description"] or "",
        status=row["status"],
        priority=row["priority"],
        assigned_to=row["assigned_to"] or "",
        created_by=row["created_by"] or "",
        blocked_by=row["blocked_by"] or "",
        result=row["result"] or "",
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class TaskStore:
    """Create, read and update task rows."""

    def __init__(self, database: Database) -> None:
        self._conn = database.connection

    def _fetch_all(self, sql: str, params: tuple = ()) -> list[Task]:
        return [_task_from_row(row) for row in self._conn.execute(sql, params)]

    def insert(self, task: Task) -> Task:
        """Insert *task* under a freshly generated ``tsk_`` ID."""
        task.id = generate_id("tsk_")
        self._conn.execute(
            """
            INSERT INTO tasks (
                id, title, description, status, priority, assigned_to, created_by,
                blocked_by, result
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.id,
                task.title,
                _nullable(task.description),
                task.status,
                task.priority,
                _nullable(task.assigned_to),
                _nullable(task.created_by),
                task.blocked_by,
                _nullable(task.result),
            ),
        )
        return task

    def update(self, task: Task) -> None:
        """Update every field of *task* and refresh ``updated_at``."""
        cursor = self._conn.execute(
            """
            UPDATE tasks
            SET title = ?, description = ?, status = ?, priority = ?, assigned_to = ?,
                created_by = ?, blocked_by = ?, result = ?, updated_at = datetime('now')
            WHERE id = ?
            """,
            (
                task.title,
                _nullable(task.description),
                task.status,
                task.priority,
                _nullable(task.assigned_to),
                _nullable(task.created_by),
                task.blocked_by,
                _nullable(task.result),
                task.id,
            ),
        )
        if cursor.rowcount == 0:
            raise TaskNotFoundError()

    def find_by_id(self, task_id: str) -> Task:
        """Return the task with *task_id*."""
        row = self._conn.execute(_SELECT_COLUMNS + " WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            raise TaskNotFoundError()
        return _task_from_row(row)

    def list_all(self) -> list[Task]:
        """Return every task, oldest first."""
        return self._fetch_all(_SELECT_COLUMNS + " ORDER BY created_at ASC")

    def list_by_status(self, status: str) -> list[Task]:
        """Return tasks with *status*, oldest first."""
        return self._fetch_all(
            _SELECT_COLUMNS + " WHERE status = ? ORDER BY created_at ASC", (status,)
        )

    def list_by_assignee(self, agent_id: str) -> list[Task]:
        """Return tasks assigned to *agent_id*, oldest first."""
        return self._fetch_all(
            _SELECT_COLUMNS + " WHERE assigned_to = ? ORDER BY created_at ASC",
            (agent_id,),
        )

    def update_status(self, task_id: str, status: str, result: str) -> None:
        """Set the status and result of *task_id* and refresh ``updated_at``."""
        cursor = self._conn.execute(
            """
            UPDATE tasks
            SET status = ?, result = ?, updated_at = datetime('now')
            WHERE id = ?
            """,
            (status, _nullable(result), task_id),
        )
        if cursor.rowcount == 0:
            raise TaskNotFoundError()