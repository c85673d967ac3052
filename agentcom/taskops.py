"""Task commands: create, list, update and delegate tasks."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass

from agentcom.agents import AgentNotFoundError, AgentStore
from agentcom.database import Database
from agentcom.tabular import format_table
from agentcom.tasks import Task, TaskStore

_LIST_QUERY = """
    SELECT id, title, status, priority, assigned_to, created_at, updated_at
    FROM tasks
    WHERE ( ? = '' OR status = ? )
      AND ( ? = '' OR assigned_to = ? )
    ORDER BY created_at DESC
"""


class TaskCommandError(Exception):
    """Raised when a task command cannot be carried out."""


@dataclass(frozen=True)
class TaskRow:
    """One task as shown by the list command."""

    id: str
    title: str
    status: str
    priority: str
    assigned_to: str
    created_at: str
    updated_at: str

    def to_dict(self) -> dict[str, str]:
        """Return the JSON form of the row."""
        return asdict(self)


def resolve_agent_id(agents: AgentStore, name_or_id: str, project: str = "") -> str:
    """Return the ID of the agent named *name_or_id* in *project*, or with that ID.

    Raises :class:`AgentNotFoundError` when neither lookup succeeds.
    """
    try:
        return agents.find_by_name_and_project(name_or_id, project).id
    except AgentNotFoundError:
        return agents.find_by_id(name_or_id).id


def split_csv(raw: str) -> list[str]:
    """Split a comma-separated list, dropping blanks and surrounding spaces."""
    return [part.strip() for part in raw.split(",") if part.strip()]


def _resolve(agents: AgentStore, name_or_id: str, project: str, role: str) -> str:
    if not name_or_id:
        return ""
    try:
        return resolve_agent_id(agents, name_or_id, project)
    except AgentNotFoundError as exc:
        raise TaskCommandError(f"resolve {role}: {exc}") from exc


def create_task(
    database: Database,
    title: str,
    description: str = "",
    assign: str = "",
    priority: str = "medium",
    blocked_by: str = "",
    creator: str = "",
    project: str = "",
) -> dict[str, object]:
    """Create a pending task and return its JSON form.

    *assign* and *creator* are agent names (looked up in *project*) or IDs;
    *blocked_by* is a comma-separated list of task IDs.
    """
    agents = AgentStore(database)
    assigned_id = _resolve(agents, assign, project, "assignee")
    creator_id = _resolve(agents, creator, project, "creator")

    blocked = split_csv(blocked_by)
    task = TaskStore(database).insert(
        Task(
            title=title,
            description=description,
            status="pending",
            priority=priority,
            assigned_to=assigned_id,
            created_by=creator_id,
            blocked_by=json.dumps(blocked, separators=(",", ":"), ensure_ascii=False),
        )
    )
    return {
        "id": task.id,
        "title": title,
        "description": description,
        "status": "pending",
        "priority": priority,
        "assigned_to": assigned_id,
        "created_by": creator_id,
        "blocked_by": blocked,
    }


def list_tasks(
    database: Database,
    status: str = "",
    assignee: str = "",
    project: str = "",
) -> list[TaskRow]:
    """Return tasks, newest first, optionally filtered by status and assignee.

    An assignee that names no agent is used as a raw agent ID.
    """
    assignee_id = assignee
    if assignee:
        try:
            assignee_id = resolve_agent_id(AgentStore(database), assignee, project)
        except AgentNotFoundError:
            pass

    cursor = database.connection.execute(
        _LIST_QUERY, (status, status, assignee_id, assignee_id)
    )
    return [
        TaskRow(
            id=row["id"],
            title=row["title"],
            status=row["status"],
            priority=row["priority"],
            assigned_to=row["assigned_to"] or "",
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
        for row in cursor
    ]


def update_task(
    database: Database, task_id: str, status: str, result: str = ""
) -> dict[str, str]:
    """Set the status and result of *task_id*; an empty result clears it."""
    if not status:
        raise TaskCommandError("--status is required")

    cursor = database.connection.execute(
        """
        UPDATE tasks
        SET status = ?, result = NULLIF(?, ''), updated_at = datetime('now')
        WHERE id = ?
        """,
        (status, result, task_id),
    )
    if cursor.rowcount == 0:
        raise TaskCommandError(f"task not found: {task_id}")
    return {"id": task_id, "status": status, "result": result}


def delegate_task(
    database: Database, task_id: str, to: str, project: str = ""
) -> dict[str, str]:
    """Assign *task_id* to the agent named or identified by *to*."""
    if not to:
        raise TaskCommandError('required flag "to" not set')
    assignee_id = _resolve(AgentStore(database), to, project, "target")

    cursor = database.connection.execute(
        """
        UPDATE tasks
        SET assigned_to = ?, updated_at = datetime('now')
        WHERE id = ?
        """,
        (assignee_id, task_id),
    )
    if cursor.rowcount == 0:
        raise TaskCommandError(f"task not found: {task_id}")
    return {"id": task_id, "delegated_to": assignee_id}


def render_task_table(tasks: list[TaskRow]) -> str:
    """Return *tasks* as an aligned table with a header line."""
    rows = [["ID", "TITLE", "STATUS", "PRIORITY", "ASSIGNED_TO", "UPDATED_AT"]]
    rows.extend(
        [t.id, t.title, t.status, t.priority, t.assigned_to, t.updated_at] for t in tasks
    )
    return format_table(rows)