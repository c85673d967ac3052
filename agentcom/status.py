"""System status summary: agent, message and task counts."""

from __future__ import annotations

from dataclasses import dataclass, field

from agentcom.database import Database
from agentcom.tabular import format_table

_TOTAL_AGENTS = "SELECT COUNT(*) FROM agents WHERE (? = '' OR project = ?)"
_ALIVE_AGENTS = (
    "SELECT COUNT(*) FROM agents WHERE status = 'alive' AND (? = '' OR project = ?)"
)
_DEAD_AGENTS = (
    "SELECT COUNT(*) FROM agents WHERE status = 'dead' AND (? = '' OR project = ?)"
)
_TOTAL_MESSAGES = """
    SELECT COUNT(*)
    FROM messages m
    LEFT JOIN agents sender ON sender.id = m.from_agent
    LEFT JOIN agents recipient ON recipient.id = m.to_agent
    WHERE (? = '' OR sender.project = ? OR recipient.project = ?)
"""
_UNREAD_MESSAGES = """
    SELECT COUNT(*)
    FROM messages m
    LEFT JOIN agents sender ON sender.id = m.from_agent
    LEFT JOIN agents recipient ON recipient.id = m.to_agent
    WHERE m.read_at IS NULL AND (? = '' OR sender.project = ? OR recipient.project = ?)
"""
_TOTAL_TASKS = """
    SELECT COUNT(*)
    FROM tasks
    LEFT JOIN agents assigned ON assigned.id = tasks.assigned_to
    LEFT JOIN agents created ON created.id = tasks.created_by
    WHERE (? = '' OR assigned.project = ? OR created.project = ?)
"""
_TASKS_BY_STATUS = """
    SELECT tasks.status, COUNT(*)
    FROM tasks
    LEFT JOIN agents assigned ON assigned.id = tasks.assigned_to
    LEFT JOIN agents created ON created.id = tasks.created_by
    WHERE (? = '' OR assigned.project = ? OR created.project = ?)
    GROUP BY tasks.status
    ORDER BY tasks.status
"""


@dataclass(frozen=True)
class StatusSummary:
    """Counts describing the state of the system, optionally for one project."""

    project: str
    total_agents: int
    alive_agents: int
    dead_agents: int
    total_messages: int
    unread_messages: int
    total_tasks: int
    tasks_by_status: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Return the JSON form of the summary."""
        return {
            "project": self.project,
            "total_agents": self.total_agents,
            "alive_agents": self.alive_agents,
            "dead_agents": self.dead_agents,
            "total_messages": self.total_messages,
            "unread_messages": self.unread_messages,
            "total_tasks": self.total_tasks,
            "tasks_by_status": dict(self.tasks_by_status),
        }


def _scalar_int(database: Database, sql: str, params: tuple) -> int:
    row = database.connection.execute(sql, params).fetchone()
    if row is None or row[0] is None:
        return 0
    return int(row[0])


def collect_status(database: Database, project: str = "") -> StatusSummary:
    """Count agents, messages and tasks, restricted to *project* if it is set."""
    two = (project, project)
    three = (project, project, project)
    tasks_by_status = {
        status: int(count)
        for status, count in database.connection.execute(_TASKS_BY_STATUS, three)
    }
    return StatusSummary(
        project=project,
        total_agents=_scalar_int(database, _TOTAL_AGENTS, two),
        alive_agents=_scalar_int(database, _ALIVE_AGENTS, two),
        dead_agents=_scalar_int(database, _DEAD_AGENTS, two),
        total_messages=_scalar_int(database, _TOTAL_MESSAGES, three),
        unread_messages=_scalar_int(database, _UNREAD_MESSAGES, three),
        total_tasks=_scalar_int(database, _TOTAL_TASKS, three),
        tasks_by_status=tasks_by_status,
    )


def render_status_table(summary: StatusSummary) -> str:
    """Return the summary as a METRIC/VALUE table."""
    rows: list[list[object]] = [
        ["METRIC", "VALUE"],
        ["project", summary.project],
        ["total_agents", summary.total_agents],
        ["alive_agents", summary.alive_agents],
        ["dead_agents", summary.dead_agents],
        ["total_messages", summary.total_messages],
        ["unread_messages", summary.unread_messages],
        ["total_tasks", summary.total_tasks],
    ]
    rows.extend([f"tasks_{status}", count] for status, count in summary.tasks_by_status.items())
    return format_table(rows)