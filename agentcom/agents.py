"""Persistence of registered agents."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone

from agentcom.database import Database, generate_id

_SQLITE_CONSTRAINT_UNIQUE = 2067
_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_SELECT_COLUMNS = """
    SELECT
        id, name, type, pid, socket_path, capabilities, workdir, project, status,
        registered_at, last_heartbeat
    FROM agents
"""


class AgentNotFoundError(LookupError):
    """Raised when no agent matches the lookup."""

    def __init__(self, message: str = "agent not found") -> None:
        super().__init__(message)


class DuplicateNameError(ValueError):
    """Raised when an agent name is already taken within its project."""

    def __init__(self, message: str = "agent name already exists in this project") -> None:
        super().__init__(message)


@dataclass
class Agent:
    """A registered agent record."""

    name: str = ""
    type: str = ""
    id: str = ""
    pid: int = 0
    socket_path: str = ""
    capabilities: str = ""
    workdir: str = ""
    project: str = ""
    status: str = ""
    registered_at: datetime | None = None
    last_heartbeat: datetime | None = None


def _nullable(value: str) -> str | None:
    return value if value else None


def _parse_timestamp(value: str | None, column: str) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value, _TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise ValueError(f"parse {column}: {exc}") from exc


def _agent_from_row(row: sqlite3.Row) -> Agent:
    return Agent(
        id=row["id"],
        name=row["name"],
        type=row["type"],
        pid=int(row["pid"]) if row["pid"] is not None else 0,
        socket_path=row["socket_path"] or "",
        capabilities=row["capabilities"] or "",
        workdir=row["workdir"] or "",
        project=row["project"] or "",
        status=row["status"],
        registered_at=_parse_timestamp(row["registered_at"], "registered_at"),
        last_heartbeat=_parse_timestamp(row["last_heartbeat"], "last_heartbeat"),
    )


def _is_unique_name_violation(exc: sqlite3.IntegrityError) -> bool:
    code = getattr(exc, "sqlite_errorcode", None)
    if code is not None:
        return code == _SQLITE_CONSTRAINT_UNIQUE
    return "UNIQUE constraint failed: agents.name" in str(exc)


class AgentStore:
    """Create, read, update and delete agent rows."""

    def __init__(self, database: Database) -> None:
        self._conn = database.connection

    def _write(self, sql: str, params: tuple) -> int:
        try:
            cursor = self._conn.execute(sql, params)
        except sqlite3.IntegrityError as exc:
            if _is_unique_name_violation(exc):
                raise DuplicateNameError() from exc
            raise
        return cursor.rowcount

    def _fetch_one(self, sql: str, params: tuple) -> Agent:
        row = self._conn.execute(sql, params).fetchone()
        if row is None:
            raise AgentNotFoundError()
        return _agent_from_row(row)

    def _fetch_all(self, sql: str, params: tuple = ()) -> list[Agent]:
        return [_agent_from_row(row) for row in self._conn.execute(sql, params)]

    def insert(self, agent: Agent) -> Agent:
        """Insert *agent*, assigning a fresh ``agt_`` ID if it has none."""
        if not agent.id:
            agent.id = generate_id("agt_")
        self._write(
            """
            INSERT INTO agents (
                id, name, type, pid, socket_path, capabilities, workdir, project, status
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                agent.id,
                agent.name,
                agent.type,
                agent.pid,
                _nullable(agent.socket_path),
                agent.capabilities,
                _nullable(agent.workdir),
                agent.project,
                agent.status,
            ),
        )
        return agent

    def update(self, agent: Agent) -> None:
        """Update the mutable fields of an existing agent."""
        affected = self._write(
            """
            UPDATE agents
            SET name = ?, type = ?, pid = ?, socket_path = ?, capabilities = ?,
                workdir = ?, project = ?, status = ?
            WHERE id = ?
            """,
            (
                agent.name,
                agent.type,
                agent.pid,
                _nullable(agent.socket_path),
                agent.capabilities,
                _nullable(agent.workdir),
                agent.project,
                agent.status,
                agent.id,
            ),
        )
        if affected == 0:
            raise AgentNotFoundError()

    def delete(self, agent_id: str) -> None:
        """Delete the agent with *agent_id*."""
        if self._write("DELETE FROM agents WHERE id = ?", (agent_id,)) == 0:
            raise AgentNotFoundError()

    def find_by_name(self, name: str) -> Agent:
        """Return the earliest registered agent called *name* in any project."""
        return self._fetch_one(
            _SELECT_COLUMNS + " WHERE name = ? ORDER BY registered_at ASC LIMIT 1",
            (name,),
        )

    def find_by_name_and_project(self, name: str, project: str) -> Agent:
        """Return the agent called *name* in *project*; any project if empty."""
        if not project:
            return self.find_by_name(name)
        return self._fetch_one(
            _SELECT_COLUMNS
            + " WHERE name = ? AND project = ? ORDER BY registered_at ASC LIMIT 1",
            (name, project),
        )

    def find_by_id(self, agent_id: str) -> Agent:
        """Return the agent with *agent_id*."""
        return self._fetch_one(_SELECT_COLUMNS + " WHERE id = ?", (agent_id,))

    def list_all(self) -> list[Agent]:
        """Return every agent in registration order."""
        return self._fetch_all(_SELECT_COLUMNS + " ORDER BY registered_at ASC")

    def list_by_project(self, project: str) -> list[Agent]:
        """Return the agents of *project*, or all agents if it is empty."""
        if not project:
            return self.list_all()
        return self._fetch_all(
            _SELECT_COLUMNS + " WHERE project = ? ORDER BY registered_at ASC",
            (project,),
        )

    def list_alive(self) -> list[Agent]:
        """Return alive agents, most recent heartbeat first."""
        return self._fetch_all(
            _SELECT_COLUMNS + " WHERE status = 'alive' ORDER BY last_heartbeat DESC"
        )

    def list_alive_by_project(self, project: str) -> list[Agent]:
        """Return alive agents of *project*, or all alive agents if it is empty."""
        if not project:
            return self.list_alive()
        return self._fetch_all(
            _SELECT_COLUMNS
            + " WHERE status = 'alive' AND project = ? ORDER BY last_heartbeat DESC",
            (project,),
        )

    def update_heartbeat(self, agent_id: str) -> None:
        """Record a heartbeat for *agent_id* and mark it alive."""
        affected = self._write(
            """
            UPDATE agents
            SET last_heartbeat = datetime('now'), status = 'alive'
            WHERE id = ?
            """,
            (agent_id,),
        )
        if affected == 0:
            raise AgentNotFoundError()