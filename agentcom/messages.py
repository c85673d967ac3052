"""Persistence of messages exchanged between agents."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from agentcom.database import Database, generate_id

_SELECT_COLUMNS = """
    SELECT
        id, from_agent, to_agent, type, topic, payload, correlation_id,
        created_at, delivered_at, read_at
    FROM messages
"""


class MessageNotFoundError(LookupError):
    """Raised when no message matches the lookup."""

    def __init__(self, message: str = "message not found") -> None:
        super().__init__(message)


@dataclass
class Message:
    """A message stored in the database.

    An empty ``to_agent`` marks a broadcast.  Timestamps are the SQLite
    ``datetime('now')`` text form; an empty string means "not set".
    """

    from_agent: str = ""
    to_agent: str = ""
    type: str = ""
    topic: str = ""
    payload: str = ""
    correlation_id: str = ""
    id: str = ""
    created_at: str = ""
    delivered_at: str = ""
    read_at: str = ""


def _nullable(value: str) -> str | None:
    return value if value else None


def _message_from_row(row: sqlite3.Row) -> Message:
    return Message(
        id=row["id"],
        from_agent=row["from_agent"],
        to_agent=row["to_agent"] or "",
        type=row["type"],
        topic=row["topic"] or "",
        payload=row["payload"] or "",
        correlation_id=row["correlation_id"] or "",
        created_at=row["created_at"],
        delivered_at=row["delivered_at"] or "",
        read_at=row["read_at"] or "",
    )


class MessageStore:
    """Create, read and mark message rows."""

    def __init__(self, database: Database) -> None:
        self._conn = database.connection

    def _fetch_all(self, sql: str, params: tuple) -> list[Message]:
        return [_message_from_row(row) for row in self._conn.execute(sql, params)]

    def _touch(self, column: str, message_id: str) -> None:
        cursor = self._conn.execute(
            f"UPDATE messages SET {column} = datetime('now') WHERE id = ?",
            (message_id,),
        )
        if cursor.rowcount == 0:
            raise MessageNotFoundError()

    def insert(self, message: Message) -> Message:
        """Insert *message*, assigning a fresh ``msg_`` ID if it has none.

        ``created_at`` defaults to the current time when empty.
        """
        if not message.id:
            message.id = generate_id("msg_")
        self._conn.execute(
            """
            INSERT INTO messages (
                id, from_agent, to_agent, type, topic, payload, correlation_id,
                created_at, delivered_at, read_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, COALESCE(?, datetime('now')), ?, ?)
            """,
            (
                message.id,
                message.from_agent,
                _nullable(message.to_agent),
                message.type,
                _nullable(message.topic),
                message.payload,
                _nullable(message.correlation_id),
                _nullable(message.created_at),
                _nullable(message.delivered_at),
                _nullable(message.read_at),
            ),
        )
        return message

    def find_by_id(self, message_id: str) -> Message:
        """Return the message with *message_id*."""
        row = self._conn.execute(
            _SELECT_COLUMNS + " WHERE id = ?", (message_id,)
        ).fetchone()
        if row is None:
            raise MessageNotFoundError()
        return _message_from_row(row)

    def list_for_agent(self, agent_id: str) -> list[Message]:
        """Return direct and broadcast messages for *agent_id*, oldest first."""
        return self._fetch_all(
            _SELECT_COLUMNS
            + " WHERE to_agent = ? OR to_agent IS NULL ORDER BY created_at ASC",
            (agent_id,),
        )

    def list_unread(self, agent_id: str) -> list[Message]:
        """Return unread direct and broadcast messages for *agent_id*."""
        return self._fetch_all(
            _SELECT_COLUMNS
            + " WHERE (to_agent = ? OR to_agent IS NULL) AND read_at IS NULL"
            " ORDER BY created_at ASC",
            (agent_id,),
        )

    def mark_delivered(self, message_id: str) -> None:
        """Record the delivery time of *message_id*."""
        self._touch("delivered_at", message_id)

    def mark_read(self, message_id: str) -> None:
        """Record the read time of *message_id*."""
        self._touch("read_at", message_id)

    def list_by_correlation(self, correlation_id: str) -> list[Message]:
        """Return messages sharing *correlation_id*, oldest first."""
        return self._fetch_all(
            _SELECT_COLUMNS + " WHERE correlation_id = ? ORDER BY created_at ASC",
            (correlation_id,),
        )