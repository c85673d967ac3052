"""SQLite connection handling and schema migrations."""

from __future__ import annotations

import secrets
import sqlite3

_ID_ALPHABET = "_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_ID_LENGTH = 21

MIGRATIONS: tuple[tuple[str, ...], ...] = (
    (
        """CREATE TABLE IF NOT EXISTS agents (
            id             TEXT PRIMARY KEY,
            name           TEXT NOT NULL UNIQUE,
            type           TEXT NOT NULL,
            pid            INTEGER,
            socket_path    TEXT,
            capabilities   TEXT DEFAULT '[]',
            workdir        TEXT,
            status         TEXT NOT NULL DEFAULT 'alive',
            registered_at  TEXT NOT NULL DEFAULT (datetime('now')),
            last_heartbeat TEXT NOT NULL DEFAULT (datetime('now'))
        )""",
    ),
    (
        """CREATE TABLE IF NOT EXISTS messages (
            id             TEXT PRIMARY KEY,
            from_agent     TEXT NOT NULL,
            to_agent       TEXT,
            type           TEXT NOT NULL DEFAULT 'notification',
            topic          TEXT,
            payload        TEXT DEFAULT '{}',
            correlation_id TEXT,
            created_at     TEXT NOT NULL DEFAULT (datetime('now')),
            delivered_at   TEXT,
            read_at        TEXT
        )""",
    ),
    (
        """CREATE TABLE IF NOT EXISTS tasks (
            id          TEXT PRIMARY KEY,
            title       TEXT NOT NULL,
            description TEXT,
            status      TEXT NOT NULL DEFAULT 'pending',
            priority    TEXT NOT NULL DEFAULT 'medium',
            assigned_to TEXT,
            created_by  TEXT,
            blocked_by  TEXT DEFAULT '[]',
            result      TEXT,
            created_at  TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
        )""",
    ),
    ("CREATE INDEX IF NOT EXISTS idx_messages_to_agent ON messages(to_agent, delivered_at)",),
    ("CREATE INDEX IF NOT EXISTS idx_messages_correlation ON messages(correlation_id)",),
    ("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)",),
    ("CREATE INDEX IF NOT EXISTS idx_tasks_assignee ON tasks(assigned_to)",),
    ("CREATE INDEX IF NOT EXISTS idx_agents_status ON agents(status)",),
    (
        """CREATE TABLE agents_new (
            id             TEXT PRIMARY KEY,
            name           TEXT NOT NULL,
            type           TEXT NOT NULL,
            pid            INTEGER,
            socket_path    TEXT,
            capabilities   TEXT DEFAULT '[]',
            workdir        TEXT,
            project        TEXT NOT NULL DEFAULT '',
            status         TEXT NOT NULL DEFAULT 'alive',
            registered_at  TEXT NOT NULL DEFAULT (datetime('now')),
            last_heartbeat TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(name, project)
        )""",
        """INSERT INTO agents_new (
            id, name, type, pid, socket_path, capabilities, workdir, project, status,
            registered_at, last_heartbeat
        )
        SELECT
            id, name, type, pid, socket_path, capabilities, workdir, '', status,
            registered_at, last_heartbeat
        FROM agents""",
        "DROP TABLE agents",
        "ALTER TABLE agents_new RENAME TO agents",
        "CREATE INDEX idx_agents_status ON agents(status)",
        "CREATE INDEX idx_agents_project ON agents(project)",
    ),
)
"""Schema migrations; each entry is the statements of one schema version."""


def generate_id(prefix: str) -> str:
    """Return *prefix* followed by a random 21-character URL-safe identifier."""
    return prefix + "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


class Database:
    """An SQLite connection with agentcom's schema operations.

    The connection is switched to autocommit mode; transactions are opened
    explicitly where needed.  Rows come back as :class:`sqlite3.Row`.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        connection.isolation_level = None
        connection.row_factory = sqlite3.Row
        self.connection = connection

    def close(self) -> None:
        """Close the underlying connection."""
        self.connection.close()

    def schema_version(self) -> int:
        """Return the schema version recorded in ``PRAGMA user_version``."""
        return int(self.connection.execute("PRAGMA user_version").fetchone()[0])

    def migrate(self) -> None:
        """Apply every pending migration inside a single transaction."""
        conn = self.connection
        conn.execute("BEGIN IMMEDIATE")
        try:
            version = self.schema_version()
            for index, statements in enumerate(MIGRATIONS):
                if index < version:
                    continue
                for statement in statements:
                    conn.execute(statement)
                conn.execute(f"PRAGMA user_version = {index + 1:d}")
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_database(path: str) -> Database:
    """Open the database file at *path* in WAL mode with foreign keys enabled."""
    connection = sqlite3.connect(path, timeout=5.0, isolation_level=None)
    try:
        connection.execute("PRAGMA journal_mode = WAL")
        connection.execute("PRAGMA busy_timeout = 5000")
        connection.execute("PRAGMA foreign_keys = ON")
        connection.execute("PRAGMA synchronous = NORMAL")
        connection.execute("SELECT 1").fetchone()
    except BaseException:
        connection.close()
        raise
    return Database(connection)


def open_memory() -> Database:
    """Open a private in-memory database, mainly for tests."""
    connection = sqlite3.connect(":memory:", isolation_level=None)
    connection.execute("PRAGMA foreign_keys = ON")
    return Database(connection)