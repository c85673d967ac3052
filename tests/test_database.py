import sqlite3

import pytest

from agentcom.database import (
    MIGRATIONS,
    Database,
    generate_id,
    open_database,
    open_memory,
)

LEGACY_AGENTS_TABLE = """CREATE TABLE agents (
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
)"""


@pytest.fixture
def database():
    db = open_memory()
    db.migrate()
    yield db
    db.close()


def _agent_columns(db):
    rows = db.connection.execute("PRAGMA table_info(agents)").fetchall()
    return {row[1]: (row[3], row[4]) for row in rows}


def _index_names(db, table):
    return [row[1] for row in db.connection.execute(f"PRAGMA index_list({table})")]


def _has_unique_name_project_index(db):
    unique_names = [
        row[1] for row in db.connection.execute("PRAGMA index_list(agents)") if row[2] == 1
    ]
    for name in unique_names:
        columns = [row[2] for row in db.connection.execute(f"PRAGMA index_info({name})")]
        if columns == ["name", "project"]:
            return True
    return False


def _has_table(db, name):
    row = db.connection.execute(
        "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
    ).fetchone()
    return row[0] > 0


def test_migrate_fresh_database():
    with open_memory() as db:
        db.migrate()

        assert db.schema_version() == len(MIGRATIONS)

        columns = _agent_columns(db)
        assert "project" in columns
        not_null, default = columns["project"]
        assert not_null == 1
        assert default == "''"

        assert "idx_agents_project" in _index_names(db, "agents")
        assert _has_unique_name_project_index(db)


def test_migrate_legacy_agents_table():
    with open_memory() as db:
        db.connection.execute(LEGACY_AGENTS_TABLE)
        db.connection.execute(
            "INSERT INTO agents (id, name, type, status) "
            "VALUES ('agt_legacy', 'alpha', 'worker', 'alive')"
        )

        db.migrate()

        row = db.connection.execute(
            "SELECT name, project FROM agents WHERE id = ?", ("agt_legacy",)
        ).fetchone()
        assert row["project"] == ""
        assert row["name"] == "alpha"
        assert db.schema_version() == len(MIGRATIONS)


def test_migrate_is_idempotent(database):
    database.migrate()

    assert database.schema_version() == len(MIGRATIONS)
    assert not _has_table(database, "agents_new")


def test_migrate_creates_all_tables(database):
    for table in ("agents", "messages", "tasks"):
        assert _has_table(database, table)
    assert "idx_tasks_status" in _index_names(database, "tasks")


def test_unique_name_per_project(database):
    conn = database.connection
    conn.execute("INSERT INTO agents (id, name, type, project) VALUES ('a1', 'x', 'w', 'p')")
    conn.execute("INSERT INTO agents (id, name, type, project) VALUES ('a2', 'x', 'w', 'q')")
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute("INSERT INTO agents (id, name, type, project) VALUES ('a3', 'x', 'w', 'p')")


def test_failed_migration_rolls_back():
    with open_memory() as db:
        db.connection.execute("CREATE TABLE agents_new (id TEXT)")
        with pytest.raises(sqlite3.OperationalError):
            db.migrate()
        assert db.schema_version() == 0
        assert not _has_table(db, "messages")


def test_open_database_uses_wal(tmp_path):
    path = str(tmp_path / "agentcom.db")
    with open_database(path) as db:
        mode = db.connection.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode.lower() == "wal"
        assert db.connection.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        db.migrate()
    with open_database(path) as reopened:
        assert reopened.schema_version() == len(MIGRATIONS)


def test_context_manager_closes_connection():
    with open_memory() as db:
        assert isinstance(db, Database)
    with pytest.raises(sqlite3.ProgrammingError):
        db.connection.execute("SELECT 1")


def test_generate_id_shape():
    identifier = generate_id("agt_")
    assert identifier.startswith("agt_")
    body = identifier[len("agt_"):]
    assert len(body) == 21
    allowed = set("_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
    assert set(body) <= allowed


def test_generate_id_is_unique():
    ids = {generate_id("msg_") for _ in range(200)}
    assert len(ids) == 200