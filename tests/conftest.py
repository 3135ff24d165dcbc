"""
Shared fixtures: throwaway SQLite files and API clients bound to them.
"""

import sqlite3

import pytest
from fastapi.testclient import TestClient

from core.settings import ENV_PREFIX, Settings
from main import create_app

USERS_SCHEMA = """
CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, age INTEGER);
INSERT INTO users (id, name, age) VALUES (1, 'Ann', 30), (2, 'Bo', 41);
"""

MIXED_SCHEMA = USERS_SCHEMA + """
CREATE TABLE files (id INTEGER PRIMARY KEY, payload BLOB, score REAL, note TEXT NOT NULL DEFAULT '', extra TEXT);
CREATE TABLE tags (code TEXT PRIMARY KEY, label TEXT);
INSERT INTO tags (code, label) VALUES ('c', 'zeta'), ('a', 'beta'), ('b', 'alpha');
CREATE TABLE pairs (a INTEGER, b INTEGER, PRIMARY KEY (a, b));
INSERT INTO pairs (a, b) VALUES (1, 1);
CREATE TABLE counters (id INTEGER PRIMARY KEY AUTOINCREMENT, n INTEGER);
INSERT INTO counters (n) VALUES (5);
CREATE TABLE events (id INTEGER PRIMARY KEY, kind TEXT);
"""


def make_database(path, script, setup=None):
    conn = sqlite3.connect(path)
    try:
        conn.executescript(script)
        if setup is not None:
            setup(conn)
        conn.commit()
    finally:
        conn.close()
    return str(path)


def _seed_mixed(conn):
    conn.execute(
        "INSERT INTO files (id, payload, score, note, extra) VALUES (?, ?, ?, ?, ?)",
        (1, b"hello", 1.5, "first", None),
    )
    conn.execute(
        "INSERT INTO files (id, payload, score, note, extra) VALUES (?, ?, ?, ?, ?)",
        (2, b"\xff\xfe", None, "second", "x"),
    )
    conn.executemany(
        "INSERT INTO events (id, kind) VALUES (?, ?)",
        [(i, "even" if i % 2 == 0 else "odd") for i in range(1, 251)],
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DB", "HOST", "PORT", "MODE", "USERNAME", "PASSWORD", "POOL_SIZE", "SHUTDOWN_GRACE"):
        monkeypatch.delenv(ENV_PREFIX + name, raising=False)


@pytest.fixture
def users_db(tmp_path):
    return make_database(tmp_path / "users.db", USERS_SCHEMA)


@pytest.fixture
def mixed_db(tmp_path):
    return make_database(tmp_path / "mixed.db", MIXED_SCHEMA, setup=_seed_mixed)


@pytest.fixture
def client_for():
    """Open a TestClient (lifespan included) for a database path and settings overrides."""
    opened = []

    def _open(path, **overrides):
        settings = Settings(database_path=path, mode=overrides.pop("mode", "test"), **overrides)
        client = TestClient(create_app(settings))
        client.__enter__()
        opened.append(client)
        return client

    yield _open
    for client in reversed(opened):
        client.__exit__(None, None, None)


@pytest.fixture
def client(users_db, client_for):
    return client_for(users_db)


@pytest.fixture
def mixed_client(mixed_db, client_for):
    return client_for(mixed_db)
