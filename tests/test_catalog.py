"""Tests for schema discovery."""

import asyncio

import pytest

from catalog import repository, service
from catalog.schema import Catalog
from conftest import make_database
from core import db


def _build(path):
    async def scenario():
        await db.init_pool(path, size=1)
        try:
            return await service.build_catalog()
        finally:
            await db.close_pool()

    return asyncio.run(scenario())


def test_catalog_describes_users_table(users_db):
    catalog = _build(users_db)

    assert isinstance(catalog, Catalog)
    assert catalog.table_names == ["users"]
    users = catalog.get_table("users")
    assert [(c.name, c.declared_type, c.nullable, c.is_primary_key) for c in users.columns] == [
        ("id", "INTEGER", True, True),
        ("name", "TEXT", True, False),
        ("age", "INTEGER", True, False),
    ]


def test_internal_tables_are_excluded(mixed_db):
    catalog = _build(mixed_db)

    assert "sqlite_sequence" not in catalog.table_names
    assert catalog.table_names == ["users", "files", "tags", "pairs", "counters", "events"]


def test_prefix_match_is_literal(tmp_path):
    path = make_database(
        tmp_path / "prefix.db",
        "CREATE TABLE sqliteXnotes (id INTEGER); CREATE TABLE notes (id INTEGER);",
    )

    assert _build(path).table_names == ["sqliteXnotes", "notes"]


def test_native_column_order_and_flags(tmp_path):
    path = make_database(
        tmp_path / "order.db",
        "CREATE TABLE t (z TEXT NOT NULL, a INTEGER, m BLOB, PRIMARY KEY (a, z));",
    )

    table = _build(path).get_table("t")

    assert table.column_names == ["z", "a", "m"]
    assert [c.is_primary_key for c in table.columns] == [True, True, False]
    assert table.get_column("z").nullable is False
    assert table.identifier_column is None


def test_identifier_column_resolution(mixed_db):
    catalog = _build(mixed_db)

    assert catalog.get_table("users").identifier_column.name == "id"
    assert catalog.get_table("tags").identifier_column.name == "code"
    assert catalog.get_table("pairs").identifier_column is None
    assert catalog.get_table("missing") is None


def test_catalog_is_immutable(users_db):
    catalog = _build(users_db)

    with pytest.raises(AttributeError):
        catalog.tables = ()
    with pytest.raises(AttributeError):
        catalog.get_table("users").name = "other"


def test_introspection_failure_raises_schema_error(users_db, monkeypatch):
    async def broken():
        raise db.QueryExecutionError("no such table: sqlite_master")

    monkeypatch.setattr(repository, "list_table_names", broken)

    with pytest.raises(service.SchemaError):
        _build(users_db)
