"""
Catalog introspection SQL (raw).

Reads SQLite's system catalog:
- `sqlite_master` for user table names (internal `sqlite_` tables excluded)
- `pragma_table_info(?)` for columns, in the engine's native order
"""

from __future__ import annotations

from core import db

INTERNAL_TABLE_PREFIX = "sqlite_"


async def list_table_names() -> list[str]:
    # `_` is a LIKE wildcard, so the prefix is matched with an escaped pattern.
    rows = await db.fetch_all(
        """
        SELECT name
        FROM sqlite_master
        WHERE type = 'table'
          AND name NOT LIKE ? ESCAPE '\\'
        """,
        INTERNAL_TABLE_PREFIX.replace("_", "\\_") + "%",
    )
    return [str(row["name"]) for row in rows]


async def list_columns(table_name: str) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT cid, name, type, "notnull" AS not_null, pk
        FROM pragma_table_info(?)
        ORDER BY cid
        """,
        table_name,
    )
