"""
Table row reads (raw SQL built by `tables.query`).
"""

from __future__ import annotations

from typing import Any, Mapping

from catalog.schema import TableDescriptor
from core import db

from . import query


async def count_rows(table: TableDescriptor, filters: Mapping[str, str]) -> int:
    sql, args = query.build_count_query(table, filters)
    total = await db.fetch_value(sql, *args)
    return int(total or 0)


async def fetch_page(list_query: query.ListQuery) -> list[dict[str, Any]]:
    return await db.fetch_all(list_query.sql, *list_query.args)


async def fetch_record(table: TableDescriptor, record_id: str) -> dict[str, Any] | None:
    sql, args = query.build_get_query(table, record_id)
    return await db.fetch_one(sql, *args)
