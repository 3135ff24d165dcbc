"""
Catalog construction.

The catalog is built once, before the application accepts requests. A
database that cannot be fully introspected must not be served with partial
routes, so any failure aborts startup.
"""

from __future__ import annotations

import logging

from core import db

from . import repository
from .schema import Catalog, ColumnDescriptor, TableDescriptor

logger = logging.getLogger(__name__)


class SchemaError(RuntimeError):
    pass


def _to_column(row: dict) -> ColumnDescriptor:
    return ColumnDescriptor(
        name=str(row["name"]),
        declared_type=str(row["type"] or ""),
        nullable=not bool(row["not_null"]),
        # pk is the 1-based position within the key; any non-zero value marks a key column.
        is_primary_key=int(row["pk"] or 0) > 0,
    )


async def load_table(table_name: str) -> TableDescriptor:
    rows = await repository.list_columns(table_name)
    return TableDescriptor(
        name=table_name,
        columns=tuple(_to_column(row) for row in rows),
    )


async def build_catalog() -> Catalog:
    try:
        names = await repository.list_table_names()
        tables = [await load_table(name) for name in names]
    except db.QueryExecutionError as exc:
        raise SchemaError(f"failed to introspect database schema: {exc}") from exc

    catalog = Catalog(tables=tuple(tables))
    logger.info("catalog_built tables=%s", len(catalog))
    for table in catalog.tables:
        logger.debug("catalog_table name=%s columns=%s", table.name, ",".join(table.column_names))
    return catalog
