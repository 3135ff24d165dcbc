"""
Table endpoint logic.

Scope:
- catalog description for the index endpoint
- paginated, filtered listing (count + page)
- single-record lookup by identifier

Engine failures are logged with their traceback and answered with a 500.
The raw engine message is only echoed back in debug mode.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status

from catalog.schema import Catalog, TableDescriptor
from core import db

from . import query, repository, schemas

logger = logging.getLogger(__name__)


def endpoints_for(catalog: Catalog) -> list[str]:
    endpoints: list[str] = []
    for table in catalog.tables:
        # A path segment never contains "/", so such a table has no route.
        if "/" in table.name:
            continue
        endpoints.append(f"GET /{table.name}")
        endpoints.append(f"GET /{table.name}/:id")
    return endpoints


def api_info(catalog: Catalog) -> schemas.ApiInfoResponse:
    return schemas.ApiInfoResponse(
        tables=[
            schemas.TableInfo(
                name=table.name,
                columns=[
                    schemas.ColumnInfo(
                        name=col.name,
                        type=col.declared_type,
                        not_null=not col.nullable,
                        primary_key=col.is_primary_key,
                    )
                    for col in table.columns
                ],
            )
            for table in catalog.tables
        ],
        endpoints=endpoints_for(catalog),
    )


def _query_failed(table: TableDescriptor, exc: db.QueryExecutionError, *, expose_errors: bool) -> HTTPException:
    logger.exception("table_query_failed table=%s", table.name)
    detail = "Query failed."
    if expose_errors:
        detail = f"Query failed: {exc}"
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


async def list_page(
    table: TableDescriptor,
    raw_params: query.RawParams,
    *,
    expose_errors: bool = False,
) -> schemas.PageResponse:
    try:
        list_query = query.build_list_query(table, raw_params)
    except query.UnknownColumnError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        total = await repository.count_rows(table, list_query.spec.filters)
        data = await repository.fetch_page(list_query)
    except db.QueryExecutionError as exc:
        raise _query_failed(table, exc, expose_errors=expose_errors) from exc

    return schemas.PageResponse(
        total=total,
        offset=list_query.offset,
        limit=list_query.limit,
        data=data,
    )


async def get_record(
    table: TableDescriptor,
    record_id: str,
    *,
    expose_errors: bool = False,
) -> dict[str, Any]:
    if table.identifier_column is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Table {table.name!r} has no identifier column.",
        )

    try:
        row = await repository.fetch_record(table, record_id)
    except db.QueryExecutionError as exc:
        raise _query_failed(table, exc, expose_errors=expose_errors) from exc

    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found.")
    return row
