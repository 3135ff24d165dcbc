"""
Table API endpoints.

Routes are generic over the catalog: the table is resolved from the path at
request time, so one handler serves every discovered table. Tables whose
name contains "/" cannot be addressed by one path segment and are not routed.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from catalog.schema import Catalog, TableDescriptor

from . import dependencies, schemas, service

router = APIRouter()


@router.get("/")
async def api_info(
    catalog: Catalog = Depends(dependencies.get_catalog),
) -> schemas.ApiInfoResponse:
    return service.api_info(catalog)


@router.get("/{table_name}")
async def list_records(
    table: TableDescriptor = Depends(dependencies.get_table),
    raw_params: dict[str, list[str]] = Depends(dependencies.get_raw_params),
    expose_errors: bool = Depends(dependencies.errors_exposed),
) -> schemas.PageResponse:
    """
    List rows of a table.

    `limit`, `offset` and `order` control pagination and ordering; every other
    query parameter is an equality filter on the column of the same name.
    """
    return await service.list_page(table, raw_params, expose_errors=expose_errors)


@router.get("/{table_name}/{record_id}")
async def get_record(
    record_id: str,
    table: TableDescriptor = Depends(dependencies.get_table),
    expose_errors: bool = Depends(dependencies.errors_exposed),
) -> dict[str, Any]:
    return await service.get_record(table, record_id, expose_errors=expose_errors)
