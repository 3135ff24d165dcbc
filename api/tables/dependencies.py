"""
Dependencies shared by the table endpoints.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from catalog.schema import Catalog, TableDescriptor


def get_catalog(request: Request) -> Catalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise RuntimeError("Catalog is not loaded. It is built during application startup.")
    return catalog


def get_table(table_name: str, catalog: Catalog = Depends(get_catalog)) -> TableDescriptor:
    table = catalog.get_table(table_name)
    if table is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found.")
    return table


def get_raw_params(request: Request) -> dict[str, list[str]]:
    # Keeps every value of a repeated key, in request order.
    params: dict[str, list[str]] = {}
    for key, value in request.query_params.multi_items():
        params.setdefault(key, []).append(value)
    return params


def errors_exposed(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings is not None and settings.debug)
