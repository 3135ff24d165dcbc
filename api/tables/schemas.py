"""
Pydantic schemas for table endpoints (response models).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ColumnInfo(BaseModel):
    name: str
    type: str
    not_null: bool
    primary_key: bool


class TableInfo(BaseModel):
    name: str
    columns: list[ColumnInfo] = Field(default_factory=list)


class ApiInfoResponse(BaseModel):
    tables: list[TableInfo] = Field(default_factory=list)
    endpoints: list[str] = Field(default_factory=list)


class PageResponse(BaseModel):
    total: int
    offset: int
    limit: int
    data: list[dict[str, Any]] = Field(default_factory=list)
