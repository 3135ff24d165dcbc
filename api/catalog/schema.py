"""
Catalog metadata types.

Descriptors are frozen: the catalog is built once at startup and shared
read-only by every request afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

IDENTIFIER_COLUMN = "id"


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    declared_type: str
    nullable: bool
    is_primary_key: bool


@dataclass(frozen=True)
class TableDescriptor:
    name: str
    columns: tuple[ColumnDescriptor, ...] = ()

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    @property
    def primary_key_columns(self) -> list[ColumnDescriptor]:
        return [col for col in self.columns if col.is_primary_key]

    def get_column(self, name: str) -> ColumnDescriptor | None:
        """
        Look up a column by name.

        Exact matches win; otherwise fall back to a case-insensitive match,
        since SQLite resolves identifiers case-insensitively.
        """
        for col in self.columns:
            if col.name == name:
                return col
        lowered = name.lower()
        for col in self.columns:
            if col.name.lower() == lowered:
                return col
        return None

    @property
    def identifier_column(self) -> ColumnDescriptor | None:
        """
        Column used for single-record lookups.

        The column named `id` when present, otherwise the table's only
        primary-key column. Tables with neither have no identifier.
        """
        col = self.get_column(IDENTIFIER_COLUMN)
        if col is not None:
            return col
        keys = self.primary_key_columns
        if len(keys) == 1:
            return keys[0]
        return None


@dataclass(frozen=True)
class Catalog:
    tables: tuple[TableDescriptor, ...] = ()

    @property
    def table_names(self) -> list[str]:
        return [table.name for table in self.tables]

    def get_table(self, name: str) -> TableDescriptor | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def __len__(self) -> int:
        return len(self.tables)
