"""
Query construction for table endpoints.

Values from the request are always bound as `?` arguments. Identifiers
cannot be bound, so every column name taken from a request (filter keys,
`order`) must first resolve to a column of the table's descriptor; only the
descriptor's own names are quoted into the SQL text.

Pagination input is forgiving: a missing, unparseable or out-of-range
`limit`/`offset` silently falls back to the default.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, NamedTuple, Sequence

from catalog.schema import TableDescriptor

logger = logging.getLogger(__name__)

LIMIT_PARAM = "limit"
OFFSET_PARAM = "offset"
ORDER_PARAM = "order"
RESERVED_PARAMS = frozenset({LIMIT_PARAM, OFFSET_PARAM, ORDER_PARAM})

DEFAULT_LIMIT = 100
DEFAULT_OFFSET = 0
MAX_SQLITE_INT = 2**63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")

RawParams = Mapping[str, Sequence[str]]


class ValidationError(ValueError):
    pass


class UnknownColumnError(ValueError):
    def __init__(self, table_name: str, column_name: str) -> None:
        super().__init__(f"Unknown column {column_name!r} for table {table_name!r}.")
        self.table_name = table_name
        self.column_name = column_name


@dataclass(frozen=True)
class QuerySpec:
    table_name: str
    filters: Mapping[str, str] = field(default_factory=dict)
    order_column: str | None = None
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET


class ListQuery(NamedTuple):
    sql: str
    args: list[Any]
    spec: QuerySpec

    @property
    def limit(self) -> int:
        return self.spec.limit

    @property
    def offset(self) -> int:
        return self.spec.offset


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def _first(values: Sequence[str] | None) -> str | None:
    if not values:
        return None
    return values[0]


def _parse_int(raw: str | None) -> int | None:
    text = (raw or "").strip()
    if not _INT_RE.fullmatch(text):
        return None
    # Checked on the digits first: int() refuses very long strings outright.
    digits = text.lstrip("+-").lstrip("0")
    if len(digits) > len(str(MAX_SQLITE_INT)) or int(text) > MAX_SQLITE_INT:
        raise ValidationError(f"integer of {len(digits)} digits exceeds the SQLite integer range")
    return int(text)


def parse_limit(raw: str | None) -> int | None:
    """
    Parse a `limit` value. Returns None when absent or not an integer.

    Raises ValidationError for integers that are not positive or do not
    fit in a SQLite integer.
    """
    value = _parse_int(raw)
    if value is not None and value <= 0:
        raise ValidationError(f"limit must be positive, got {value}")
    return value


def parse_offset(raw: str | None) -> int | None:
    """
    Parse an `offset` value. Returns None when absent or not an integer.

    Raises ValidationError for negative integers and integers that do not
    fit in a SQLite integer.
    """
    value = _parse_int(raw)
    if value is not None and value < 0:
        raise ValidationError(f"offset must be non-negative, got {value}")
    return value


def _recover(parser, raw: str | None, default: int) -> int:
    try:
        value = parser(raw)
    except ValidationError as exc:
        logger.debug("pagination_default_used reason=%s", exc)
        return default
    return default if value is None else value


def resolve_pagination(raw_params: RawParams) -> tuple[int, int]:
    limit = _recover(parse_limit, _first(raw_params.get(LIMIT_PARAM)), DEFAULT_LIMIT)
    offset = _recover(parse_offset, _first(raw_params.get(OFFSET_PARAM)), DEFAULT_OFFSET)
    return limit, offset


def _resolve_column(table: TableDescriptor, name: str) -> str:
    col = table.get_column(name)
    if col is None:
        raise UnknownColumnError(table.name, name)
    return col.name


def parse_query_spec(table: TableDescriptor, raw_params: RawParams) -> QuerySpec:
    """
    Resolve raw query parameters into a QuerySpec for `table`.

    Every key other than limit/offset/order is an equality filter on its
    first value. Raises UnknownColumnError for names the table lacks.
    """
    filters: dict[str, str] = {}
    for key, values in raw_params.items():
        if key in RESERVED_PARAMS:
            continue
        value = _first(values)
        if value is None:
            continue
        column = _resolve_column(table, key)
        # Keys differing only in case resolve to the same column; first one wins.
        filters.setdefault(column, value)

    order_column = None
    order = (_first(raw_params.get(ORDER_PARAM)) or "").strip()
    if order:
        order_column = _resolve_column(table, order)

    limit, offset = resolve_pagination(raw_params)
    return QuerySpec(
        table_name=table.name,
        filters=filters,
        order_column=order_column,
        limit=limit,
        offset=offset,
    )


def _where_clause(filters: Mapping[str, str]) -> tuple[str, list[Any]]:
    if not filters:
        return "", []
    conditions = [f"{quote_identifier(col)} = ?" for col in filters]
    return " WHERE " + " AND ".join(conditions), list(filters.values())


def build_page_query(table: TableDescriptor, spec: QuerySpec) -> tuple[str, list[Any]]:
    where, args = _where_clause(spec.filters)
    sql = f"SELECT * FROM {quote_identifier(table.name)}{where}"
    if spec.order_column:
        sql += f" ORDER BY {quote_identifier(spec.order_column)} ASC"
    sql += " LIMIT ? OFFSET ?"
    return sql, [*args, spec.limit, spec.offset]


def build_list_query(table: TableDescriptor, raw_params: RawParams) -> ListQuery:
    spec = parse_query_spec(table, raw_params)
    sql, args = build_page_query(table, spec)
    return ListQuery(sql=sql, args=args, spec=spec)


def build_count_query(table: TableDescriptor, filters: Mapping[str, str]) -> tuple[str, list[Any]]:
    """
    Count the rows matching `filters`, ignoring pagination.

    Filter names are resolved against the table like request keys are.
    """
    resolved: dict[str, str] = {}
    for col, value in filters.items():
        resolved.setdefault(_resolve_column(table, col), value)
    where, args = _where_clause(resolved)
    return f"SELECT COUNT(*) FROM {quote_identifier(table.name)}{where}", args


def build_get_query(table: TableDescriptor, record_id: str) -> tuple[str, list[Any]]:
    col = table.identifier_column
    if col is None:
        raise UnknownColumnError(table.name, "id")
    # First row wins if the identifier column is not unique.
    sql = (
        f"SELECT * FROM {quote_identifier(table.name)} "
        f"WHERE {quote_identifier(col.name)} = ? LIMIT 1"
    )
    return sql, [record_id]
