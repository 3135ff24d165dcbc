"""
Row decoding: cursor rows -> JSON-ready records.

Decoding is mechanical. Values are not coerced against a column's declared
type, because SQLite declared types are advisory text and a column may hold
values of any storage class.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Iterator

Record = dict[str, Any]


def normalize_value(value: Any) -> Any:
    # BLOB / raw text bytes are rendered as text; scalars pass through.
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return value


def column_names(cursor: sqlite3.Cursor) -> list[str]:
    if cursor.description is None:
        return []
    return [str(col[0]) for col in cursor.description]


def decode_rows(cursor: sqlite3.Cursor) -> Iterator[Record]:
    """
    Yield one record per row, keyed by the cursor's column names.

    Single forward pass over the cursor; the generator cannot be restarted.
    """
    columns = column_names(cursor)
    for row in cursor:
        yield {col: normalize_value(val) for col, val in zip(columns, row)}
