"""Tests for cursor row decoding."""

import sqlite3

from core import rows


def _cursor(sql, *args):
    conn = sqlite3.connect(":memory:")
    return conn.execute(sql, args)


def test_decode_rows_normalizes_binary_and_keeps_scalars():
    cursor = _cursor("SELECT 1 AS a, x'68690a' AS b, NULL AS c, 2.5 AS d, 'txt' AS e")

    assert list(rows.decode_rows(cursor)) == [
        {"a": 1, "b": "hi\n", "c": None, "d": 2.5, "e": "txt"},
    ]


def test_decode_rows_is_single_pass():
    cursor = _cursor("SELECT 1 AS n UNION ALL SELECT 2")
    decoded = rows.decode_rows(cursor)

    assert [r["n"] for r in decoded] == [1, 2]
    assert list(decoded) == []


def test_decode_rows_keeps_column_order():
    cursor = _cursor("SELECT 3 AS z, 1 AS a, 2 AS m")

    record = next(rows.decode_rows(cursor))
    assert list(record) == ["z", "a", "m"]


def test_normalize_value_replaces_invalid_utf8():
    assert rows.normalize_value(b"\xff") == "\ufffd"
    assert rows.normalize_value(memoryview(b"ok")) == "ok"
    assert rows.normalize_value(True) is True
    assert rows.normalize_value(10) == 10
