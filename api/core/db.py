"""
SQLite database access helpers (raw SQL) using a small connection pool.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

Every connection is tuned for read-only, memory-oriented serving and has
`query_only` enabled, so any write statement fails at the engine.

SQL parameter style:
- sqlite3 uses positional placeholders: ?, ?, ...
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from sqlalchemy import exc as sa_exc
from sqlalchemy.pool import QueuePool
from starlette.concurrency import run_in_threadpool

from . import rows

logger = logging.getLogger(__name__)

PRAGMAS = (
    "PRAGMA cache_size = -2097152",  # 2 GiB page cache
    "PRAGMA page_size = 32768",
    "PRAGMA journal_mode = OFF",
    "PRAGMA synchronous = OFF",
    "PRAGMA temp_store = MEMORY",
    "PRAGMA mmap_size = 137438953472",  # 128 GiB
    "PRAGMA query_only = 1",
)

REPORTED_PRAGMAS = (
    "cache_size",
    "page_size",
    "journal_mode",
    "synchronous",
    "temp_store",
    "read_uncommitted",
    "cache_shared",
    "mmap_size",
    "query_only",
)

CHECKOUT_TIMEOUT_S = 30.0


class QueryExecutionError(RuntimeError):
    pass


def _database_uri(path: str) -> str:
    # mode=rw: never create a database file that does not exist.
    return Path(path).resolve().as_uri() + "?mode=rw"


def connect(path: str) -> sqlite3.Connection:
    """
    Open one configured connection to the database at `path`.
    """
    try:
        conn = sqlite3.connect(
            _database_uri(path),
            uri=True,
            check_same_thread=False,
            isolation_level=None,
        )
    except sqlite3.Error as exc:
        raise QueryExecutionError(f"failed to open database: {exc}") from exc

    try:
        conn.execute("SELECT 1").fetchone()
        for pragma in PRAGMAS:
            conn.execute(pragma).fetchall()
    except sqlite3.Error as exc:
        conn.close()
        raise QueryExecutionError(f"failed to configure database: {exc}") from exc
    return conn


def create_pool(path: str, size: int, *, timeout: float = CHECKOUT_TIMEOUT_S) -> QueuePool:
    """
    Build a fixed-size pool of configured connections to `path`.

    One connection is opened up front so a missing or unreadable database
    fails here rather than on the first request.
    """
    engine_pool = QueuePool(
        lambda: connect(path),
        pool_size=size,
        max_overflow=0,
        timeout=timeout,
    )
    try:
        engine_pool.connect().close()
    except QueryExecutionError:
        engine_pool.dispose()
        raise
    return engine_pool


@contextmanager
def checkout(engine_pool: QueuePool | None = None) -> Iterator[Any]:
    """
    Borrow a connection; it goes back to the pool when the block exits.
    """
    if engine_pool is None:
        engine_pool = pool()
    try:
        conn = engine_pool.connect()
    except sa_exc.TimeoutError as exc:
        raise QueryExecutionError("timed out waiting for a database connection") from exc
    try:
        yield conn
    finally:
        conn.close()


_pool: QueuePool | None = None


async def init_pool(path: str, *, size: int = 4) -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await run_in_threadpool(create_pool, path, size)
    logger.info("db_pool_opened path=%s size=%s", path, size)


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    _pool.dispose()
    _pool = None
    logger.info("db_pool_closed")


def pool() -> QueuePool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _run(sql: str, args: tuple[Any, ...], limit: int | None) -> list[rows.Record]:
    with checkout() as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(sql, args)
            records = rows.decode_rows(cursor)
            if limit is None:
                return list(records)
            return [record for _, record in zip(range(limit), records)]
        except (sqlite3.Error, OverflowError) as exc:
            # OverflowError: a bound Python int outside SQLite's 64-bit range.
            logger.debug("query_failed sql=%s args=%r", sql, args)
            raise QueryExecutionError(str(exc)) from exc
        finally:
            cursor.close()


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return the first row as a dict (or None).
    """
    found = await run_in_threadpool(_run, sql, args, 1)
    return found[0] if found else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    return await run_in_threadpool(_run, sql, args, None)


async def fetch_value(sql: str, *args: Any) -> Any:
    """
    Run a query and return the first column of the first row.
    """
    row = await fetch_one(sql, *args)
    if row is None:
        return None
    return next(iter(row.values()), None)


def _pragma_values() -> dict[str, str]:
    values: dict[str, str] = {}
    with checkout() as conn:
        cursor = conn.cursor()
        for name in REPORTED_PRAGMAS:
            try:
                row = cursor.execute(f"PRAGMA {name}").fetchone()
            except sqlite3.Error as exc:
                values[name] = f"error: {exc}"
                continue
            values[name] = "unsupported" if row is None else str(row[0])
        cursor.close()
    return values


async def pragma_report() -> dict[str, str]:
    return await run_in_threadpool(_pragma_values)
