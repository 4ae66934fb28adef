"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

Repositories never touch the pool directly: they receive a `Database` handle
(see `database()`), which is also what tests replace with an in-memory fake.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

_pool: asyncpg.Pool | None = None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=_env_int("DB_POOL_MIN_SIZE", 1),
        max_size=_env_int("DB_POOL_MAX_SIZE", 5),
        command_timeout=_env_int("DB_COMMAND_TIMEOUT", 30),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    """
    Storage handle over either the pool or a single connection.

    Inside `transaction()` the yielded handle is bound to one connection, so
    every statement issued through it belongs to the same transaction.
    """

    def __init__(self, executor: asyncpg.Pool | asyncpg.Connection):
        self._executor = executor

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        row = await self._executor.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        rows = await self._executor.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> None:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
        """
        await self._executor.execute(sql, *args)

    async def execute_many(self, sql: str, records: Iterable[Sequence[Any]]) -> None:
        """
        Run one statement once per record (bulk INSERT/UPDATE). No result returned.
        """
        await self._executor.executemany(sql, records)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Database]:
        if isinstance(self._executor, asyncpg.Pool):
            async with self._executor.acquire() as conn:  # type: asyncpg.Connection
                async with conn.transaction():
                    yield Database(conn)
        else:
            # Already on a connection: nested blocks become savepoints.
            async with self._executor.transaction():
                yield self


def database() -> Database:
    return Database(pool())
