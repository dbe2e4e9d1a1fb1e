"""
Async database access (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`). Request handlers never touch the
pool directly: they receive a `Database` through dependency injection.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import os
import re
from typing import Any, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import settings

_pool: asyncpg.Pool | None = None

# asyncpg returns the command tag for statements without rows, e.g. "DELETE 3"
# or "INSERT 0 1" (oid, count).
_COMMAND_TAG = re.compile(r"^[A-Z ]+?\s(?:\d+\s)?(\d+)$")

# Timeouts come from `command_timeout`; OSError covers dropped connections.
_ENGINE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError, OSError)


class DatabaseError(RuntimeError):
    """
    Engine-level failure, carrying the engine's own message.
    """


def _engine_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


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
        min_size=settings.pool_min_size(),
        max_size=settings.pool_max_size(),
        command_timeout=settings.command_timeout(),
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


def affected_rows(command_tag: str | None) -> int:
    """
    Parse the row count out of an asyncpg command tag ("UPDATE 5" -> 5).
    """
    match = _COMMAND_TAG.match((command_tag or "").strip())
    if match is None:
        return 0
    return int(match.group(1))


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    """
    Thin statement runner over a pool (or a single connection).

    Anything with asyncpg's `fetchrow` / `fetch` / `execute` coroutines works
    as the executor.
    """

    def __init__(self, executor: Any) -> None:
        self._executor = executor

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        try:
            row = await self._executor.fetchrow(sql, *params)
        except _ENGINE_ERRORS as exc:
            raise DatabaseError(_engine_message(exc)) from exc
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        try:
            rows = await self._executor.fetch(sql, *params)
        except _ENGINE_ERRORS as exc:
            raise DatabaseError(_engine_message(exc)) from exc
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """
        Run a statement (INSERT/UPDATE/DELETE) and return the affected row count.
        """
        try:
            tag = await self._executor.execute(sql, *params)
        except _ENGINE_ERRORS as exc:
            raise DatabaseError(_engine_message(exc)) from exc
        return affected_rows(tag)


def database() -> Database:
    return Database(pool())
