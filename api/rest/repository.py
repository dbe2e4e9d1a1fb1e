"""
Gateway persistence.

Builds one statement per call and runs it on the injected `Database`.
Engine failures are translated into the gateway's error taxonomy here.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

from core import db

from . import query_builder
from .errors import CONFLICT_MESSAGE, ConflictError, StorageError, is_unique_violation
from .pagination import Pagination

logger = logging.getLogger(__name__)


@contextmanager
def _engine_errors(*, action: str, table: str, detect_conflict: bool = False) -> Iterator[None]:
    try:
        yield
    except db.DatabaseError as exc:
        message = str(exc)
        if detect_conflict and is_unique_violation(message):
            logger.info("unique_violation action=%s table=%s", action, table)
            raise ConflictError(CONFLICT_MESSAGE) from exc
        logger.exception("storage_failed action=%s table=%s", action, table)
        raise StorageError(message) from exc


async def fetch_row(
    database: db.Database,
    table: str,
    *,
    id_column: str,
    row_id: str,
    filters: query_builder.Filters = (),
) -> dict[str, Any] | None:
    stmt = query_builder.build_select(table, id_column=id_column, row_id=row_id, filters=filters)
    with _engine_errors(action="select", table=table):
        return await database.fetch_one(stmt.sql, stmt.params)


async def fetch_rows(
    database: db.Database,
    table: str,
    *,
    id_column: str,
    filters: query_builder.Filters = (),
    sort_by: str | None = None,
    order: str | None = None,
    pagination: Pagination | None = None,
) -> list[dict[str, Any]]:
    stmt = query_builder.build_select(
        table,
        id_column=id_column,
        filters=filters,
        sort_by=sort_by,
        order=order,
        pagination=pagination,
    )
    with _engine_errors(action="select", table=table):
        return await database.fetch_all(stmt.sql, stmt.params)


async def count_rows(
    database: db.Database,
    table: str,
    *,
    id_column: str,
    filters: query_builder.Filters = (),
) -> int:
    stmt = query_builder.build_count(table, id_column=id_column, filters=filters)
    with _engine_errors(action="count", table=table):
        row = await database.fetch_one(stmt.sql, stmt.params)
    if row is None:
        return 0
    return int(row.get("total") or 0)


async def insert_row(database: db.Database, table: str, payload: Mapping[str, Any]) -> dict[str, Any] | None:
    """
    Insert `payload` and return the stored row (engine-assigned columns included).
    """
    stmt = query_builder.build_insert(table, payload)
    with _engine_errors(action="insert", table=table, detect_conflict=True):
        return await database.fetch_one(stmt.sql, stmt.params)


async def update_row(
    database: db.Database,
    table: str,
    row_id: str,
    payload: Mapping[str, Any],
    *,
    id_column: str,
) -> int:
    stmt = query_builder.build_update(table, row_id, payload, id_column=id_column)
    with _engine_errors(action="update", table=table, detect_conflict=True):
        return await database.execute(stmt.sql, stmt.params)


async def delete_row(database: db.Database, table: str, row_id: str, *, id_column: str) -> int:
    stmt = query_builder.build_delete(table, row_id, id_column=id_column)
    with _engine_errors(action="delete", table=table):
        return await database.execute(stmt.sql, stmt.params)
