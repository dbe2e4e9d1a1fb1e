"""
Gateway orchestration.

Flow per request:
1) Resolve the identifying column for the table
2) Build and run one statement (plus a count for paginated reads)
3) Hydrate rows back into JSON-shaped values
4) Wrap the outcome in the response envelope

Update does not check the affected-row count; Delete does.
`RestOptions.update_requires_match` makes Update check it too.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from core import db

from . import repository, schemas
from .coercion import hydrate_row
from .dependencies import RestOptions
from .errors import NotFoundError
from .identifiers import sanitize
from .keys import PrimaryKeyResolver
from .pagination import RESERVED_PARAMS, Pagination
from .query_builder import ensure_object

logger = logging.getLogger(__name__)


def split_query(items: Iterable[tuple[str, str]]) -> tuple[dict[str, str], list[tuple[str, str]]]:
    """
    Separate control parameters (first occurrence wins) from equality filters.
    """
    controls: dict[str, str] = {}
    filters: list[tuple[str, str]] = []
    for key, value in items:
        if key in RESERVED_PARAMS:
            controls.setdefault(key, value)
        else:
            filters.append((key, value))
    return controls, filters


async def read(
    database: db.Database,
    resolver: PrimaryKeyResolver,
    options: RestOptions,
    table_name: str,
    row_id: str | None,
    query_items: Iterable[tuple[str, str]] = (),
) -> dict[str, Any]:
    table = sanitize(table_name)
    id_column = resolver.resolve(table)
    column_types = options.column_types_for(table)
    controls, filters = split_query(query_items)

    if row_id is not None:
        row = await repository.fetch_row(
            database,
            table,
            id_column=id_column,
            row_id=row_id,
            filters=filters,
        )
        if row is None:
            raise NotFoundError("Not Found")
        return schemas.RowResponse(result=hydrate(row, column_types)).model_dump()

    pagination = Pagination.from_query(controls)
    rows = await repository.fetch_rows(
        database,
        table,
        id_column=id_column,
        filters=filters,
        sort_by=controls.get("sort_by"),
        order=controls.get("order"),
        pagination=pagination,
    )
    if pagination.paginated:
        total = await repository.count_rows(database, table, id_column=id_column, filters=filters)
    else:
        total = len(rows)

    return schemas.CollectionResponse(
        results=[hydrate(row, column_types) for row in rows],
        pagination=schemas.PaginationMeta(**pagination.metadata(total)),
    ).model_dump()


def hydrate(row: dict[str, Any], column_types: dict[str, str]) -> dict[str, Any]:
    return hydrate_row(row, column_types) or {}


async def create(
    database: db.Database,
    resolver: PrimaryKeyResolver,
    table_name: str,
    payload: Any,
) -> dict[str, Any]:
    table = sanitize(table_name)
    data = ensure_object(payload)
    id_column = resolver.resolve(table)

    stored = await repository.insert_row(database, table, data) or {}

    identifier = data.get(id_column)
    if identifier is None or identifier == "":
        identifier = stored.get(id_column, stored.get("id"))

    logger.info("row_created table=%s id=%s", table, identifier)
    return schemas.CreatedResponse(
        message=f"{table} created successfully",
        id=identifier,
    ).model_dump()


async def update(
    database: db.Database,
    resolver: PrimaryKeyResolver,
    options: RestOptions,
    table_name: str,
    row_id: str,
    payload: Any,
) -> dict[str, Any]:
    table = sanitize(table_name)
    data = ensure_object(payload)
    id_column = resolver.resolve(table)

    affected = await repository.update_row(database, table, row_id, data, id_column=id_column)
    if affected == 0 and options.update_requires_match:
        raise NotFoundError("Record not found")

    logger.info("row_updated table=%s id=%s affected=%s", table, row_id, affected)
    return schemas.UpdatedResponse(
        message="Resource updated successfully",
        result=data,
        affected_rows=affected,
    ).model_dump()


async def delete(
    database: db.Database,
    resolver: PrimaryKeyResolver,
    table_name: str,
    row_id: str,
) -> dict[str, Any]:
    table = sanitize(table_name)
    id_column = resolver.resolve(table)

    affected = await repository.delete_row(database, table, row_id, id_column=id_column)
    if affected == 0:
        raise NotFoundError("Record not found")

    logger.info("row_deleted table=%s id=%s affected=%s", table, row_id, affected)
    return schemas.DeletedResponse(message="Resource deleted successfully").model_dump()
