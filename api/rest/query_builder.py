"""
Parameterized statement assembly for the four CRUD verbs.

Identifiers go through `identifiers.quote_identifier`; values are always
bound (asyncpg positional placeholders: $1, $2, ...). Caller-supplied ids and
filter values arrive as strings, so they are compared against the column's
text form (`col::text = $n`) and bind regardless of the column type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from .coercion import StorageValue, coerce_payload
from .errors import ValidationError
from .identifiers import quote_identifier
from .pagination import Pagination

ASC = "ASC"
DESC = "DESC"

Filters = Sequence[tuple[str, str]]


@dataclass(frozen=True)
class Statement:
    sql: str
    params: list[Any] = field(default_factory=list)


class _Params:
    def __init__(self) -> None:
        self.values: list[Any] = []

    def bind(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"


def normalize_order(order: str | None) -> str:
    return DESC if (order or "").strip().upper() == DESC else ASC


def ensure_object(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("Invalid data format")
    return payload


def _table(table_name: str) -> str:
    table = quote_identifier(table_name)
    if not table:
        raise ValidationError("Invalid table name.")
    return table


def _column(name: str, *, what: str = "column") -> str:
    column = quote_identifier(name)
    if not column:
        raise ValidationError(f"Invalid {what} name: {name!r}")
    return column


def _where(
    params: _Params,
    *,
    id_column: str,
    row_id: str | None,
    filters: Iterable[tuple[str, str]],
) -> str:
    conditions: list[str] = []
    if row_id is not None:
        conditions.append(f"{_column(id_column)}::text = {params.bind(str(row_id))}")
    for key, value in filters:
        conditions.append(f"{_column(key, what='filter column')}::text = {params.bind(value)}")
    if not conditions:
        return ""
    return " WHERE " + " AND ".join(conditions)


def _payload_columns(payload: Any) -> list[tuple[str, StorageValue]]:
    coerced = coerce_payload(ensure_object(payload))
    pairs: list[tuple[str, StorageValue]] = []
    seen: set[str] = set()
    for key, value in coerced.items():
        column = _column(key)
        if column in seen:
            raise ValidationError(f"Duplicate column after sanitization: {column}")
        seen.add(column)
        pairs.append((column, value))
    return pairs


def build_select(
    table_name: str,
    *,
    id_column: str,
    row_id: str | None = None,
    filters: Filters = (),
    sort_by: str | None = None,
    order: str | None = None,
    pagination: Pagination | None = None,
) -> Statement:
    """
    `SELECT * FROM t [WHERE ...] [ORDER BY c dir] [LIMIT $n OFFSET $m]`.

    An id lookup addresses exactly one row, so it carries neither ORDER BY
    nor LIMIT. Collections default to ordering by the identifying column.
    """
    params = _Params()
    sql = f"SELECT * FROM {_table(table_name)}"
    sql += _where(params, id_column=id_column, row_id=row_id, filters=filters)

    if row_id is not None:
        return Statement(sql, params.values)

    sort_column = quote_identifier(sort_by or "") or _column(id_column)
    sql += f" ORDER BY {sort_column} {normalize_order(order)}"

    if pagination is not None and pagination.paginated:
        sql += f" LIMIT {params.bind(pagination.limit)} OFFSET {params.bind(pagination.offset)}"
    return Statement(sql, params.values)


def build_count(
    table_name: str,
    *,
    id_column: str,
    row_id: str | None = None,
    filters: Filters = (),
) -> Statement:
    """
    Row count for the same WHERE clause as `build_select`, without pagination.
    """
    params = _Params()
    sql = f"SELECT COUNT(*) AS total FROM {_table(table_name)}"
    sql += _where(params, id_column=id_column, row_id=row_id, filters=filters)
    return Statement(sql, params.values)


def build_insert(table_name: str, payload: Mapping[str, Any], *, returning: bool = True) -> Statement:
    table = _table(table_name)
    pairs = _payload_columns(payload)
    params = _Params()

    if pairs:
        columns = ", ".join(column for column, _ in pairs)
        placeholders = ", ".join(params.bind(value) for _, value in pairs)
        sql = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
    else:
        sql = f"INSERT INTO {table} DEFAULT VALUES"

    if returning:
        sql += " RETURNING *"
    return Statement(sql, params.values)


def build_update(
    table_name: str,
    row_id: str,
    payload: Mapping[str, Any],
    *,
    id_column: str,
) -> Statement:
    """
    `UPDATE t SET c1 = $1, ... WHERE id_col::text = $n`, id bound last.
    """
    table = _table(table_name)
    pairs = _payload_columns(payload)
    if not pairs:
        raise ValidationError("Payload must contain at least one column.")

    params = _Params()
    assignments = ", ".join(f"{column} = {params.bind(value)}" for column, value in pairs)
    sql = f"UPDATE {table} SET {assignments}"
    sql += _where(params, id_column=id_column, row_id=row_id, filters=())
    return Statement(sql, params.values)


def build_delete(table_name: str, row_id: str, *, id_column: str) -> Statement:
    params = _Params()
    sql = f"DELETE FROM {_table(table_name)}"
    sql += _where(params, id_column=id_column, row_id=row_id, filters=())
    return Statement(sql, params.values)
