"""
Value coercion between wire (JSON) values and storage scalars.

Write direction: objects/arrays become JSON text, booleans become 0/1.
Read direction ("hydration"): 0/1 become booleans and JSON-looking text is
parsed back. The read heuristic is schema-free: an integer column that
happens to hold 0 or 1 is read back as a boolean. Declaring a column kind
(`bool`, `json`, `raw`) in the column type map disables the heuristic for
that column.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Union

JSONValue = Union[None, bool, int, float, str, list, dict]
StorageValue = Union[None, int, float, str]

KIND_BOOL = "bool"
KIND_JSON = "json"
KIND_RAW = "raw"

_FALSE_TEXT = frozenset({"", "0", "false"})


def to_storage(value: JSONValue) -> StorageValue:
    if value is None:
        return None
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return value


def _parse_json_text(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError:
        return value


def from_storage(value: Any, kind: str | None = None) -> Any:
    if value is None:
        return None

    if kind == KIND_RAW:
        return value
    if kind == KIND_BOOL:
        if isinstance(value, str):
            return value.strip().lower() not in _FALSE_TEXT
        return bool(value)
    if kind == KIND_JSON:
        return _parse_json_text(value) if isinstance(value, str) else value

    if type(value) is int and value in (0, 1):
        return value == 1
    if isinstance(value, str) and value[:1] in ("{", "["):
        return _parse_json_text(value)
    return value


def hydrate_row(
    row: Mapping[str, Any] | None,
    column_types: Mapping[str, str] | None = None,
) -> dict[str, Any] | None:
    if row is None:
        return None
    kinds = column_types or {}
    return {column: from_storage(value, kinds.get(column)) for column, value in row.items()}


def coerce_payload(payload: Mapping[str, JSONValue]) -> dict[str, StorageValue]:
    return {column: to_storage(value) for column, value in payload.items()}
