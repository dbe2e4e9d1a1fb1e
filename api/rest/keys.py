"""
Identifying-column resolution.
"""

from __future__ import annotations

from typing import Mapping

from core import settings

from .identifiers import sanitize

DEFAULT_ID_COLUMN = "id"


class PrimaryKeyResolver:
    """
    Maps a table name to the column that addresses a single row.

    Tables without an override use `default`. Read-only after construction.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None, default: str = DEFAULT_ID_COLUMN) -> None:
        self._overrides = {
            sanitize(table): sanitize(column)
            for table, column in (overrides or {}).items()
            if sanitize(table) and sanitize(column)
        }
        self._default = sanitize(default) or DEFAULT_ID_COLUMN

    def resolve(self, table_name: str) -> str:
        return self._overrides.get(sanitize(table_name), self._default)


def resolver_from_settings() -> PrimaryKeyResolver:
    return PrimaryKeyResolver(settings.primary_key_overrides())
