"""
Collaborators injected into the gateway route.

Tests swap these through `app.dependency_overrides`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core import db, settings

from .keys import PrimaryKeyResolver, resolver_from_settings


@dataclass(frozen=True)
class RestOptions:
    column_types: dict[str, dict[str, str]] = field(default_factory=dict)
    update_requires_match: bool = False

    def column_types_for(self, table: str) -> dict[str, str]:
        return self.column_types.get(table, {})


def get_database() -> db.Database:
    return db.database()


def get_key_resolver() -> PrimaryKeyResolver:
    return resolver_from_settings()


def get_options() -> RestOptions:
    return RestOptions(
        column_types=settings.column_types(),
        update_requires_match=settings.update_requires_match(),
    )
