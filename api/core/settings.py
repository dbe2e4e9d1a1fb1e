"""
Environment-driven settings.

Every getter reads the environment on each call, so tests can use
`monkeypatch.setenv` without reloading modules.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_KEYS = {"quizzes": "slug"}
DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_list(name: str, default: tuple[str, ...]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def pool_min_size() -> int:
    return max(1, _env_int("DB_POOL_MIN_SIZE", 1))


def pool_max_size() -> int:
    return max(pool_min_size(), _env_int("DB_POOL_MAX_SIZE", 5))


def command_timeout() -> float:
    return _env_float("DB_COMMAND_TIMEOUT", 30.0)


def mount_prefix() -> str:
    raw = os.environ.get("REST_MOUNT_PREFIX", "rest").strip().strip("/")
    return raw or "rest"


def primary_key_overrides() -> dict[str, str]:
    """
    Table -> identifying column.

    `REST_PRIMARY_KEYS` holds comma separated `table=column` pairs and is
    merged over the built-in defaults.
    """
    overrides = dict(DEFAULT_PRIMARY_KEYS)
    raw = os.environ.get("REST_PRIMARY_KEYS", "").strip()
    for pair in raw.split(","):
        table, sep, column = pair.partition("=")
        table, column = table.strip(), column.strip()
        if not sep or not table or not column:
            continue
        overrides[table] = column
    return overrides


def column_types() -> dict[str, dict[str, str]]:
    """
    Optional per-table column typing: `{"table": {"column": "bool|json|raw"}}`.
    """
    raw = os.environ.get("REST_COLUMN_TYPES", "").strip()
    if not raw:
        return {}
    try:
        data: Any = json.loads(raw)
    except ValueError:
        logger.warning("invalid_column_types env=REST_COLUMN_TYPES")
        return {}
    if not isinstance(data, dict):
        logger.warning("invalid_column_types env=REST_COLUMN_TYPES reason=not_an_object")
        return {}

    parsed: dict[str, dict[str, str]] = {}
    for table, columns in data.items():
        if not isinstance(columns, dict):
            continue
        parsed[str(table)] = {str(col): str(kind).strip().lower() for col, kind in columns.items()}
    return parsed


def update_requires_match() -> bool:
    return _env_bool("REST_UPDATE_REQUIRES_MATCH", False)


def cors_allow_origins() -> list[str]:
    return _env_list("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
