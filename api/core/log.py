"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging

from . import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging() -> None:
    root = logging.getLogger()
    level = logging.getLevelName(settings.log_level())
    if not isinstance(level, int):
        level = logging.INFO
    root.setLevel(level)

    # Idempotent: repeated startups (tests, reload) must not stack handlers.
    if any(getattr(h, "_rest_gateway", False) for h in root.handlers):
        return None
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._rest_gateway = True  # type: ignore[attr-defined]
    root.addHandler(handler)
