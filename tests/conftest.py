from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from main import app
from rest import dependencies


class FakeDatabase:
    """
    Records every statement and replays scripted results in order.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, list[Any]]] = []
        self.one_results: list[dict[str, Any] | None] = []
        self.all_results: list[list[dict[str, Any]]] = []
        self.execute_results: list[int] = []
        self.error: Exception | None = None

    def _record(self, kind: str, sql: str, params: Any) -> None:
        self.calls.append((kind, sql, list(params)))
        if self.error is not None:
            raise self.error

    async def fetch_one(self, sql: str, params: Any = ()) -> dict[str, Any] | None:
        self._record("fetch_one", sql, params)
        return self.one_results.pop(0) if self.one_results else None

    async def fetch_all(self, sql: str, params: Any = ()) -> list[dict[str, Any]]:
        self._record("fetch_all", sql, params)
        return self.all_results.pop(0) if self.all_results else []

    async def execute(self, sql: str, params: Any = ()) -> int:
        self._record("execute", sql, params)
        return self.execute_results.pop(0) if self.execute_results else 0


@pytest.fixture()
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture()
def client(fake_db):
    app.dependency_overrides[dependencies.get_database] = lambda: fake_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
