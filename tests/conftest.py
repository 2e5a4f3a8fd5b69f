"""Shared fixtures for the test suite."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Any

import pytest

from user_service.handler import CreateUserHandler
from user_service.stores.json_local import JSONLocalUserStore


class CountingIds:
    """Deterministic id generator: ``id-1``, ``id-2``, ..."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"id-{next(self._counter)}"


@pytest.fixture()
def claims() -> dict[str, Any]:
    return {"email": "caller@example.com", "custom:Accounts": "ROOT"}


@pytest.fixture()
def valid_body() -> dict[str, Any]:
    """The canonical create-user payload."""
    return {"e-mail": "a@b.com", "name": "Ann", "age": 30}


@pytest.fixture()
def json_store(tmp_path: Path) -> JSONLocalUserStore:
    store = JSONLocalUserStore({"path": str(tmp_path / "users.json")})
    store.connect()
    return store


@pytest.fixture()
def handler(json_store: JSONLocalUserStore) -> CreateUserHandler:
    return CreateUserHandler(json_store, CountingIds())
