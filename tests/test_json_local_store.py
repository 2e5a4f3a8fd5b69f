"""Tests for the JSONLocalUserStore."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from user_service.errors import UserAlreadyExists
from user_service.schemas.user import User
from user_service.stores.json_local import JSONLocalUserStore


def _user(uid: str = "u1", email: str = "a@b.com") -> User:
    return User(id=uid, email=email, name="Ann", age=30)


class TestJSONLocalUserStore:
    def test_missing_file_has_no_users(self, tmp_path: Path):
        store = JSONLocalUserStore({"path": str(tmp_path / "none.json")})
        assert store.exists_by_email("a@b.com") is False

    def test_put_then_exists(self, json_store):
        json_store.put(_user())
        assert json_store.exists_by_email("a@b.com") is True
        assert json_store.exists_by_email("other@b.com") is False

    def test_writes_valid_json(self, tmp_path: Path):
        path = tmp_path / "users.json"
        store = JSONLocalUserStore({"path": str(path)})
        store.put(_user())
        assert json.loads(path.read_text()) == [
            {"id": "u1", "email": "a@b.com", "name": "Ann", "age": 30}
        ]

    def test_put_rejects_duplicate_email(self, json_store):
        json_store.put(_user("u1"))
        with pytest.raises(UserAlreadyExists):
            json_store.put(_user("u2"))
        assert len(json_store.all()) == 1

    def test_creates_parent_directories(self, tmp_path: Path):
        path = tmp_path / "deep" / "nested" / "users.json"
        with JSONLocalUserStore({"path": str(path)}) as store:
            store.put(_user())
        assert path.exists()

    def test_non_array_file_raises(self, tmp_path: Path):
        path = tmp_path / "users.json"
        path.write_text('{"not": "a list"}')
        store = JSONLocalUserStore({"path": str(path)})
        with pytest.raises(ValueError, match="not a JSON array"):
            store.exists_by_email("a@b.com")

    def test_no_temp_files_left_behind(self, tmp_path: Path):
        store = JSONLocalUserStore({"path": str(tmp_path / "users.json")})
        store.put(_user("u1", "a@b.com"))
        store.put(_user("u2", "c@d.com"))
        assert [p.name for p in tmp_path.iterdir()] == ["users.json"]
