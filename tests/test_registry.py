"""Tests for the decorator-based plugin registry."""

from __future__ import annotations

import pytest

import user_service.app  # noqa: F401  (registers stores and id generators)
from user_service.registry import (
    get_id_generator,
    get_store,
    list_registered,
    register_store,
)


class TestRegistry:
    def test_dynamodb_store_registered(self):
        assert get_store("dynamodb").__name__ == "DynamoDBUserStore"

    def test_sql_database_store_registered(self):
        assert get_store("sql_database").__name__ == "SQLAlchemyUserStore"

    def test_json_local_store_registered(self):
        assert get_store("json_local").__name__ == "JSONLocalUserStore"

    def test_id_generators_registered(self):
        assert get_id_generator("xid").__name__ == "XidGenerator"
        assert get_id_generator("uuid4").__name__ == "UUID4Generator"

    def test_unknown_store_raises(self):
        with pytest.raises(KeyError, match="Unknown store"):
            get_store("does_not_exist")

    def test_unknown_id_generator_raises(self):
        with pytest.raises(KeyError, match="Unknown id generator"):
            get_id_generator("does_not_exist")

    def test_duplicate_registration_raises(self):
        with pytest.raises(ValueError, match="Duplicate store registration"):
            register_store("dynamodb")(type("Other", (), {}))

    def test_list_registered(self):
        result = list_registered()
        assert set(result) == {"stores", "id_generators"}
        assert result["stores"]["json_local"] == "JSONLocalUserStore"
        assert result["id_generators"]["xid"] == "XidGenerator"
