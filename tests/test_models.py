"""Tests for config models and load_config()."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from user_service.models import (
    DEFAULT_LOCAL_CLAIMS,
    ServiceConfig,
    StoreConfig,
    load_config,
    parse_bool,
)


class TestDefaults:
    def test_defaults(self):
        config = load_config(environ={})
        assert config.store.backend == "dynamodb"
        assert config.settings.local is False
        assert config.settings.conflict_status == 409
        assert config.settings.id_generator == "xid"
        assert config.settings.local_claims == DEFAULT_LOCAL_CLAIMS

    def test_instances_do_not_share_settings(self):
        a = ServiceConfig()
        b = ServiceConfig()
        a.settings.local = True
        assert b.settings.local is False


class TestLoadConfig:
    def test_reads_yaml(self, tmp_path: Path):
        path = tmp_path / "service.yaml"
        path.write_text(dedent("""\
            version: "1.0"
            store:
              backend: json_local
              inline_config:
                path: users.json
            settings:
              log_level: debug
              conflict_status: 500
              id_generator: uuid4
        """))
        config = load_config(path, environ={})
        assert config.store.backend == "json_local"
        assert config.store.resolve() == {"path": "users.json"}
        assert config.settings.log_level == "DEBUG"
        assert config.settings.conflict_status == 500
        assert config.settings.id_generator == "uuid4"

    def test_path_from_environment(self, tmp_path: Path):
        path = tmp_path / "service.yaml"
        path.write_text("store:\n  backend: sql_database\n")
        config = load_config(environ={"USER_SERVICE_CONFIG": str(path)})
        assert config.store.backend == "sql_database"

    def test_invalid_conflict_status_fails_fast(self, tmp_path: Path):
        path = tmp_path / "service.yaml"
        path.write_text("settings:\n  conflict_status: 418\n")
        with pytest.raises(ValidationError):
            load_config(path, environ={})

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "service.yaml"
        path.write_text("")
        assert load_config(path, environ={}).store.backend == "dynamodb"


class TestEnvironmentOverrides:
    @pytest.mark.parametrize("value", ["true", "1", "TRUE", "t"])
    def test_sam_local_turns_on_local_mode(self, value):
        config = load_config(environ={"AWS_SAM_LOCAL": value})
        assert config.settings.local is True

    @pytest.mark.parametrize("value", ["false", "0", ""])
    def test_sam_local_false_values(self, value):
        config = load_config(environ={"AWS_SAM_LOCAL": value})
        assert config.settings.local is False

    def test_table_name_override(self):
        config = load_config(environ={"TABLE_NAME": "Users-dev"})
        assert config.store.resolve()["table_name"] == "Users-dev"

    def test_log_level_override(self):
        config = load_config(environ={"LOG_LEVEL": "warning"})
        assert config.settings.log_level == "WARNING"


class TestStoreConfig:
    def test_inline_wins_over_file(self, tmp_path: Path):
        cfg_file = tmp_path / "store.yaml"
        cfg_file.write_text("table_name: FromFile\nregion_name: us-east-1\n")
        store = StoreConfig(
            config_file=str(cfg_file), inline_config={"table_name": "Inline"}
        )
        assert store.resolve() == {"table_name": "Inline", "region_name": "us-east-1"}

    def test_no_config_is_empty(self):
        assert StoreConfig().resolve() == {}


def test_parse_bool_none():
    assert parse_bool(None) is False
