"""Pydantic models for service configuration validation.

The YAML config (optional) is parsed into these models at cold start, then
environment overrides are applied.  Invalid configs fail fast with clear
error messages before any store is touched.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_ENV_VAR = "USER_SERVICE_CONFIG"

# Synthetic id-token claims used when running outside API Gateway.
DEFAULT_LOCAL_CLAIMS: dict[str, Any] = {
    "at_hash": "Q8yOMWKcs3sJGcwsFpWTAg",
    "sub": "f8b122b0-f272-4715-826b-fbaf3f532a3f",
    "email_verified": True,
    "iss": "https://cognito-idp.us-east-1.amazonaws.com/us-east-1_397EAYA3A",
    "cognito:username": "f8b122b0-f272-4715-826b-fbaf3f532a3f",
    "aud": "7uvk2dvgl7adp285c5t5vibb6a",
    "custom:Accounts": "ROOT",
    "token_use": "id",
    "auth_time": 1645590467,
    "exp": 1645594067,
    "iat": 1645590467,
    "jti": "fdea9783-5853-4a11-8c7c-7f3dc406e7ad",
    "email": "local.user@example.com",
}


class StoreConfig(BaseModel):
    backend: str = "dynamodb"
    config_file: str | None = None
    inline_config: dict[str, Any] | None = None

    def resolve(self) -> dict[str, Any]:
        """Merge config_file YAML with inline_config.  Inline wins."""
        merged: dict[str, Any] = {}
        if self.config_file is not None:
            merged.update(yaml.safe_load(Path(self.config_file).read_text()) or {})
        if self.inline_config is not None:
            merged.update(self.inline_config)
        return merged


class ServiceSettings(BaseModel):
    log_level: str = "INFO"
    local: bool = False
    conflict_status: Literal[409, 500] = 409
    id_generator: str = "xid"
    local_claims: dict[str, Any] = Field(
        default_factory=lambda: dict(DEFAULT_LOCAL_CLAIMS)
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


class ServiceConfig(BaseModel):
    """Root model — represents the entire service YAML file."""

    version: str = "1.0"
    store: StoreConfig = Field(default_factory=StoreConfig)
    settings: ServiceSettings = Field(default_factory=ServiceSettings)


def parse_bool(value: str | None) -> bool:
    """Return *True* for truthy environment flags such as ``1`` or ``true``."""
    if value is None:
        return False
    return value.strip().lower() in {"1", "t", "true", "y", "yes", "on"}


def load_config(
    path: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> ServiceConfig:
    """Build the service config from YAML (if any) plus the environment.

    *path* defaults to ``$USER_SERVICE_CONFIG``; with neither, defaults apply.
    Recognised overrides: ``AWS_SAM_LOCAL`` (turns local mode on),
    ``TABLE_NAME`` and ``LOG_LEVEL``.
    """
    env = os.environ if environ is None else environ
    if path is None:
        path = env.get(CONFIG_ENV_VAR) or None

    raw: dict[str, Any] = {}
    if path is not None:
        raw = yaml.safe_load(Path(path).read_text()) or {}
    config = ServiceConfig.model_validate(raw)

    if parse_bool(env.get("AWS_SAM_LOCAL")):
        config.settings.local = True
    if env.get("LOG_LEVEL"):
        config.settings.log_level = env["LOG_LEVEL"].upper()
    if env.get("TABLE_NAME"):
        inline = dict(config.store.inline_config or {})
        inline["table_name"] = env["TABLE_NAME"]
        config.store.inline_config = inline
    return config
