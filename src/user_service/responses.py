"""API Gateway proxy-integration response framing."""

from __future__ import annotations

import json
from typing import Any

from user_service.errors import UserServiceError

DEFAULT_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}


def json_response(status_code: int, payload: Any) -> dict[str, Any]:
    """Wrap *payload* as a proxy response with a JSON body."""
    return {
        "statusCode": status_code,
        "headers": dict(DEFAULT_HEADERS),
        "body": json.dumps(payload),
    }


def error_response(
    error: UserServiceError, status_code: int | None = None
) -> dict[str, Any]:
    """Body is the error message as a JSON string, e.g. ``"User body required."``."""
    return json_response(status_code or error.status_code, error.message)
