"""Error taxonomy for the create-user operation.

Every failure the handler can report is one of these classes.  Each carries
the HTTP status code it maps to and the message that ends up, JSON-encoded,
as the response body.
"""

from __future__ import annotations

from typing import Any


class UserServiceError(Exception):
    """Base class — a terminal failure for the current invocation."""

    status_code: int = 500
    message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message is not None:
            self.message = message


class AuthorizerNotConfigured(UserServiceError):
    status_code = 500
    message = "Authorization not configured"


class UserNotInformed(UserServiceError):
    status_code = 400
    message = "User body required."


class ValidationFailed(UserServiceError):
    """Field-level validation failure; ``errors`` holds pydantic's error list."""

    status_code = 400
    message = "User validation failed"

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        details = "; ".join(_format_error(err) for err in errors)
        super().__init__(details or self.message)


class UserAlreadyExists(UserServiceError):
    status_code = 409
    message = "User already exists with this e-mail"


class UserNotFound(UserServiceError):
    # Raised when the uniqueness lookup itself fails, not on a plain miss.
    status_code = 500
    message = "User not found"


class UserNotCreated(UserServiceError):
    status_code = 500
    message = "User could not be created"


def _format_error(err: dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ())) or "body"
    return f"{loc}: {err.get('msg', 'invalid value')}"
