"""Create-user handler — the one operation this service exposes.

Request → authorization presence check → parse body → validate → assign id
→ uniqueness check → persist → response.  Every failure is terminal and
becomes an error response; nothing is retried.

The handler is environment-agnostic: the store, id generator and claims are
all handed in by the caller (see ``user_service.app``).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from user_service.auth import log_claims
from user_service.errors import (
    AuthorizerNotConfigured,
    UserAlreadyExists,
    UserNotCreated,
    UserNotFound,
    UserNotInformed,
    UserServiceError,
    ValidationFailed,
)
from user_service.responses import error_response, json_response
from user_service.schemas.user import User
from user_service.stores.base import BaseUserStore

logger = logging.getLogger(__name__)


class CreateUserHandler:
    """Validate, de-duplicate by e-mail, and persist a new user."""

    def __init__(
        self,
        store: BaseUserStore,
        id_generator: Callable[[], str],
        *,
        conflict_status: int = UserAlreadyExists.status_code,
    ) -> None:
        self._store = store
        self._new_id = id_generator
        self._conflict_status = conflict_status

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def handle(
        self,
        body: str | bytes | Mapping[str, Any] | None,
        claims: Mapping[str, Any] | None = None,
        request_id: str | None = None,
    ) -> dict[str, Any]:
        """Run the operation and return a proxy response dict.

        Parameters
        ----------
        body:
            Raw JSON text/bytes, or an already-decoded mapping.
        claims:
            Pre-verified authorizer claims; ``None`` means no authorizer.
        request_id:
            Only used for logging.
        """
        logger.info("RequestID %s", request_id)
        try:
            user = self.create_user(body, claims)
        except UserServiceError as exc:
            status = self._status_for(exc)
            logger.warning("Create user failed (%d): %s", status, exc.message)
            return error_response(exc, status)
        return json_response(200, user.to_response())

    def create_user(
        self,
        body: str | bytes | Mapping[str, Any] | None,
        claims: Mapping[str, Any] | None = None,
    ) -> User:
        """Create and persist a user; raise a ``UserServiceError`` on failure."""
        if claims is None:
            raise AuthorizerNotConfigured()
        log_claims(claims)

        payload = self._parse_body(body)
        try:
            user = User.model_validate(payload)
        except ValidationError as exc:
            logger.warning("User validation failed: %s", exc)
            raise ValidationFailed(exc.errors(include_url=False)) from exc

        user = user.model_copy(update={"id": self._new_id()})
        logger.info("Assigned id %s to new user", user.id)

        try:
            exists = self._store.exists_by_email(user.email)
        except Exception as exc:
            logger.error("E-mail lookup failed in %s: %s", self._store.name, exc)
            raise UserNotFound() from exc
        if exists:
            raise UserAlreadyExists()

        try:
            self._store.put(user)
        except UserAlreadyExists:
            raise
        except Exception as exc:
            logger.error("Put failed in %s: %s", self._store.name, exc)
            raise UserNotCreated() from exc

        logger.info("User %s created", user.id)
        return user

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_body(body: str | bytes | Mapping[str, Any] | None) -> dict[str, Any]:
        if isinstance(body, Mapping):
            return dict(body)
        if not body:
            raise UserNotInformed()
        try:
            payload = json.loads(body)
        except (TypeError, ValueError) as exc:
            raise UserNotInformed() from exc
        if not isinstance(payload, dict):
            raise UserNotInformed()
        return payload

    def _status_for(self, exc: UserServiceError) -> int:
        if isinstance(exc, UserAlreadyExists):
            return self._conflict_status
        return exc.status_code
