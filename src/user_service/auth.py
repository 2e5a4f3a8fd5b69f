"""Authorization context — pull the caller's claims out of the event.

Claims are verified upstream (API Gateway authorizer); here they are only
extracted and logged.  Outside API Gateway (local mode) the configured
synthetic claims stand in for the real ones.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from user_service.models import ServiceSettings

logger = logging.getLogger(__name__)


def claims_from_event(event: Mapping[str, Any]) -> dict[str, Any] | None:
    """Return ``requestContext.authorizer.claims``, or ``None`` when absent."""
    request_context = event.get("requestContext") or {}
    authorizer = request_context.get("authorizer")
    if not isinstance(authorizer, Mapping):
        return None
    claims = authorizer.get("claims")
    if not isinstance(claims, Mapping):
        return None
    return dict(claims)


def resolve_claims(
    event: Mapping[str, Any], settings: ServiceSettings
) -> dict[str, Any] | None:
    """Claims to hand to the handler for this *event*.

    In local mode the synthetic claims replace whatever the event carries.
    """
    if settings.local:
        logger.info("Local mode — using synthetic authorizer claims")
        return dict(settings.local_claims)
    return claims_from_event(event)


def log_claims(claims: Mapping[str, Any]) -> None:
    logger.info("Token claims %s", dict(claims))
    logger.info("Logged user %s", claims.get("email"))
    logger.info("Logged user account %s", claims.get("custom:Accounts"))
