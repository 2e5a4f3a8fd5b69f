"""Lambda entry point — wires config, store and id generator into the handler.

The app **never** imports a concrete store or id generator class.  It
resolves the configured keys through the registry, builds the store once
per process, and reuses it for every invocation.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Mapping
from typing import Any

# Importing these modules triggers the @register_* decorators
import user_service.ids  # noqa: F401
import user_service.stores  # noqa: F401

from user_service.auth import resolve_claims
from user_service.handler import CreateUserHandler
from user_service.models import ServiceConfig, load_config
from user_service.registry import get_id_generator, get_store
from user_service.stores.base import BaseUserStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_app: App | None = None


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # The Lambda runtime installs its own root handler, so basicConfig is a
    # no-op there; the level still has to be set.
    logging.getLogger().setLevel(level)


def build_store(config: ServiceConfig) -> BaseUserStore:
    store_config = config.store.resolve()
    store_config.setdefault("local", config.settings.local)
    store_cls = get_store(config.store.backend)
    logger.info(
        "Registry resolved %r → %s", config.store.backend, store_cls.__name__
    )
    store = store_cls(store_config)
    store.connect()
    return store


class App:
    """Process-wide state: the config and the handler built from it."""

    def __init__(self, config: ServiceConfig, store: BaseUserStore | None = None) -> None:
        self.config = config
        self.store = store if store is not None else build_store(config)
        id_generator_cls = get_id_generator(config.settings.id_generator)
        self.handler = CreateUserHandler(
            self.store,
            id_generator_cls(),
            conflict_status=config.settings.conflict_status,
        )

    def invoke(self, event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
        """Adapt an API Gateway proxy event and run the handler."""
        claims = resolve_claims(event, self.config.settings)
        return self.handler.handle(
            _event_body(event),
            claims=claims,
            request_id=getattr(context, "aws_request_id", None),
        )

    def close(self) -> None:
        self.store.disconnect()


def get_app() -> App:
    """Return the process-wide app, building it on first use (cold start)."""
    global _app
    if _app is None:
        config = load_config()
        configure_logging(config.settings.log_level)
        _app = App(config)
        logger.info(
            "App ready (store=%s, local=%s)",
            config.store.backend,
            config.settings.local,
        )
    return _app


def reset_app() -> None:
    """Drop the cached app; the next invocation rebuilds it."""
    global _app
    if _app is not None:
        _app.close()
    _app = None


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return get_app().invoke(event, context)


def _event_body(event: Mapping[str, Any]) -> Any:
    body = event.get("body")
    if body and event.get("isBase64Encoded") and isinstance(body, str):
        try:
            return base64.b64decode(body, validate=True)
        except binascii.Error as exc:
            # Handled downstream as a missing body.
            logger.warning("Body is not valid base64: %s", exc)
            return None
    return body
