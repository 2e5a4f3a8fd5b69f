"""Base user-store interface.

Stores are the handler's only way to reach persisted users.  The handler
asks two things of them: "is this e-mail taken?" and "save this user".
"""

from __future__ import annotations

import abc
from typing import Any

from user_service.schemas.user import User


class BaseUserStore(abc.ABC):
    """Check e-mail uniqueness and persist new users.

    Lifecycle (driven by the app, once per process):
        1. __init__(config)     — receive the merged store config.
        2. connect()            — open clients / engines.
        3. exists_by_email(..)  — called once per request.
        4. put(user)            — called once per successful request.
        5. disconnect()         — tear down resources.

    ``put`` is a plain insert unless the backend documents otherwise.  A
    backend that can enforce e-mail uniqueness atomically raises
    :class:`~user_service.errors.UserAlreadyExists` from ``put``.
    """

    def __init__(self, config: Any) -> None:
        self._config = config

    @property
    def name(self) -> str:
        return self.__class__.__name__

    # -- lifecycle hooks -----------------------------------------------------

    def connect(self) -> None:
        """Open connections or clients.

        Default is a no-op so file-based stores can skip it.
        """

    @abc.abstractmethod
    def exists_by_email(self, email: str) -> bool:
        """Return *True* iff a stored user has exactly this *email*."""
        ...

    @abc.abstractmethod
    def put(self, user: User) -> None:
        """Persist *user* as a new record."""
        ...

    def disconnect(self) -> None:
        """Release connections and clean up.

        Default is a no-op.
        """

    # -- context-manager support ---------------------------------------------

    def __enter__(self) -> BaseUserStore:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.disconnect()
