"""JSON local file store — keeps users in a JSON file on disk.

Meant for local development and tests.  Writes are atomic
(write-to-temp-then-rename) and the uniqueness check plus insert run under
a process-local lock, so duplicates cannot slip in between them.
"""

from __future__ import annotations

import json
import logging
import tempfile
import threading
from pathlib import Path
from typing import Any

from user_service.errors import UserAlreadyExists
from user_service.registry import register_store
from user_service.schemas.user import User
from user_service.stores.base import BaseUserStore

logger = logging.getLogger(__name__)


@register_store("json_local")
class JSONLocalUserStore(BaseUserStore):
    """Persist users as a JSON array of records."""

    def __init__(self, config: dict[str, Any]) -> None:
        super().__init__(config)
        self._path = Path(config.get("path", "users.json"))
        self._lock = threading.Lock()

    def connect(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("User file ready: %s", self._path)

    def exists_by_email(self, email: str) -> bool:
        return any(item.get("email") == email for item in self._read())

    def put(self, user: User) -> None:
        item = user.to_item()
        with self._lock:
            items = self._read()
            if any(existing.get("email") == user.email for existing in items):
                raise UserAlreadyExists()
            items.append(item)
            self._write(items)
        logger.info("Stored user %s in %s", user.id, self._path)

    def all(self) -> list[dict[str, Any]]:
        """Return every stored record."""
        return self._read()

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def _read(self) -> list[dict[str, Any]]:
        """Load the user file; a missing file means no users yet."""
        if not self._path.exists():
            return []
        data = json.loads(self._path.read_text())
        if not isinstance(data, list):
            raise ValueError(f"User file {self._path} is not a JSON array")
        return data

    def _write(self, items: list[dict[str, Any]]) -> None:
        """Persist *items* atomically (temp-file then rename)."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with open(fd, "w") as fh:
                json.dump(items, fh, indent=2)
            Path(tmp_path).replace(self._path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
