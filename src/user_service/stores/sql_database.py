"""SQLAlchemy user store — keeps users in any SQL database.

The table carries a unique index on ``email``, so the database itself
rejects a duplicate even when two requests pass the existence check at the
same time.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import (
    Column,
    Engine,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    select,
)
from sqlalchemy.exc import IntegrityError

from user_service.errors import UserAlreadyExists
from user_service.registry import register_store
from user_service.schemas.user import User
from user_service.stores.base import BaseUserStore

logger = logging.getLogger(__name__)


def _users_table(metadata: MetaData, table_name: str) -> Table:
    return Table(
        table_name,
        metadata,
        Column("id", String(64), primary_key=True),
        Column("email", String(320), nullable=False),
        Column("name", String(200), nullable=False),
        Column("age", Integer, nullable=True),
        Index(f"uq_{table_name}_email", "email", unique=True),
    )


@register_store("sql_database")
class SQLAlchemyUserStore(BaseUserStore):
    """Persist users to a SQL database via SQLAlchemy."""

    def __init__(self, config: dict[str, Any]) -> None:
        super().__init__(config)
        self._engine: Engine | None = None
        self._metadata = MetaData()
        self._table = _users_table(self._metadata, config.get("table_name", "users"))

    def connect(self) -> None:
        connection_string = self._config["connection_string"]
        self._engine = create_engine(connection_string)
        if self._config.get("create_table", True):
            self._metadata.create_all(self._engine)
        logger.info("Connected to database: %s", connection_string)

    def exists_by_email(self, email: str) -> bool:
        if self._engine is None:
            self.connect()

        stmt = select(self._table.c.id).where(self._table.c.email == email).limit(1)
        with self._engine.connect() as conn:  # type: ignore[union-attr]
            found = conn.execute(stmt).first() is not None
        logger.info("E-mail lookup in %r: found=%s", self._table.name, found)
        return found

    def put(self, user: User) -> None:
        if self._engine is None:
            self.connect()

        item = user.to_item()
        item.setdefault("age", None)
        try:
            with self._engine.begin() as conn:  # type: ignore[union-attr]
                conn.execute(self._table.insert().values(**item))
        except IntegrityError as exc:
            if self._email_taken(user.email):
                raise UserAlreadyExists() from exc
            raise
        logger.info("Inserted user %s into table %r", user.id, self._table.name)

    def disconnect(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Disposed SQLAlchemy engine")

    def _email_taken(self, email: str) -> bool:
        """Tell an e-mail collision apart from other integrity errors."""
        try:
            return self.exists_by_email(email)
        except Exception:
            logger.exception("Could not re-check e-mail after integrity error")
            return False
