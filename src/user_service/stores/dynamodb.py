"""DynamoDB user store — the production backend.

Two modes:

* Default: the table has no e-mail index, so ``exists_by_email`` scans the
  whole table page by page, and ``put`` is an unconditional ``PutItem``.
  Check and write are separate calls; concurrent requests for the same
  e-mail can both succeed.
* ``email_index_table`` set: a second table keyed by ``email`` acts as a
  uniqueness marker.  Existence is a single ``GetItem`` and ``put`` writes
  the user and the marker in one transaction, both conditional on absence.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError

from user_service.errors import UserAlreadyExists
from user_service.registry import register_store
from user_service.schemas.user import User
from user_service.stores.base import BaseUserStore

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "User"
LOCAL_ENDPOINT_URL = "http://dynamodb:8000"


@register_store("dynamodb")
class DynamoDBUserStore(BaseUserStore):
    """Persist users to a DynamoDB table via boto3."""

    def __init__(self, config: dict[str, Any]) -> None:
        super().__init__(config)
        self._resource = None
        self._table = None
        self._index_table = None
        self._serializer = TypeSerializer()

    @property
    def table_name(self) -> str:
        return self._config.get("table_name") or DEFAULT_TABLE_NAME

    @property
    def endpoint_url(self) -> str | None:
        """Explicit ``endpoint_url`` wins; local mode falls back to the local one."""
        if self._config.get("endpoint_url"):
            return self._config["endpoint_url"]
        if self._config.get("local", False):
            return self._config.get("local_endpoint_url", LOCAL_ENDPOINT_URL)
        return None

    def connect(self) -> None:
        kwargs: dict[str, Any] = {}
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        if self._config.get("region_name"):
            kwargs["region_name"] = self._config["region_name"]

        self._resource = boto3.resource("dynamodb", **kwargs)
        self._table = self._resource.Table(self.table_name)
        index_table = self._config.get("email_index_table")
        if index_table:
            self._index_table = self._resource.Table(index_table)
        logger.info(
            "Connected to DynamoDB table %r (endpoint=%s, email_index_table=%r)",
            self.table_name,
            self.endpoint_url or "default",
            index_table,
        )

    def exists_by_email(self, email: str) -> bool:
        if self._table is None:
            self.connect()

        if self._index_table is not None:
            resp = self._index_table.get_item(Key={"email": email})
            return "Item" in resp
        return self._scan_for_email(email)

    def put(self, user: User) -> None:
        if self._table is None:
            self.connect()

        item = user.to_item()
        if self._index_table is not None:
            self._put_with_marker(item)
        else:
            self._table.put_item(Item=item)  # type: ignore[union-attr]
        logger.info("Put user %s into table %r", user.id, self.table_name)

    def disconnect(self) -> None:
        self._resource = None
        self._table = None
        self._index_table = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _scan_for_email(self, email: str) -> bool:
        """Scan page by page; stop at the first page with a match."""
        kwargs: dict[str, Any] = {
            "FilterExpression": Attr("email").eq(email),
            "Select": "COUNT",
        }
        pages = 0
        while True:
            resp = self._table.scan(**kwargs)  # type: ignore[union-attr]
            pages += 1
            if resp.get("Count", 0) > 0:
                logger.info("E-mail found after scanning %d page(s)", pages)
                return True
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                logger.info("E-mail not found after scanning %d page(s)", pages)
                return False
            kwargs["ExclusiveStartKey"] = last_key

    def _put_with_marker(self, item: dict[str, Any]) -> None:
        client = self._resource.meta.client  # type: ignore[union-attr]
        marker = {"email": item["email"], "id": item["id"]}
        try:
            client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table_name,
                            "Item": self._serialize(item),
                            "ConditionExpression": "attribute_not_exists(id)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self._index_table.name,  # type: ignore[union-attr]
                            "Item": self._serialize(marker),
                            "ConditionExpression": "attribute_not_exists(email)",
                        }
                    },
                ]
            )
        except ClientError as exc:
            if _condition_failed(exc):
                raise UserAlreadyExists() from exc
            raise

    def _serialize(self, item: dict[str, Any]) -> dict[str, Any]:
        return {key: self._serializer.serialize(value) for key, value in item.items()}


def _condition_failed(exc: ClientError) -> bool:
    if exc.response.get("Error", {}).get("Code") != "TransactionCanceledException":
        return False
    reasons = exc.response.get("CancellationReasons", [])
    return any(reason.get("Code") == "ConditionalCheckFailed" for reason in reasons)
