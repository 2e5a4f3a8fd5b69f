"""Pydantic model for User records — the validator of the create-user request.

The wire name of the e-mail field is ``e-mail``; ``email`` is accepted on
input as well.  Stores persist it under ``email`` (see ``to_item``).

The e-mail is checked for syntax only and kept exactly as transmitted, so
uniqueness is an exact, case-sensitive match on what the caller sent.
"""

from __future__ import annotations

from typing import Annotated, Any

from email_validator import validate_email
from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field

INT16_MIN = -32768
INT16_MAX = 32767


def _check_email(value: str) -> str:
    # Raises EmailNotValidError (a ValueError) on bad syntax.
    validate_email(value, check_deliverability=False)
    return value


Email = Annotated[str, AfterValidator(_check_email)]
SmallInt = Annotated[int, Field(strict=True, ge=INT16_MIN, le=INT16_MAX)]


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    email: Email = Field(
        ...,
        validation_alias=AliasChoices("e-mail", "email"),
        serialization_alias="e-mail",
    )
    name: str = Field(..., min_length=2, max_length=200)
    age: SmallInt | None = None

    def to_item(self) -> dict[str, Any]:
        """Return the record as stored: ``id``, ``email``, ``name``, ``age``."""
        item: dict[str, Any] = {"id": self.id, "email": self.email, "name": self.name}
        if self.age is not None:
            item["age"] = self.age
        return item

    def to_response(self) -> dict[str, Any]:
        """Return the record as sent back to the caller."""
        return self.model_dump(by_alias=True)
