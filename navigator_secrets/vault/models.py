"""Secret records as stored and as returned to the owner."""
import uuid
from datetime import datetime
from typing import Any, Mapping

import orjson
from pydantic import BaseModel, Field

from ..conf import MAX_SECRET_LENGTH, MIN_SECRET_LENGTH
from .crypto import EncryptedEnvelope


def validate_content(content: Any) -> str:
    """Validate secret content submitted by a user.

    Surrounding whitespace is stripped before the length check and the
    stripped value is what gets stored.

    Raises:
        ValueError: If content is not a string or its length is outside
            the allowed range.
    """
    if not isinstance(content, str):
        raise ValueError("Secret content is required")
    content = content.strip()
    if not content:
        raise ValueError("Secret content is required")
    if not MIN_SECRET_LENGTH <= len(content) <= MAX_SECRET_LENGTH:
        raise ValueError(
            f"Secret content must be between {MIN_SECRET_LENGTH} "
            f"and {MAX_SECRET_LENGTH} characters"
        )
    try:
        content.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError("Secret content must be valid UTF-8 text") from None
    return content


def validate_secret_id(value: Any) -> str:
    """Ensure value is a UUID and return its canonical form.

    Raises:
        ValueError: If value is not a valid UUID.
    """
    try:
        return str(uuid.UUID(str(value).strip()))
    except ValueError:
        raise ValueError("Secret ID must be a valid UUID") from None


class SecretRecord(BaseModel):
    """A row of the secrets table."""

    id: uuid.UUID
    user_id: uuid.UUID
    encrypted_content: str
    iv: str
    auth_tag: str
    created_at: datetime
    updated_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SecretRecord":
        return cls.model_validate(dict(row))

    @property
    def envelope(self) -> EncryptedEnvelope:
        return EncryptedEnvelope.from_record(self.model_dump())


class SecretResponse(BaseModel):
    """A decrypted secret as handed back to its owner."""

    id: uuid.UUID
    content: str
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())
