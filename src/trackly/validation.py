"""
Field validation for user-supplied input.

Each entity has a pydantic model describing its writable fields. Create
operations validate the full model; partial updates validate the ``*Update``
variant, which only checks the fields that were actually supplied.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationFailed

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Fields(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


def _check_password(value: str | None) -> str | None:
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class _AccountFields(BaseModel):
    """Account fields. Passwords are kept byte for byte; name and email are stripped."""

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", "email", mode="before", check_fields=False)
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class UserFields(_AccountFields):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password(value)


class UserUpdateFields(_AccountFields):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    password: str | None = Field(default=None, min_length=8)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return value.lower() if value is not None else None

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str | None) -> str | None:
        return _check_password(value)


class ProjectFields(_Fields):
    title: str = Field(min_length=1, max_length=255)


class TaskFields(_Fields):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)


class TaskUpdateFields(_Fields):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)


class CommentFields(_Fields):
    body: str = Field(min_length=1, max_length=5000)


class LoggedTimeFields(_Fields):
    description: str = Field(min_length=1, max_length=2000)
    hours: float = Field(ge=0)
    date: datetime | None = None


def validate_fields(model: type[ModelT], **data: Any) -> ModelT:
    """Validate ``data`` against ``model``, raising ValidationFailed on error."""
    try:
        return model(**data)
    except PydanticValidationError as e:
        raise ValidationFailed.from_pydantic(e) from e


def supplied(fields: BaseModel) -> dict[str, Any]:
    """Return only the fields that were explicitly supplied and are not None."""
    return {
        key: value
        for key, value in fields.model_dump(exclude_unset=True).items()
        if value is not None
    }


def parse_hours(value: Any) -> float:
    """Leniently parse an hours value.

    Numbers and numeric strings are converted to float; anything else
    (empty strings, words, NaN, infinities, booleans) becomes 0.
    """
    if isinstance(value, bool):
        return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    return hours if math.isfinite(hours) else 0.0
