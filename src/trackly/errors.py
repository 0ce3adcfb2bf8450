"""
Error taxonomy shared by the API and the Python client.

Every error carries a stable ``code``. When raised from a resolver,
graphql-core copies ``extensions`` onto the GraphQL error so clients receive
``errors[].extensions.code``.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError


class TracklyError(Exception):
    """Base class for errors that are safe to show to API clients."""

    code = "INTERNAL_ERROR"
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def extensions(self) -> dict[str, Any]:
        return {"code": self.code, **self.details}


class Unauthenticated(TracklyError):
    code = "UNAUTHENTICATED"
    default_message = "Not logged in."


class Forbidden(TracklyError):
    code = "FORBIDDEN"
    default_message = "Not authorized."


class NotFound(TracklyError):
    code = "NOT_FOUND"
    default_message = "Not found."


class InvalidCredentials(TracklyError):
    """Login or password confirmation failed.

    The message is deliberately the same whether the email is unknown or the
    password is wrong.
    """

    code = "INVALID_CREDENTIALS"
    default_message = "Incorrect login credentials."


class ValidationFailed(TracklyError):
    code = "VALIDATION_FAILED"
    default_message = "Invalid input."

    @classmethod
    def from_pydantic(cls, error: PydanticValidationError) -> ValidationFailed:
        fields = []
        for item in error.errors():
            field = ".".join(str(part) for part in item.get("loc", ())) or None
            fields.append({"field": field, "message": item.get("msg", "Invalid value")})

        first = fields[0] if fields else None
        if first and first["field"]:
            message = f"Invalid {first['field']}: {first['message']}"
        else:
            message = cls.default_message
        return cls(message, fields=fields)


class DuplicateKey(TracklyError):
    code = "DUPLICATE_KEY"
    default_message = "A record with that value already exists."


ERRORS_BY_CODE: dict[str, type[TracklyError]] = {
    cls.code: cls
    for cls in (
        Unauthenticated,
        Forbidden,
        NotFound,
        InvalidCredentials,
        ValidationFailed,
        DuplicateKey,
    )
}


def error_from_code(code: str | None, message: str | None = None) -> TracklyError:
    """Rebuild a typed error from a GraphQL error code (used by the API client)."""
    error_cls = ERRORS_BY_CODE.get(code or "", TracklyError)
    return error_cls(message)
