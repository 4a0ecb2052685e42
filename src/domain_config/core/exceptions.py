"""Centralized exception hierarchy for the application.

All custom exceptions inherit from AppException, which provides:
- An ErrorKind tag so callers branch on the kind, never on message text
- Machine-readable error codes
- Optional details dict for additional context

The HTTP layer maps ErrorKind to a status code with a plain dict lookup
(STATUS_BY_KIND); see main.py.
"""

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    DATA_INTEGRITY = "data_integrity"
    STORE_UNAVAILABLE = "store_unavailable"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 422,
    ErrorKind.DATA_INTEGRITY: 500,
    ErrorKind.STORE_UNAVAILABLE: 503,
}


class AppException(Exception):
    """Base exception for all application errors.

    - kind: Coarse category used for status mapping
    - message: Human-readable error description
    - error_code: Machine-readable code (e.g., "DOMAIN_NOT_FOUND")
    - details: Optional dict with additional context
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        error_code: str,
        kind: ErrorKind,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.kind = kind
        self.details = details or {}
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dict for JSON serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ResourceNotFoundError(AppException):
    """Requested resource does not exist."""

    def __init__(
        self,
        resource: str,
        identifier: str | int | None = None,
        details: dict[str, Any] | None = None,
    ):
        msg = f"{resource} not found"
        extra: dict[str, Any] = {"resource": resource}
        if identifier is not None:
            msg = f"{resource} not found: {identifier}"
            extra["id"] = identifier
        super().__init__(
            msg,
            f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            ErrorKind.NOT_FOUND,
            {**extra, **(details or {})},
        )


class ResourceExistsError(AppException):
    """Resource already exists (duplicate key, unique constraint violation)."""

    def __init__(self, resource: str, field: str | None = None, value: Any = None):
        msg = f"{resource} already exists"
        details: dict[str, Any] = {"resource": resource}
        if field:
            msg = f"{resource} with this {field} already exists"
            details["field"] = field
            if value is not None:
                details["value"] = value
        super().__init__(
            msg,
            f"{resource.upper().replace(' ', '_')}_ALREADY_EXISTS",
            ErrorKind.CONFLICT,
            details,
        )


class ResourceInUseError(AppException):
    """Resource cannot be removed while other records still reference it."""

    def __init__(self, resource: str, identifier: str | int, reference_count: int):
        super().__init__(
            f"{resource} {identifier} is referenced by {reference_count} record(s)",
            f"{resource.upper().replace(' ', '_')}_IN_USE",
            ErrorKind.CONFLICT,
            {"resource": resource, "id": identifier, "references": reference_count},
        )


class ValidationError(AppException):
    """Input validation failed (beyond Pydantic's automatic validation)."""

    def __init__(self, message: str, field: str | None = None, **details: Any):
        super().__init__(
            message,
            "VALIDATION_ERROR",
            ErrorKind.VALIDATION,
            {"field": field, **details} if field else dict(details),
        )


class DataIntegrityError(AppException):
    """Stored data violates a relationship the schema should guarantee."""

    def __init__(self, message: str, **details: Any):
        super().__init__(
            message,
            "DATA_INTEGRITY_ERROR",
            ErrorKind.DATA_INTEGRITY,
            dict(details),
        )


class StoreUnavailableError(AppException):
    """The relational store could not be reached or failed mid-operation."""

    def __init__(self, operation: str, message: str | None = None):
        msg = f"Store unavailable during {operation}"
        if message:
            msg = f"{msg}: {message}"
        super().__init__(
            msg,
            "STORE_UNAVAILABLE",
            ErrorKind.STORE_UNAVAILABLE,
            {"operation": operation},
        )
