"""Shared error taxonomy.

Every failure a request can produce ends up as an ``AppError``: a message,
an ``ErrorKind`` that fixes the HTTP status, an optional list of field
errors and a flag telling operational (expected, user-facing) failures
apart from programming defects.

Three further exception types describe failures of foreign origin that the
API's exception handlers translate into the taxonomy:

- ``EntityValidationError``: an entity invariant was violated
- ``CastError``: a malformed identifier reached the application
- ``DuplicateKeyError``: a unique index rejected a write
"""

from dataclasses import asdict, dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any


class ErrorKind(str, Enum):
    """Stable error kinds for API clients.

    These values are part of the public API contract (the ``code`` field
    of every error response).
    """

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNPROCESSABLE_ENTITY = "UNPROCESSABLE_ENTITY"
    INTERNAL = "INTERNAL"

    @property
    def status_code(self) -> int:
        return ERROR_KIND_TO_STATUS[self]

    @classmethod
    def from_status(cls, status_code: int) -> "ErrorKind":
        """Pick the kind for an HTTP status, falling back by status class."""
        for kind, status in ERROR_KIND_TO_STATUS.items():
            if status == status_code:
                return kind
        if 400 <= status_code < 500:
            return cls.BAD_REQUEST
        return cls.INTERNAL


ERROR_KIND_TO_STATUS: dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: HTTPStatus.BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.UNPROCESSABLE_ENTITY: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class FieldError:
    """A single validation failure attached to one input field."""

    field: str
    message: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class AppError(Exception):
    """Base exception for all application errors.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    kind
        Error kind, determines the HTTP status
    errors
        Optional per-field details
    operational
        True for expected failures. Non-operational errors are never shown
        to clients in production.
    details
        Optional additional context (logged but not exposed to users)
    status_code
        HTTP status to answer with when it differs from the kind's own
        (e.g. 405 reported under BAD_REQUEST)
    headers
        Extra response headers, such as ``Allow`` on a 405
    """

    default_kind = ErrorKind.INTERNAL
    default_message = "An internal error occurred"

    def __init__(  # NOQA: PLR0913
        self,
        message: str | None = None,
        kind: ErrorKind | None = None,
        errors: list[FieldError] | None = None,
        operational: bool | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.kind = kind or self.default_kind
        self.errors = list(errors) if errors else []
        self.operational = (
            self.kind != ErrorKind.INTERNAL if operational is None else operational
        )
        self.details = details or {}
        self.headers = dict(headers) if headers else {}
        self._status_code = status_code

    @property
    def status_code(self) -> int:
        return self._status_code or self.kind.status_code

    @property
    def status(self) -> str:
        """``fail`` for client errors, ``error`` for server errors."""
        return "fail" if self.status_code < 500 else "error"

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"kind={self.kind.value!r}, "
            f"errors={self.errors!r})"
        )


class BadRequestError(AppError):
    default_kind = ErrorKind.BAD_REQUEST
    default_message = "Bad request"


class UnauthorizedError(AppError):
    default_kind = ErrorKind.UNAUTHORIZED
    default_message = "Not authorized"


class ForbiddenError(AppError):
    default_kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(AppError):
    default_kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    default_kind = ErrorKind.CONFLICT
    default_message = "Conflict"


class UnprocessableEntityError(AppError):
    default_kind = ErrorKind.UNPROCESSABLE_ENTITY
    default_message = "Validation failed"


class InternalError(AppError):
    default_kind = ErrorKind.INTERNAL


class EntityValidationError(ValueError):
    """Raised by entities when one or more invariants are violated."""

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(e.message for e in self.errors))


class CastError(ValueError):
    """Raised when a value cannot be interpreted as the expected type."""

    def __init__(self, path: str, value: Any):
        self.path = path
        self.value = value
        super().__init__(f"Cast failed for {path}: {value!r}")


class DuplicateKeyError(Exception):
    """Raised by repositories when a unique index rejects a write."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for {field}: {value!r}")
