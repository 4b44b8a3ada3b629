"""Shared domain building blocks."""

from atelier.domain.shared.exceptions import (
    AppError,
    BadRequestError,
    CastError,
    ConflictError,
    DuplicateKeyError,
    EntityValidationError,
    ErrorKind,
    FieldError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    UnprocessableEntityError,
)
from atelier.domain.shared.identifiers import parse_id
from atelier.domain.shared.time import ensure_tz_aware, utc_now

__all__ = [
    "AppError",
    "BadRequestError",
    "CastError",
    "ConflictError",
    "DuplicateKeyError",
    "EntityValidationError",
    "ErrorKind",
    "FieldError",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "UnauthorizedError",
    "UnprocessableEntityError",
    "ensure_tz_aware",
    "parse_id",
    "utc_now",
]
