"""Centralized exception handling for the FastAPI application.

Every exception that escapes a route is first normalized into an
``AppError`` (``normalize_exception``) and then rendered into one JSON
envelope (``ErrorRenderer``):

    {
        "status": "fail" | "error",
        "code": "MACHINE_READABLE_ERROR_KIND",
        "detail": "Human-readable error message",
        "errors": [{"field": ..., "message": ..., "value": ...}]   # optional
    }

In development the envelope also carries the raw exception (``exception``)
and its traceback (``stack``). In production, non-operational errors are
replaced by a generic message.

Usage:
    from atelier.presentation.api.exception_handlers import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app, debug=False)
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable
from typing import Any

import jwt
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import DataError, IntegrityError, StatementError
from starlette.exceptions import HTTPException as StarletteHTTPException

from atelier.domain.shared.exceptions import (
    AppError,
    BadRequestError,
    CastError,
    ConflictError,
    DuplicateKeyError,
    EntityValidationError,
    ErrorKind,
    FieldError,
    InternalError,
    UnauthorizedError,
    UnprocessableEntityError,
)
from atelier.infrastructure.persistence.sqlalchemy.errors import (
    is_unique_violation,
    parse_unique_violation,
)
from atelier_auth import (
    AuthError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    WeakPasswordError,
)

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An internal error occurred"
EXPIRED_TOKEN_MESSAGE = "Your token has expired. Please log in again."
INVALID_TOKEN_MESSAGE = "Invalid token. Please log in again."

# Sources FastAPI prefixes to validation error locations
_LOCATION_SOURCES = frozenset({"body", "query", "path", "header", "cookie", "form"})


# =============================================================================
# Normalization
# =============================================================================


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)) and all(
        v is None or isinstance(v, (str, int, float, bool)) for v in value
    ):
        return list(value)
    return None


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOCATION_SOURCES:
        parts = parts[1:]
    return ".".join(str(p) for p in parts) or "body"


def _pydantic_field_errors(errors: list[dict[str, Any]]) -> list[FieldError]:
    field_errors = []
    for err in errors:
        missing = err.get("type") == "missing"
        field_errors.append(
            FieldError(
                field=_field_name(tuple(err.get("loc", ()))),
                message=err.get("msg", "Invalid value"),
                value=None if missing else _json_safe(err.get("input")),
            ),
        )
    return field_errors


def _invalid_input(errors: list[FieldError]) -> AppError:
    messages = ". ".join(e.message.rstrip(".") for e in errors)
    message = f"Invalid input data. {messages}" if messages else "Invalid input data."
    return BadRequestError(message, errors=errors)


def _duplicate(value: Any) -> AppError:
    return ConflictError(
        f"Duplicate field value: {value}. Please use another value.",
    )


def _from_app_error(exc: AppError) -> AppError:
    return exc


def _from_cast_error(exc: CastError) -> AppError:
    return BadRequestError(f"Invalid {exc.path}: {exc.value}.")


def _from_duplicate_key(exc: DuplicateKeyError) -> AppError:
    return _duplicate(exc.value if exc.value is not None else exc.field)


def _from_integrity_error(exc: IntegrityError) -> AppError:
    if not is_unique_violation(exc):
        return InternalError(operational=False, details={"exception": repr(exc)})
    field, value = parse_unique_violation(exc)
    return _duplicate(value or field or "Unknown")


def _from_statement_error(exc: StatementError) -> AppError:
    if isinstance(exc, DataError) or isinstance(exc.orig, (ValueError, TypeError)):
        return BadRequestError("Invalid input data.")
    return InternalError(operational=False, details={"exception": repr(exc)})


def _from_entity_validation(exc: EntityValidationError) -> AppError:
    return _invalid_input(exc.errors)


def _from_pydantic_validation(exc: PydanticValidationError) -> AppError:
    return _invalid_input(_pydantic_field_errors(exc.errors()))


def _from_request_validation(exc: RequestValidationError) -> AppError:
    return UnprocessableEntityError(
        "Validation failed",
        errors=_pydantic_field_errors(list(exc.errors())),
    )


def _from_auth_error(exc: AuthError) -> AppError:
    if isinstance(exc, ExpiredTokenError):
        return UnauthorizedError(EXPIRED_TOKEN_MESSAGE)
    if isinstance(exc, InvalidTokenError):
        return UnauthorizedError(INVALID_TOKEN_MESSAGE)
    if isinstance(exc, InvalidCredentialsError):
        return UnauthorizedError(exc.message)
    if isinstance(exc, WeakPasswordError):
        return BadRequestError(exc.message)
    return UnauthorizedError(exc.message)


def _from_jwt_error(exc: jwt.PyJWTError) -> AppError:
    if isinstance(exc, jwt.ExpiredSignatureError):
        return UnauthorizedError(EXPIRED_TOKEN_MESSAGE)
    return UnauthorizedError(INVALID_TOKEN_MESSAGE)


def _from_http_exception(exc: StarletteHTTPException) -> AppError:
    kind = ErrorKind.from_status(exc.status_code)
    detail = exc.detail if isinstance(exc.detail, str) else None
    # Statuses without a kind of their own (405, 429, ...) keep their code
    return AppError(
        detail,
        kind=kind,
        status_code=exc.status_code,
        headers=exc.headers,
    )


# Checked in order, first isinstance match wins
EXCEPTION_TRANSLATORS: list[tuple[type[BaseException], Callable[[Any], AppError]]] = [
    (AppError, _from_app_error),
    (CastError, _from_cast_error),
    (DuplicateKeyError, _from_duplicate_key),
    (IntegrityError, _from_integrity_error),
    (StatementError, _from_statement_error),
    (EntityValidationError, _from_entity_validation),
    (RequestValidationError, _from_request_validation),
    (PydanticValidationError, _from_pydantic_validation),
    (AuthError, _from_auth_error),
    (jwt.PyJWTError, _from_jwt_error),
    (StarletteHTTPException, _from_http_exception),
]


def normalize_exception(exc: BaseException) -> AppError:
    """Map any exception onto the application error taxonomy.

    Unknown exceptions become non-operational internal errors.
    """
    for exc_type, translate in EXCEPTION_TRANSLATORS:
        if isinstance(exc, exc_type):
            return translate(exc)
    return InternalError(operational=False, details={"exception": repr(exc)})


# =============================================================================
# Rendering
# =============================================================================


class ErrorRenderer:
    """Turns a normalized error into the JSON error envelope.

    Parameters
    ----------
    debug
        Development mode: include the raw exception and its traceback.
    """

    def __init__(self, debug: bool = False):
        self._debug = debug

    @property
    def debug(self) -> bool:
        return self._debug

    def body(self, error: AppError, original: BaseException) -> dict[str, Any]:
        if not self._debug and not error.operational:
            return {
                "status": "error",
                "code": ErrorKind.INTERNAL.value,
                "detail": GENERIC_MESSAGE,
            }

        content: dict[str, Any] = {
            "status": error.status,
            "code": error.kind.value,
            "detail": error.message,
        }
        if error.errors:
            content["errors"] = [e.to_dict() for e in error.errors]
        if self._debug:
            content["exception"] = repr(original)
            content["stack"] = "".join(traceback.format_exception(original))
        return content

    def render(self, error: AppError, original: BaseException) -> JSONResponse:
        headers = dict(error.headers)
        if error.kind == ErrorKind.UNAUTHORIZED:
            headers.setdefault("WWW-Authenticate", "Bearer")
        return JSONResponse(
            status_code=error.status_code,
            content=self.body(error, original),
            headers=headers or None,
        )


def setup_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Register the exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    debug
        Development mode rendering (see ``ErrorRenderer``)
    """
    renderer = ErrorRenderer(debug=debug)

    async def handle(request: Request, exc: Exception) -> JSONResponse:
        error = normalize_exception(exc)

        if error.operational:
            logger.warning(
                "Request failed on %s %s: %s (code=%s, details=%s)",
                request.method,
                request.url.path,
                error.message,
                error.kind.value,
                error.details,
            )
        else:
            logger.error(
                "Unhandled exception on %s %s: %r",
                request.method,
                request.url.path,
                exc,
                exc_info=exc,
            )

        return renderer.render(error, exc)

    # Known types go through Starlette's ExceptionMiddleware. The bare
    # Exception handler is the last resort inside ServerErrorMiddleware.
    for exc_type, _ in EXCEPTION_TRANSLATORS:
        app.add_exception_handler(exc_type, handle)
    app.add_exception_handler(Exception, handle)
