"""Common schemas shared across API endpoints."""

import html
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
)
from pydantic.alias_generators import to_camel


def escape_text(value: str) -> str:
    """HTML-escape free text before it is stored."""
    return html.escape(value, quote=True)


def sanitized(
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | None = None,
) -> type[str]:
    """Free-text type: trimmed, length-checked, then HTML-escaped.

    Limits apply to the text as typed. Escaping can grow it up to six
    times, so the columns storing these values are unbounded ``Text``.
    """
    return Annotated[  # type: ignore[return-value]
        str,
        StringConstraints(
            strip_whitespace=True,
            min_length=min_length,
            max_length=max_length,
            pattern=pattern,
        ),
        AfterValidator(escape_text),
    ]


NormalizedEmail = Annotated[EmailStr, AfterValidator(lambda v: v.strip().lower())]


class CamelModel(BaseModel):
    """Base schema with camelCase JSON keys (snake_case accepted on input)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(..., description="Human-readable result")


class FieldErrorResponse(BaseModel):
    field: str
    message: str
    value: object | None = None


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    status: str = Field(..., description="'fail' for client errors, 'error' otherwise")
    code: str = Field(..., description="Error kind for programmatic handling")
    detail: str = Field(..., description="Error message")
    errors: list[FieldErrorResponse] | None = Field(
        None,
        description="Per-field validation failures",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "fail",
                "code": "NOT_FOUND",
                "detail": "Client not found",
            },
        },
    )
