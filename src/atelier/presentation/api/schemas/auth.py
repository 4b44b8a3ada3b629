"""Authentication schemas for request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field

from atelier.presentation.api.schemas.common import (
    CamelModel,
    NormalizedEmail,
    sanitized,
)

UserName = sanitized(min_length=1, max_length=100)


class RegisterRequest(CamelModel):
    """Request schema for user registration."""

    name: UserName = Field(..., description="Display name")
    email: NormalizedEmail = Field(..., description="User's email address")
    password: str = Field(
        ...,
        min_length=6,
        max_length=72,
        description="Password (6-72 characters)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ada Obi",
                "email": "ada@example.com",
                "password": "secret1",
            },
        },
    )


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: NormalizedEmail
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "ada@example.com", "password": "secret1"},
        },
    )


class UpdateProfileRequest(CamelModel):
    """Partial profile update. Omitted fields keep their value."""

    name: UserName | None = None
    email: NormalizedEmail | None = None
    password: str | None = Field(None, min_length=6, max_length=72)


class AuthResponse(CamelModel):
    """Returned by register, login and profile update."""

    id: UUID
    name: str
    email: str
    is_admin: bool
    token: str = Field(..., description="Access token for the Authorization header")


class TokenResponse(CamelModel):
    """Returned by the refresh endpoint.

    The new refresh token travels in the HttpOnly cookie only.
    """

    access_token: str


class UserResponse(CamelModel):
    id: UUID
    name: str
    email: str
    is_admin: bool
    avatar_url: str | None = None
    created_at: datetime
