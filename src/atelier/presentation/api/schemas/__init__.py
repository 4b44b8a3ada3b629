"""Request and response schemas for the HTTP API."""

from atelier.presentation.api.schemas.admin import StatsResponse
from atelier.presentation.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
)
from atelier.presentation.api.schemas.clients import (
    ClientCreateRequest,
    ClientResponse,
    ClientUpdateRequest,
    LinkStyleRequest,
)
from atelier.presentation.api.schemas.common import (
    ErrorResponse,
    MessageResponse,
    escape_text,
)
from atelier.presentation.api.schemas.styles import (
    StyleDescription,
    StyleName,
    StyleResponse,
)

__all__ = [
    "AuthResponse",
    "ClientCreateRequest",
    "ClientResponse",
    "ClientUpdateRequest",
    "ErrorResponse",
    "LinkStyleRequest",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "StatsResponse",
    "StyleDescription",
    "StyleName",
    "StyleResponse",
    "TokenResponse",
    "UpdateProfileRequest",
    "UserResponse",
    "escape_text",
]
