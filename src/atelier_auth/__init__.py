"""Atelier Auth - authentication building blocks.

This package holds the authentication logic that does not depend on the
atelier domain model:
- Password hashing (bcrypt)
- JWT access/refresh token creation and verification

Usage:
    from atelier_auth import JWTService, PasswordHashingService
"""

from atelier_auth.exceptions import (
    AuthError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    WeakPasswordError,
)
from atelier_auth.schemas import TokenKind, TokenPayload
from atelier_auth.services import JWTService, PasswordHashingService

__all__ = [
    # Services
    "PasswordHashingService",
    "JWTService",
    # Schemas
    "TokenKind",
    "TokenPayload",
    # Exceptions
    "AuthError",
    "ExpiredTokenError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "WeakPasswordError",
]
