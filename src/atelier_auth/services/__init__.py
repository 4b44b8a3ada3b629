"""Authentication services (pure logic, no I/O)."""

from atelier_auth.services.jwt_service import JWTService
from atelier_auth.services.password_service import PasswordHashingService

__all__ = [
    "JWTService",
    "PasswordHashingService",
]
