"""SQLAlchemy repository implementations."""

from .client_repository import ClientRepositorySQLAlchemy
from .style_repository import StyleRepositorySQLAlchemy
from .user_repository import UserRepositorySQLAlchemy

__all__ = [
    "ClientRepositorySQLAlchemy",
    "StyleRepositorySQLAlchemy",
    "UserRepositorySQLAlchemy",
]
