"""User domain: accounts and their credentials."""

from atelier.domain.user.email import Email
from atelier.domain.user.repository import UserRepository
from atelier.domain.user.user import User

__all__ = [
    "Email",
    "User",
    "UserRepository",
]
