"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from atelier.domain.user.email import Email
from atelier.domain.user.user import User


class UserRepository(ABC):
    """Repository interface for User aggregates."""

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their (case-insensitive) email address."""

    @abstractmethod
    async def find_by_google_id(self, google_id: str) -> Optional[User]:
        """Find a user by their Google account subject id."""

    @abstractmethod
    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        """Check if a user exists with the given email."""

    @abstractmethod
    async def save(self, user: User) -> None:
        """Insert or update a user.

        Raises ``DuplicateKeyError`` when the email or Google id is taken.
        """

    @abstractmethod
    async def set_refresh_token(self, user_id: UUID, token: str | None) -> None:
        """Store (or clear) the user's current refresh token."""

    @abstractmethod
    async def rotate_refresh_token(
        self,
        user_id: UUID,
        presented: str,
        replacement: str | None,
    ) -> bool:
        """Replace the stored refresh token if it still equals ``presented``.

        ``None`` revokes. Returns False when the stored token no longer
        matches, i.e. the presented token was already rotated or revoked.
        """

    @abstractmethod
    async def count(self) -> int:
        """Count total users."""

    @abstractmethod
    async def list_all(self) -> list[User]:
        """List all users, oldest first."""
