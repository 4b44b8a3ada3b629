"""Style repository interface."""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from atelier.domain.style.category import StyleCategory
from atelier.domain.style.style import Style


class StyleRepository(ABC):
    """Repository interface for Style entities."""

    @abstractmethod
    async def find_by_id(self, style_id: UUID) -> Optional[Style]:
        """Find a style by ID."""

    @abstractmethod
    async def find_by_ids(self, style_ids: list[UUID]) -> list[Style]:
        """Load several styles, preserving the order of ``style_ids``."""

    @abstractmethod
    async def search(
        self,
        category: StyleCategory | None = None,
        name: str | None = None,
    ) -> list[Style]:
        """List styles, newest first, optionally filtered."""

    @abstractmethod
    async def save(self, style: Style) -> None:
        """Insert or update a style."""

    @abstractmethod
    async def delete(self, style_id: UUID) -> bool:
        """Delete a style. Returns False if it did not exist."""

    @abstractmethod
    async def count(self) -> int:
        """Count total styles."""
