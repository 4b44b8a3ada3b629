"""Client repository interface."""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from atelier.domain.client.client import Client


class ClientRepository(ABC):
    """Repository interface for Client entities.

    Linked style ids are persisted in link order together with the client.
    """

    @abstractmethod
    async def find_by_id(self, client_id: UUID) -> Optional[Client]:
        """Find a client by ID."""

    @abstractmethod
    async def search(
        self,
        name: str | None = None,
        event_type: str | None = None,
    ) -> list[Client]:
        """List clients, optionally filtered by case-insensitive substrings."""

    @abstractmethod
    async def save(self, client: Client) -> None:
        """Insert or update a client and its style links."""

    @abstractmethod
    async def delete(self, client_id: UUID) -> bool:
        """Delete a client. Returns False if it did not exist."""

    @abstractmethod
    async def remove_style_everywhere(self, style_id: UUID) -> int:
        """Unlink a style from every client. Returns the number of links removed."""

    @abstractmethod
    async def count(self) -> int:
        """Count total clients."""
