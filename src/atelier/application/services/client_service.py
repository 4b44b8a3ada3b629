"""Client management service."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import UUID

from atelier.domain.client import Client, Measurement
from atelier.domain.shared.exceptions import (
    BadRequestError,
    DuplicateKeyError,
    NotFoundError,
)

if TYPE_CHECKING:
    from atelier.domain.client import ClientRepository
    from atelier.domain.style import Style, StyleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientView:
    """A client together with its linked styles, in link order."""

    client: Client
    styles: list[Style] = field(default_factory=list)


class ClientService:
    """Use cases around clients and the styles linked to them."""

    def __init__(
        self,
        client_repository: ClientRepository,
        style_repository: StyleRepository,
    ):
        self._client_repo = client_repository
        self._style_repo = style_repository

    async def create_client(  # NOQA: PLR0913
        self,
        name: str,
        phone: str,
        email: str | None = None,
        event_type: str | None = None,
        measurements: list[Measurement] | None = None,
    ) -> ClientView:
        client = Client(
            name=name,
            phone=phone,
            email=email,
            event_type=event_type,
            measurements=list(measurements or []),
        )
        await self._client_repo.save(client)
        logger.info("Client created: %s", client.id)
        return ClientView(client)

    async def list_clients(
        self,
        name: str | None = None,
        event_type: str | None = None,
    ) -> list[ClientView]:
        clients = await self._client_repo.search(name=name, event_type=event_type)

        wanted = list({sid for c in clients for sid in c.style_ids})
        styles = {s.id: s for s in await self._style_repo.find_by_ids(wanted)}

        return [
            ClientView(c, [styles[sid] for sid in c.style_ids if sid in styles])
            for c in clients
        ]

    async def get_client(self, client_id: UUID) -> ClientView:
        client = await self._get_or_raise(client_id)
        return ClientView(client, await self._style_repo.find_by_ids(client.style_ids))

    async def update_client(
        self,
        client_id: UUID,
        changes: dict[str, Any],
    ) -> ClientView:
        """Apply a partial update. Omitted fields keep their value."""
        client = await self._get_or_raise(client_id)
        client.apply_changes(changes)
        await self._client_repo.save(client)
        logger.info("Client updated: %s (fields: %s)", client.id, sorted(changes))
        return ClientView(client, await self._style_repo.find_by_ids(client.style_ids))

    async def delete_client(self, client_id: UUID) -> None:
        if not await self._client_repo.delete(client_id):
            msg = "Client not found"
            raise NotFoundError(msg)
        logger.info("Client deleted: %s", client_id)

    async def link_style(self, client_id: UUID, style_id: UUID) -> ClientView:
        """Link an existing style to a client.

        Raises
        ------
        NotFoundError
            If the client or the style does not exist
        BadRequestError
            If the style is already linked to the client
        """
        client = await self._get_or_raise(client_id)

        style = await self._style_repo.find_by_id(style_id)
        if style is None:
            msg = "Style not found"
            raise NotFoundError(msg)

        client.link_style(style.id)
        try:
            await self._client_repo.save(client)
        except DuplicateKeyError as e:
            # A concurrent request linked the same style first
            msg = "Style already linked to this client"
            raise BadRequestError(msg) from e

        logger.info("Style %s linked to client %s", style.id, client.id)
        return ClientView(client, await self._style_repo.find_by_ids(client.style_ids))

    async def list_client_styles(self, client_id: UUID) -> list[Style]:
        client = await self._get_or_raise(client_id)
        return await self._style_repo.find_by_ids(client.style_ids)

    async def _get_or_raise(self, client_id: UUID) -> Client:
        client = await self._client_repo.find_by_id(client_id)
        if client is None:
            msg = "Client not found"
            raise NotFoundError(msg)
        return client
