"""SQLAlchemy implementation of ClientRepository."""

import logging
from collections import defaultdict
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.domain.client import Client, ClientRepository, Measurement
from atelier.domain.shared.time import ensure_tz_aware
from atelier.infrastructure.persistence.sqlalchemy.errors import (
    to_duplicate_key_error,
)
from atelier.infrastructure.persistence.sqlalchemy.models import (
    ClientModel,
    ClientStyleModel,
)

logger = logging.getLogger(__name__)


class ClientRepositorySQLAlchemy(ClientRepository):
    """SQLAlchemy implementation of the ClientRepository interface.

    Style links live in the ``client_styles`` table and are synchronised
    on ``save``: missing links are inserted, dropped links deleted.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, client_id: UUID) -> Client | None:
        model = await self._find_model_by_id(client_id)
        if model is None:
            return None
        links = await self._load_links([model.id])
        return self._map_to_domain(model, links[model.id])

    async def search(
        self,
        name: str | None = None,
        event_type: str | None = None,
    ) -> list[Client]:
        stmt = select(ClientModel).order_by(ClientModel.created_at.desc())
        if name:
            stmt = stmt.where(ClientModel.name.icontains(name, autoescape=True))
        if event_type:
            stmt = stmt.where(
                ClientModel.event_type.icontains(event_type, autoescape=True),
            )

        result = await self._session.execute(stmt)
        models = result.scalars().all()
        links = await self._load_links([m.id for m in models])
        return [self._map_to_domain(m, links[m.id]) for m in models]

    async def save(self, client: Client) -> None:
        existing = await self._find_model_by_id(client.id)

        try:
            if existing:
                self._update_model(existing, client)
                logger.debug("Updated client: %s", client.id)
            else:
                self._session.add(self._map_to_model(client))
                logger.debug("Created client: %s", client.id)

            await self._session.flush()
            await self._sync_links(client)
        except IntegrityError as e:
            duplicate = to_duplicate_key_error(e, {"style_id": client.style_ids})
            if duplicate is None:
                raise
            raise duplicate from e

    async def delete(self, client_id: UUID) -> bool:
        model = await self._find_model_by_id(client_id)
        if model is None:
            return False

        await self._session.execute(
            delete(ClientStyleModel).where(ClientStyleModel.client_id == client_id),
        )
        await self._session.delete(model)
        await self._session.flush()
        return True

    async def remove_style_everywhere(self, style_id: UUID) -> int:
        stmt = delete(ClientStyleModel).where(ClientStyleModel.style_id == style_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def count(self) -> int:
        stmt = select(func.count()).select_from(ClientModel)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _find_model_by_id(self, client_id: UUID) -> ClientModel | None:
        stmt = select(ClientModel).where(ClientModel.id == client_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _load_links(self, client_ids: list[UUID]) -> dict[UUID, list[UUID]]:
        links: dict[UUID, list[UUID]] = defaultdict(list)
        if not client_ids:
            return links

        stmt = (
            select(ClientStyleModel.client_id, ClientStyleModel.style_id)
            .where(ClientStyleModel.client_id.in_(client_ids))
            .order_by(ClientStyleModel.client_id, ClientStyleModel.position)
        )
        result = await self._session.execute(stmt)
        for client_id, style_id in result.all():
            links[client_id].append(style_id)
        return links

    async def _sync_links(self, client: Client) -> None:
        current = (await self._load_links([client.id]))[client.id]

        removed = [sid for sid in current if sid not in client.style_ids]
        if removed:
            await self._session.execute(
                delete(ClientStyleModel).where(
                    ClientStyleModel.client_id == client.id,
                    ClientStyleModel.style_id.in_(removed),
                ),
            )

        last_position = await self._session.scalar(
            select(func.max(ClientStyleModel.position)).where(
                ClientStyleModel.client_id == client.id,
            ),
        )
        position = 0 if last_position is None else last_position + 1
        for style_id in client.style_ids:
            if style_id in current:
                continue
            self._session.add(
                ClientStyleModel(
                    client_id=client.id,
                    style_id=style_id,
                    position=position,
                ),
            )
            position += 1

        await self._session.flush()

    def _map_to_domain(self, model: ClientModel, style_ids: list[UUID]) -> Client:
        return Client(
            id=model.id,
            name=model.name,
            phone=model.phone,
            email=model.email,
            event_type=model.event_type,
            measurements=[Measurement.from_dict(m) for m in model.measurements or []],
            style_ids=list(style_ids),
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, client: Client) -> ClientModel:
        return ClientModel(
            id=client.id,
            name=client.name,
            phone=client.phone,
            email=client.email,
            event_type=client.event_type,
            measurements=[m.to_dict() for m in client.measurements],
            created_at=client.created_at,
            updated_at=client.updated_at,
        )

    def _update_model(self, model: ClientModel, client: Client) -> None:
        model.name = client.name
        model.phone = client.phone
        model.email = client.email
        model.event_type = client.event_type
        model.measurements = [m.to_dict() for m in client.measurements]
        model.updated_at = client.updated_at
