"""SQLAlchemy implementation of StyleRepository."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.domain.shared.time import ensure_tz_aware
from atelier.domain.style import Style, StyleCategory, StyleRepository
from atelier.infrastructure.persistence.sqlalchemy.models import StyleModel

logger = logging.getLogger(__name__)


class StyleRepositorySQLAlchemy(StyleRepository):
    """SQLAlchemy implementation of the StyleRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, style_id: UUID) -> Style | None:
        model = await self._find_model_by_id(style_id)
        return self._map_to_domain(model) if model else None

    async def find_by_ids(self, style_ids: list[UUID]) -> list[Style]:
        if not style_ids:
            return []

        stmt = select(StyleModel).where(StyleModel.id.in_(style_ids))
        result = await self._session.execute(stmt)
        by_id = {m.id: self._map_to_domain(m) for m in result.scalars().all()}
        return [by_id[sid] for sid in style_ids if sid in by_id]

    async def search(
        self,
        category: StyleCategory | None = None,
        name: str | None = None,
    ) -> list[Style]:
        stmt = select(StyleModel).order_by(StyleModel.created_at.desc())
        if category is not None:
            stmt = stmt.where(StyleModel.category == category.value)
        if name:
            stmt = stmt.where(StyleModel.name.icontains(name, autoescape=True))

        result = await self._session.execute(stmt)
        return [self._map_to_domain(m) for m in result.scalars().all()]

    async def save(self, style: Style) -> None:
        existing = await self._find_model_by_id(style.id)

        if existing:
            self._update_model(existing, style)
            logger.debug("Updated style: %s", style.id)
        else:
            self._session.add(self._map_to_model(style))
            logger.debug("Created style: %s", style.id)

        await self._session.flush()

    async def delete(self, style_id: UUID) -> bool:
        model = await self._find_model_by_id(style_id)
        if model is None:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def count(self) -> int:
        stmt = select(func.count()).select_from(StyleModel)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _find_model_by_id(self, style_id: UUID) -> StyleModel | None:
        stmt = select(StyleModel).where(StyleModel.id == style_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: StyleModel) -> Style:
        return Style(
            id=model.id,
            name=model.name,
            category=StyleCategory(model.category),
            image_url=model.image_url,
            image_public_id=model.image_public_id,
            description=model.description,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, style: Style) -> StyleModel:
        return StyleModel(
            id=style.id,
            name=style.name,
            category=style.category.value,
            image_url=style.image_url,
            image_public_id=style.image_public_id,
            description=style.description,
            created_at=style.created_at,
            updated_at=style.updated_at,
        )

    def _update_model(self, model: StyleModel, style: Style) -> None:
        model.name = style.name
        model.category = style.category.value
        model.image_url = style.image_url
        model.image_public_id = style.image_public_id
        model.description = style.description
        model.updated_at = style.updated_at
