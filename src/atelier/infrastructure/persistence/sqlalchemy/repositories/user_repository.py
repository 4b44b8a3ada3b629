"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Union
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.domain.shared.time import ensure_tz_aware
from atelier.domain.user import Email, User, UserRepository
from atelier.infrastructure.persistence.sqlalchemy.errors import (
    to_duplicate_key_error,
)
from atelier.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._find_model_by_id(user_id)
        return self._map_to_domain(model) if model else None

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else Email(email).value

        stmt = select(UserModel).where(UserModel.email == email_value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._map_to_domain(model) if model else None

    async def find_by_google_id(self, google_id: str) -> User | None:
        stmt = select(UserModel).where(UserModel.google_id == google_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._map_to_domain(model) if model else None

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        email_value = email.value if isinstance(email, Email) else Email(email).value
        stmt = select(func.count()).where(UserModel.email == email_value)
        result = await self._session.execute(stmt)
        return result.scalar_one() > 0

    async def save(self, user: User) -> None:
        existing = await self._find_model_by_id(user.id)

        try:
            if existing:
                self._update_model(existing, user)
                logger.debug("Updated user: %s", user.id)
            else:
                self._session.add(self._map_to_model(user))
                logger.info("Created user: %s (email: %s)", user.id, user.email)

            await self._session.flush()
        except IntegrityError as e:
            duplicate = to_duplicate_key_error(
                e,
                {"email": user.email, "google_id": user.google_id},
            )
            if duplicate is None:
                raise
            raise duplicate from e

    async def set_refresh_token(self, user_id: UUID, token: str | None) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(refresh_token_digest=token)
        )
        await self._session.execute(stmt)

    async def rotate_refresh_token(
        self,
        user_id: UUID,
        presented: str,
        replacement: str | None,
    ) -> bool:
        # Single conditional UPDATE: of two concurrent rotations with the
        # same token exactly one matches the WHERE clause.
        stmt = (
            update(UserModel)
            .where(
                UserModel.id == user_id,
                UserModel.refresh_token_digest == presented,
            )
            .values(refresh_token_digest=replacement)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def count(self) -> int:
        stmt = select(func.count()).select_from(UserModel)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def list_all(self) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.created_at)
        result = await self._session.execute(stmt)
        return [self._map_to_domain(model) for model in result.scalars().all()]

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password_hash=model.password_hash,
            google_id=model.google_id,
            avatar_url=model.avatar_url,
            is_admin=model.is_admin,
            refresh_token=model.refresh_token_digest,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            google_id=user.google_id,
            avatar_url=user.avatar_url,
            is_admin=user.is_admin,
            refresh_token_digest=user.refresh_token,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _update_model(self, model: UserModel, user: User) -> None:
        model.name = user.name
        model.email = user.email
        model.password_hash = user.password_hash
        model.google_id = user.google_id
        model.avatar_url = user.avatar_url
        model.is_admin = user.is_admin
        model.updated_at = user.updated_at
