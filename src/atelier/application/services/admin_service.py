"""Admin dashboard queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from atelier.domain.client import ClientRepository
    from atelier.domain.style import StyleRepository
    from atelier.domain.user import User, UserRepository


@dataclass(frozen=True)
class DashboardStats:
    users: int
    clients: int
    styles: int


class AdminService:
    def __init__(
        self,
        user_repository: UserRepository,
        client_repository: ClientRepository,
        style_repository: StyleRepository,
    ):
        self._user_repo = user_repository
        self._client_repo = client_repository
        self._style_repo = style_repository

    async def stats(self) -> DashboardStats:
        return DashboardStats(
            users=await self._user_repo.count(),
            clients=await self._client_repo.count(),
            styles=await self._style_repo.count(),
        )

    async def list_users(self) -> list[User]:
        return await self._user_repo.list_all()
