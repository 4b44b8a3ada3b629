"""Admin router: dashboard statistics and user overview."""

import logging

from fastapi import APIRouter

from atelier.presentation.api.dependencies import AdminServiceDep, AdminUser
from atelier.presentation.api.schemas.admin import StatsResponse
from atelier.presentation.api.schemas.auth import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

STATS_MESSAGE = "Admin dashboard data - more features to come in future phases."


@router.get(
    "/stats",
    summary="Dashboard statistics",
    responses={
        200: {"description": "Record counts"},
        401: {"description": "Not authenticated"},
        403: {"description": "Admin access required"},
    },
)
async def get_stats(
    admin: AdminUser,
    service: AdminServiceDep,
) -> StatsResponse:
    stats = await service.stats()
    logger.debug("Admin stats requested by %s", admin.email)
    return StatsResponse(
        users=stats.users,
        clients=stats.clients,
        styles=stats.styles,
        message=STATS_MESSAGE,
    )


@router.get(
    "/users",
    summary="List all users",
    responses={
        200: {"description": "List of all users"},
        403: {"description": "Admin access required"},
    },
)
async def list_users(
    _admin: AdminUser,
    service: AdminServiceDep,
) -> list[UserResponse]:
    """List all users. Password hashes and refresh tokens are never exposed."""
    users = await service.list_users()
    return [
        UserResponse(
            id=u.id,
            name=u.name,
            email=u.email,
            is_admin=u.is_admin,
            avatar_url=u.avatar_url,
            created_at=u.created_at,
        )
        for u in users
    ]
