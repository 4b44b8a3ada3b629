"""FastAPI dependency injection for the Atelier API.

Provides dependencies for:
- Settings and database sessions (from ``app.state``, set by ``create_app``)
- Authentication (current user from the bearer token)
- Identifier parsing for path parameters
- Service instances
"""

import logging
from typing import Annotated, AsyncGenerator
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from atelier.application.ports import ImageStorage, OAuthProvider
from atelier.application.services import (
    AdminService,
    AuthenticationService,
    ClientService,
    StyleService,
)
from atelier.domain.shared import (
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    parse_id,
)
from atelier.domain.user import User
from atelier.infrastructure.oauth import GoogleOAuthClient
from atelier.infrastructure.persistence.sqlalchemy import (
    ClientRepositorySQLAlchemy,
    Database,
    StyleRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)
from atelier_auth import JWTService, PasswordHashingService, TokenKind
from atelier_config.settings import Settings

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)


# -----------------------------------------------------------------------------
# Application State
# -----------------------------------------------------------------------------


def get_api_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_api_settings)]


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    One session per request. Uncommitted work is rolled back when the
    session closes.

    Yields
    ------
    AsyncSession for database operations
    """
    async with database.session() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_image_storage(request: Request) -> ImageStorage | None:
    """Image host adapter, None when Cloudinary is not configured."""
    return request.app.state.image_storage


# -----------------------------------------------------------------------------
# Authentication Services
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        access_secret=settings.jwt_access_secret.get_secret_value(),
        refresh_secret=settings.jwt_refresh_secret.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    return PasswordHashingService(rounds=settings.bcrypt_rounds)


async def get_authentication_service(
    session: DBSession,
    settings: SettingsDep,
    jwt_service: JWTService = Depends(get_jwt_service),
    password_service: PasswordHashingService = Depends(get_password_service),
) -> AuthenticationService:
    return AuthenticationService(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
        jwt_service=jwt_service,
        allowed_email_domain=settings.oauth_allowed_domain,
    )


AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


def get_oauth_provider(settings: SettingsDep) -> OAuthProvider:
    """Google OAuth client. 404 when Google sign-in is not configured."""
    if not settings.google_oauth_enabled or settings.google_client_secret is None:
        msg = "Google sign-in is not configured"
        raise NotFoundError(msg)
    return GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret.get_secret_value(),
        redirect_uri=settings.google_callback_url,
        timeout=settings.oauth_timeout_seconds,
    )


OAuthProviderDep = Annotated[OAuthProvider, Depends(get_oauth_provider)]


# -----------------------------------------------------------------------------
# Current User (JWT Authentication)
# -----------------------------------------------------------------------------


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    session: AsyncSession = Depends(get_db_session),
    jwt_service: JWTService = Depends(get_jwt_service),
) -> User:
    """
    FastAPI dependency to get the current authenticated user from JWT.

    Returns
    -------
    The authenticated User

    Raises
    ------
    UnauthorizedError
        If no bearer token was sent or the user no longer exists
    InvalidTokenError
        If the token is invalid, expired, or not an access token
    """
    if credentials is None:
        msg = "Not authorized, no token"
        raise UnauthorizedError(msg)

    payload = jwt_service.verify_token(credentials.credentials, kind=TokenKind.ACCESS)

    user = await UserRepositorySQLAlchemy(session).find_by_id(payload.user_id)
    if user is None:
        logger.warning("User not found for token: %s", payload.user_id)
        msg = "The user belonging to this token no longer exists"
        raise UnauthorizedError(msg)

    return user


# Type alias for injected current user
CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require admin user."""
    if not user.is_admin:
        msg = "Not authorized as an admin"
        raise ForbiddenError(msg)
    return user


AdminUser = Annotated[User, Depends(require_admin)]


# -----------------------------------------------------------------------------
# Path Identifiers
# -----------------------------------------------------------------------------


def parse_client_id(client_id: str) -> UUID:
    return parse_id(client_id, "client_id")


def parse_style_id(style_id: str) -> UUID:
    return parse_id(style_id, "style_id")


ClientId = Annotated[UUID, Depends(parse_client_id)]
StyleId = Annotated[UUID, Depends(parse_style_id)]


# -----------------------------------------------------------------------------
# Resource Services
# -----------------------------------------------------------------------------


def get_client_service(session: DBSession) -> ClientService:
    return ClientService(
        client_repository=ClientRepositorySQLAlchemy(session),
        style_repository=StyleRepositorySQLAlchemy(session),
    )


ClientServiceDep = Annotated[ClientService, Depends(get_client_service)]


def get_style_service(
    session: DBSession,
    settings: SettingsDep,
    image_storage: ImageStorage | None = Depends(get_image_storage),
) -> StyleService:
    return StyleService(
        style_repository=StyleRepositorySQLAlchemy(session),
        client_repository=ClientRepositorySQLAlchemy(session),
        image_storage=image_storage,
        unit_of_work=session,
        folder=settings.cloudinary_folder,
        max_image_bytes=settings.max_image_size_bytes,
    )


StyleServiceDep = Annotated[StyleService, Depends(get_style_service)]


def get_admin_service(session: DBSession) -> AdminService:
    return AdminService(
        user_repository=UserRepositorySQLAlchemy(session),
        client_repository=ClientRepositorySQLAlchemy(session),
        style_repository=StyleRepositorySQLAlchemy(session),
    )


AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
