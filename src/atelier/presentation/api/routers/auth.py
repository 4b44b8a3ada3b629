"""Authentication router for registration, login, token refresh and profile."""

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Cookie, Response, status
from fastapi.responses import RedirectResponse

from atelier.application.services import AuthSession
from atelier.domain.shared import UnauthorizedError
from atelier.domain.user import User
from atelier.presentation.api.dependencies import (
    AuthService,
    CurrentUser,
    DBSession,
    OAuthProviderDep,
    SettingsDep,
)
from atelier.presentation.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
)
from atelier_config.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Cookie names
REFRESH_TOKEN_COOKIE = "refreshToken"  # NOQA: S105
OAUTH_STATE_COOKIE = "oauth_state"

AUTH_COOKIE_PATH = "/api/v1/auth"
OAUTH_STATE_MAX_AGE = 10 * 60


def _set_refresh_token_cookie(
    response: Response,
    token: str,
    settings: Settings,
) -> None:
    """Set the refresh token as an HttpOnly cookie.

    This cookie is:
    - HttpOnly: Not accessible to JavaScript
    - Secure: Only sent over HTTPS (when cookie_secure=True)
    - SameSite: strict by default
    - Path restricted: Only sent to /api/v1/auth endpoints
    """
    max_age_seconds = settings.jwt_refresh_token_expire_days * 24 * 60 * 60

    response.set_cookie(
        key=REFRESH_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.api_cookie_secure,
        samesite=settings.api_cookie_samesite,
        max_age=max_age_seconds,
        path=AUTH_COOKIE_PATH,
        domain=settings.api_cookie_domain,
    )


def _clear_refresh_token_cookie(response: Response, settings: Settings) -> None:
    """Clear the refresh token cookie (for logout)."""
    response.delete_cookie(
        key=REFRESH_TOKEN_COOKIE,
        path=AUTH_COOKIE_PATH,
        domain=settings.api_cookie_domain,
    )


def _create_auth_response(user: User, access_token: str) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        is_admin=user.is_admin,
        token=access_token,
    )


def _start_session(
    auth: AuthSession,
    response: Response,
    settings: Settings,
) -> AuthResponse:
    _set_refresh_token_cookie(response, auth.refresh_token, settings)
    return _create_auth_response(auth.user, auth.access_token)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "User registered successfully"},
        409: {"description": "Email already registered"},
        422: {"description": "Invalid input"},
    },
)
async def register(
    request: RegisterRequest,
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
) -> AuthResponse:
    """
    Register a new user account.

    Returns an access token in the body. The refresh token is set as an
    HttpOnly cookie.
    """
    auth = await auth_service.register(
        name=request.name,
        email=request.email,
        password=request.password,
    )
    await session.commit()
    return _start_session(auth, response, settings)


@router.post(
    "/login",
    summary="Login with email and password",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
) -> AuthResponse:
    """
    Authenticate with email and password.

    Unknown email and wrong password produce the same error.
    """
    auth = await auth_service.login(email=request.email, password=request.password)
    await session.commit()
    return _start_session(auth, response, settings)


@router.post(
    "/refresh-token",
    summary="Refresh access token",
    responses={
        200: {"description": "New access token issued"},
        401: {"description": "No refresh token cookie"},
        403: {"description": "Refresh token invalid, expired or already used"},
    },
)
async def refresh_token(
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    refresh_cookie: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> TokenResponse:
    """
    Exchange the refresh token cookie for a new access token.

    The refresh token is rotated: the cookie is replaced and the presented
    token stops working.
    """
    auth = await auth_service.refresh(refresh_cookie)
    await session.commit()

    _set_refresh_token_cookie(response, auth.refresh_token, settings)
    return TokenResponse(access_token=auth.access_token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout user",
    responses={
        204: {"description": "Logged out successfully"},
    },
)
async def logout(
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    refresh_cookie: Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> None:
    """Revoke the stored refresh token and clear the cookie."""
    await auth_service.logout(refresh_cookie)
    await session.commit()
    _clear_refresh_token_cookie(response, settings)


@router.get(
    "/profile",
    summary="Get current user profile",
    responses={
        200: {"description": "Current user information"},
        401: {"description": "Not authenticated"},
    },
)
async def get_profile(user: CurrentUser) -> UserResponse:
    """Get the profile of the authenticated user."""
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        is_admin=user.is_admin,
        avatar_url=user.avatar_url,
        created_at=user.created_at,
    )


@router.put(
    "/profile",
    summary="Update current user profile",
    responses={
        200: {"description": "Profile updated, fresh access token issued"},
        401: {"description": "Not authenticated"},
        409: {"description": "Email already in use"},
    },
)
async def update_profile(
    request: UpdateProfileRequest,
    user: CurrentUser,
    auth_service: AuthService,
    session: DBSession,
) -> AuthResponse:
    """
    Partially update name, email or password.

    Omitted fields keep their value.
    """
    updated, access_token = await auth_service.update_profile(
        user,
        name=request.name,
        email=request.email,
        password=request.password,
    )
    await session.commit()
    return _create_auth_response(updated, access_token)


@router.get(
    "/google",
    summary="Start Google sign-in",
    response_class=RedirectResponse,
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    responses={
        307: {"description": "Redirect to Google's consent screen"},
        404: {"description": "Google sign-in is not configured"},
    },
)
async def google_login(
    provider: OAuthProviderDep,
    settings: SettingsDep,
) -> RedirectResponse:
    """Redirect to Google with a CSRF state stored in a short-lived cookie."""
    state = secrets.token_urlsafe(32)
    response = RedirectResponse(provider.authorization_url(state))
    response.set_cookie(
        key=OAUTH_STATE_COOKIE,
        value=state,
        httponly=True,
        secure=settings.api_cookie_secure,
        samesite="lax",
        max_age=OAUTH_STATE_MAX_AGE,
        path=AUTH_COOKIE_PATH,
        domain=settings.api_cookie_domain,
    )
    return response


@router.get(
    "/google/callback",
    summary="Google sign-in callback",
    response_class=RedirectResponse,
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    responses={
        307: {"description": "Signed in, redirect to the frontend"},
        401: {"description": "State mismatch or Google rejected the sign-in"},
    },
)
async def google_callback(  # NOQA: PLR0913
    provider: OAuthProviderDep,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    code: str = "",
    state: str = "",
    expected_state: Annotated[
        str | None,
        Cookie(alias=OAUTH_STATE_COOKIE),
    ] = None,
) -> RedirectResponse:
    """
    Complete Google sign-in.

    Sets the refresh token cookie and redirects to the frontend, which
    obtains an access token through the refresh endpoint.
    """
    if not expected_state or not secrets.compare_digest(
        state.encode(),
        expected_state.encode(),
    ):
        logger.warning("OAuth callback with mismatched state")
        msg = "Google authentication failed"
        raise UnauthorizedError(msg)

    profile = await provider.exchange_and_verify(code)
    auth = await auth_service.oauth_login(profile)
    await session.commit()

    response = RedirectResponse(settings.frontend_base_url)
    _set_refresh_token_cookie(response, auth.refresh_token, settings)
    response.delete_cookie(
        key=OAUTH_STATE_COOKIE,
        path=AUTH_COOKIE_PATH,
        domain=settings.api_cookie_domain,
    )
    logger.info("User signed in with Google: %s", auth.user.email)
    return response
