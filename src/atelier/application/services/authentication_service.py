"""Authentication service for registration, login and token rotation."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from atelier.domain.shared.exceptions import (
    ConflictError,
    DuplicateKeyError,
    ForbiddenError,
    UnauthorizedError,
)
from atelier.domain.user import Email, User
from atelier_auth import (
    InvalidCredentialsError,
    InvalidTokenError,
    JWTService,
    PasswordHashingService,
    TokenKind,
)

if TYPE_CHECKING:
    from atelier.application.ports import ExternalProfile
    from atelier.domain.user import UserRepository

logger = logging.getLogger(__name__)


def fingerprint(token: str) -> str:
    """Digest under which a refresh token is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class AuthSession:
    """Result of a successful sign-in."""

    user: User
    access_token: str
    refresh_token: str


class AuthenticationService:
    """
    Application service for user authentication.

    Combines atelier_auth (password hashing, JWT tokens) with the User
    aggregate to provide:
    - Registration and password login
    - Google sign-in
    - Refresh token rotation and revocation
    - Profile updates

    Only a digest of the current refresh token is stored. Presenting a
    token that has already been rotated fails, which lets a stolen token
    be used at most once.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        allowed_email_domain: str | None = None,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._allowed_domain = (allowed_email_domain or "").lower() or None

    def _create_access_token(self, user: User) -> str:
        return self._jwt_service.create_access_token(
            user_id=user.id,
            is_admin=user.is_admin,
        )

    def _create_token_pair(self, user: User) -> tuple[str, str]:
        access_token = self._create_access_token(user)
        refresh_token = self._jwt_service.create_refresh_token(user_id=user.id)
        return access_token, refresh_token

    async def _start_session(self, user: User) -> AuthSession:
        access_token, refresh_token = self._create_token_pair(user)
        await self._user_repo.set_refresh_token(user.id, fingerprint(refresh_token))
        user.issue_refresh_token(fingerprint(refresh_token))
        return AuthSession(user, access_token, refresh_token)

    async def register(self, name: str, email: str, password: str) -> AuthSession:
        if await self._user_repo.exists_by_email(email):
            msg = "User already exists"
            raise ConflictError(msg)

        password_hash = self._password_service.hash(password)
        user = User.create(name=name, email=email, password_hash=password_hash)
        access_token, refresh_token = self._create_token_pair(user)
        user.issue_refresh_token(fingerprint(refresh_token))

        try:
            await self._user_repo.save(user)
        except DuplicateKeyError as e:
            # Lost a race against a concurrent registration
            msg = "User already exists"
            raise ConflictError(msg) from e

        logger.info("User registered: %s", user.email)
        return AuthSession(user, access_token, refresh_token)

    async def login(self, email: str, password: str) -> AuthSession:
        user = await self._user_repo.find_by_email(email)
        password_hash = user.password_hash if user is not None else None
        # Unknown email, OAuth-only account and wrong password fail alike
        valid = self._password_service.verify(password, password_hash)
        if user is None or not valid:
            raise InvalidCredentialsError

        if self._password_service.needs_rehash(user.password_hash):
            user.set_password_hash(self._password_service.hash(password))
            await self._user_repo.save(user)
            logger.info("Password hash upgraded for user: %s", user.id)

        session = await self._start_session(user)
        logger.info("User logged in: %s", user.email)
        return session

    async def oauth_login(self, profile: ExternalProfile) -> AuthSession:
        """Sign in with an identity vouched for by the OAuth provider.

        Matches the account by provider subject id first, then by email
        (linking the provider identity to the existing account), and
        creates a new account otherwise.

        Raises
        ------
        UnauthorizedError
            If the email's domain is not the allow-listed one
        """
        email = Email(profile.email)
        if self._allowed_domain and email.domain != self._allowed_domain:
            logger.warning("OAuth login rejected for domain: %s", email.domain)
            msg = "Unauthorized domain"
            raise UnauthorizedError(msg)

        user = await self._user_repo.find_by_google_id(profile.subject_id)
        if user is None:
            user = await self._user_repo.find_by_email(email)
            if user is not None:
                user.link_google_account(profile.subject_id, profile.avatar_url)
                logger.info("Linked Google account to user: %s", user.email)
            else:
                user = User.create(
                    name=profile.name or email.value.split("@")[0],
                    email=email,
                    google_id=profile.subject_id,
                    avatar_url=profile.avatar_url,
                )
                logger.info("User created from Google profile: %s", user.email)

            try:
                await self._user_repo.save(user)
            except DuplicateKeyError as e:
                msg = "User already exists"
                raise ConflictError(msg) from e

        return await self._start_session(user)

    async def refresh(self, refresh_token: str | None) -> AuthSession:
        """Exchange a refresh token for a new access token.

        The refresh token is rotated: the presented one becomes invalid and
        a new one is returned in its place.

        Raises
        ------
        UnauthorizedError
            If no token was presented
        ForbiddenError
            If the token is invalid, expired, or no longer current
        """
        if not refresh_token:
            msg = "No refresh token provided"
            raise UnauthorizedError(msg)

        try:
            payload = self._jwt_service.verify_token(
                refresh_token,
                kind=TokenKind.REFRESH,
            )
        except InvalidTokenError as e:
            logger.warning("Refresh token rejected: %s", e)
            msg = "Invalid refresh token"
            raise ForbiddenError(msg) from e

        user = await self._user_repo.find_by_id(payload.user_id)
        if user is None:
            msg = "Invalid refresh token"
            raise ForbiddenError(msg)

        access_token, new_refresh_token = self._create_token_pair(user)
        rotated = await self._user_repo.rotate_refresh_token(
            user.id,
            presented=fingerprint(refresh_token),
            replacement=fingerprint(new_refresh_token),
        )
        if not rotated:
            logger.warning("Stale refresh token presented for user: %s", user.id)
            msg = "Invalid refresh token"
            raise ForbiddenError(msg)

        user.issue_refresh_token(fingerprint(new_refresh_token))
        logger.debug("Tokens refreshed for user: %s", user.id)
        return AuthSession(user, access_token, new_refresh_token)

    async def logout(self, refresh_token: str | None) -> None:
        """Revoke the stored refresh token if the presented one is valid."""
        if not refresh_token:
            return
        try:
            payload = self._jwt_service.verify_token(
                refresh_token,
                kind=TokenKind.REFRESH,
            )
        except InvalidTokenError:
            logger.debug("Logout with unusable refresh token, nothing to revoke")
            return
        # Revoke only if it is still the current token of that user
        await self._user_repo.rotate_refresh_token(
            payload.user_id,
            presented=fingerprint(refresh_token),
            replacement=None,
        )
        logger.info("User logged out: %s", payload.user_id)

    async def update_profile(
        self,
        user: User,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> tuple[User, str]:
        """Apply a partial profile update.

        Returns the updated user and a fresh access token.
        """
        if name is not None:
            user.rename(name)

        if email is not None:
            new_email = Email(email)
            if new_email.value != user.email:
                if await self._user_repo.exists_by_email(new_email):
                    msg = "Email already in use"
                    raise ConflictError(msg)
                user.change_email(new_email)

        if password:
            user.set_password_hash(self._password_service.hash(password))

        try:
            await self._user_repo.save(user)
        except DuplicateKeyError as e:
            msg = "Email already in use"
            raise ConflictError(msg) from e

        logger.info("Profile updated for user: %s", user.id)
        return user, self._create_access_token(user)
