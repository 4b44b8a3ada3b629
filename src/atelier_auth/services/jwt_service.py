"""JWT token service.

Provides access and refresh token creation and verification. The two
token families are signed with independent secrets so that a leaked
access secret cannot be used to mint refresh tokens.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import jwt

from atelier_auth.exceptions import ExpiredTokenError, InvalidTokenError
from atelier_auth.schemas import TokenKind, TokenPayload


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class JWTService:
    """Service for JWT token creation and verification.

    Access tokens are short-lived bearer credentials, refresh tokens are
    long-lived and exchanged for new access tokens.

    Examples
    --------
    >>> service = JWTService(access_secret="a-secret", refresh_secret="r-secret")
    >>> token = service.create_access_token(user_id, is_admin=False)
    >>> payload = service.verify_token(token)
    >>> print(payload.user_id)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 15
    DEFAULT_REFRESH_EXPIRE_DAYS = 7
    ALGORITHM = "HS256"

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        access_secret
            Secret for signing access tokens.
        refresh_secret
            Secret for signing refresh tokens. Must differ from access_secret.
        access_token_expire_minutes
            Minutes until an access token expires (default 15)
        refresh_token_expire_days
            Days until a refresh token expires (default 7)
        clock
            Returns the current UTC time. Replaced in tests.
        """
        if not access_secret or not refresh_secret:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)
        if access_secret == refresh_secret:
            msg = "Access and refresh secrets must be different"
            raise ValueError(msg)

        self._secrets = {
            TokenKind.ACCESS: access_secret,
            TokenKind.REFRESH: refresh_secret,
        }
        self._access_expire = timedelta(minutes=access_token_expire_minutes)
        self._refresh_expire = timedelta(days=refresh_token_expire_days)
        self._clock = clock

    @property
    def access_token_lifetime(self) -> timedelta:
        return self._access_expire

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return self._refresh_expire

    def create_access_token(
        self,
        user_id: UUID,
        is_admin: bool = False,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived access token.

        Parameters
        ----------
        user_id
            The user's unique identifier
        is_admin
            Admin flag embedded for the caller's convenience. Authorization
            decisions still reload the user.
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(
            user_id=user_id,
            kind=TokenKind.ACCESS,
            expires_delta=expires_delta or self._access_expire,
            extra_claims={"is_admin": is_admin},
        )

    def create_refresh_token(
        self,
        user_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a long-lived refresh token.

        Parameters
        ----------
        user_id
            The user's unique identifier
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(
            user_id=user_id,
            kind=TokenKind.REFRESH,
            expires_delta=expires_delta or self._refresh_expire,
        )

    def verify_token(
        self,
        token: str,
        kind: TokenKind = TokenKind.ACCESS,
    ) -> TokenPayload:
        """Verify and decode a JWT token of the given kind.

        Parameters
        ----------
        token
            The JWT token string to verify
        kind
            Which family the token must belong to. Selects the secret.

        Returns
        -------
        TokenPayload containing the decoded data

        Raises
        ------
        ExpiredTokenError
            If the signature is valid but the token has expired
        InvalidTokenError
            If the token is mis-signed, malformed or of another kind
        """
        if not token:
            msg = "Token is empty"
            raise InvalidTokenError(msg)

        try:
            # Expiry is checked against the injected clock below
            payload = jwt.decode(
                token,
                self._secrets[kind],
                algorithms=[self.ALGORITHM],
                options={
                    "require": ["sub", "type", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            user_id = UUID(payload["sub"])
            exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
            token_type = TokenKind(payload["type"])
        except jwt.InvalidTokenError as e:
            msg = f"Invalid token: {e}"
            raise InvalidTokenError(msg) from e
        except (KeyError, ValueError, TypeError) as e:
            msg = f"Malformed token payload: {e}"
            raise InvalidTokenError(msg) from e

        if token_type != kind:
            msg = f"Expected {kind.value} token, got {token_type.value}"
            raise InvalidTokenError(msg)

        if self._clock() >= exp:
            raise ExpiredTokenError

        return TokenPayload(
            user_id=user_id,
            exp=exp,
            token_type=token_type,
            is_admin=bool(payload.get("is_admin", False)),
            jti=str(payload.get("jti", "")),
        )

    def _create_token(
        self,
        user_id: UUID,
        kind: TokenKind,
        expires_delta: timedelta,
        extra_claims: dict | None = None,
    ) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "type": kind.value,
            "iat": int(now.timestamp()),
            "exp": int((now + expires_delta).timestamp()),
            "jti": uuid4().hex,
            **(extra_claims or {}),
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self.ALGORITHM)
