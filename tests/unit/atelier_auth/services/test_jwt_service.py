"""Unit tests for JWTService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from atelier_auth import ExpiredTokenError, InvalidTokenError, TokenKind
from atelier_auth.services import JWTService

ACCESS_SECRET = "access-secret-12345"
REFRESH_SECRET = "refresh-secret-67890"


class FakeClock:
    """Settable clock for expiry tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class TestJWTServiceInit:
    """Tests for JWTService initialization."""

    def test_init_with_valid_secrets(self):
        service = JWTService(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)
        assert service.access_token_lifetime == timedelta(minutes=15)
        assert service.refresh_token_lifetime == timedelta(days=7)

    def test_init_with_empty_secret_raises(self):
        with pytest.raises(ValueError):
            JWTService(access_secret="", refresh_secret=REFRESH_SECRET)

    def test_init_with_identical_secrets_raises(self):
        """Refresh tokens must never verify as access tokens."""
        with pytest.raises(ValueError):
            JWTService(access_secret="same", refresh_secret="same")


class TestAccessTokens:
    """Tests for access token creation and verification."""

    def setup_method(self):
        self.start = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        self.clock = FakeClock(self.start)
        self.service = JWTService(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
            clock=self.clock,
        )
        self.user_id = uuid4()

    def test_verify_valid_access_token(self):
        token = self.service.create_access_token(self.user_id, is_admin=True)

        payload = self.service.verify_token(token)

        assert payload.user_id == self.user_id
        assert payload.token_type == TokenKind.ACCESS
        assert payload.is_admin is True
        assert payload.is_access_token()
        assert not payload.is_refresh_token()

    def test_token_valid_until_just_before_expiry(self):
        token = self.service.create_access_token(self.user_id)

        self.clock.now = self.start + timedelta(minutes=14)
        assert self.service.verify_token(token).user_id == self.user_id

    def test_token_expired_after_lifetime(self):
        token = self.service.create_access_token(self.user_id)

        self.clock.now = self.start + timedelta(minutes=16)
        with pytest.raises(ExpiredTokenError):
            self.service.verify_token(token)

    def test_expired_is_an_invalid_token(self):
        token = self.service.create_access_token(
            self.user_id,
            expires_delta=timedelta(seconds=-1),
        )

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_wrongly_signed_token_rejected(self):
        other = JWTService(access_secret="other-secret", refresh_secret=REFRESH_SECRET)
        token = other.create_access_token(self.user_id)

        with pytest.raises(InvalidTokenError) as exc_info:
            self.service.verify_token(token)
        assert not isinstance(exc_info.value, ExpiredTokenError)

    def test_garbage_token_rejected(self):
        with pytest.raises(InvalidTokenError):
            self.service.verify_token("not-a-jwt")

    def test_empty_token_rejected(self):
        with pytest.raises(InvalidTokenError):
            self.service.verify_token("")

    def test_token_with_bad_subject_rejected(self):
        token = jwt.encode(
            {"sub": "not-a-uuid", "type": "access", "exp": 4102444800},
            ACCESS_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="Malformed"):
            self.service.verify_token(token)

    def test_tokens_are_unique(self):
        first = self.service.create_access_token(self.user_id)
        second = self.service.create_access_token(self.user_id)
        assert first != second


class TestRefreshTokens:
    """Tests for refresh tokens and token kind separation."""

    def setup_method(self):
        self.service = JWTService(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
        )
        self.user_id = uuid4()

    def test_verify_refresh_token(self):
        token = self.service.create_refresh_token(self.user_id)

        payload = self.service.verify_token(token, kind=TokenKind.REFRESH)

        assert payload.user_id == self.user_id
        assert payload.is_refresh_token()
        assert payload.jti

    def test_refresh_token_is_not_an_access_token(self):
        token = self.service.create_refresh_token(self.user_id)

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token, kind=TokenKind.ACCESS)

    def test_access_token_is_not_a_refresh_token(self):
        token = self.service.create_access_token(self.user_id)

        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token, kind=TokenKind.REFRESH)

    def test_refresh_token_lives_seven_days(self):
        token = self.service.create_refresh_token(self.user_id)

        payload = self.service.verify_token(token, kind=TokenKind.REFRESH)
        remaining = payload.exp - datetime.now(tz=timezone.utc)

        assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)
