"""User aggregate."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from atelier.domain.shared.exceptions import EntityValidationError, FieldError
from atelier.domain.shared.time import utc_now
from atelier.domain.user.email import Email


class User:
    """
    User aggregate root.

    A user signs in with a password, a Google account, or both. The
    current refresh token is stored on the user so that it can be
    rotated and revoked.
    """

    def __init__(  # NOQA: PLR0913
        self,
        name: str,
        email: Union[str, Email],
        password_hash: str | None = None,
        google_id: str | None = None,
        avatar_url: str | None = None,
        is_admin: bool = False,
        refresh_token: str | None = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._name = self._validate_name(name)
        self._email = email if isinstance(email, Email) else Email(email)
        self._password_hash = password_hash
        self._google_id = google_id
        self._avatar_url = avatar_url
        self._is_admin = is_admin
        self._refresh_token = refresh_token
        self._id = id or uuid4()
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or self._created_at

    @staticmethod
    def _validate_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise EntityValidationError([FieldError("name", "Name is required", name)])
        return cleaned

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def password_hash(self) -> str | None:
        return self._password_hash

    @property
    def has_password(self) -> bool:
        return bool(self._password_hash)

    @property
    def google_id(self) -> str | None:
        return self._google_id

    @property
    def avatar_url(self) -> str | None:
        return self._avatar_url

    @property
    def is_admin(self) -> bool:
        return self._is_admin

    @property
    def refresh_token(self) -> str | None:
        return self._refresh_token

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def rename(self, name: str) -> None:
        self._name = self._validate_name(name)
        self._touch()

    def change_email(self, email: Union[str, Email]) -> None:
        self._email = email if isinstance(email, Email) else Email(email)
        self._touch()

    def set_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash
        self._touch()

    def link_google_account(self, google_id: str, avatar_url: str | None) -> None:
        self._google_id = google_id
        if avatar_url and not self._avatar_url:
            self._avatar_url = avatar_url
        self._touch()

    def issue_refresh_token(self, token: str) -> None:
        self._refresh_token = token

    def revoke_refresh_token(self) -> None:
        self._refresh_token = None

    def promote_to_admin(self) -> None:
        self._is_admin = True
        self._touch()

    def _touch(self) -> None:
        self._updated_at = utc_now()

    @classmethod
    def create(
        cls,
        name: str,
        email: Union[str, Email],
        password_hash: str | None = None,
        google_id: str | None = None,
        avatar_url: str | None = None,
    ) -> "User":
        if not password_hash and not google_id:
            raise EntityValidationError(
                [FieldError("password", "Password is required")],
            )
        return cls(
            name=name,
            email=email,
            password_hash=password_hash,
            google_id=google_id,
            avatar_url=avatar_url,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
