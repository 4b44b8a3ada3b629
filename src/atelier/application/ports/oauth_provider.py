"""OAuth provider port."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ExternalProfile:
    """The identity an OAuth provider vouches for."""

    subject_id: str
    email: str
    name: str
    avatar_url: str | None = None


class OAuthProvider(Protocol):
    """Port for an authorization-code OAuth provider."""

    def authorization_url(self, state: str) -> str:
        """URL the browser is sent to for consent."""
        ...

    async def exchange_and_verify(self, code: str) -> ExternalProfile:
        """Exchange an authorization code for a verified profile.

        Raises
        ------
        UnauthorizedError
            If the code is rejected or the profile cannot be trusted
        """
        ...
