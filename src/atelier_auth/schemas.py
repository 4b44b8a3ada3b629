"""Auth schemas and data structures.

These are simple data classes used for transferring token data
between components.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class TokenKind(str, Enum):
    """The two token families, each signed with its own secret."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    This represents the data extracted from a verified JWT token.

    Attributes
    ----------
    user_id
        The unique identifier of the user
    exp
        Token expiration timestamp
    token_type
        Access or refresh
    is_admin
        Admin flag at issuance time (only meaningful for access tokens)
    jti
        Random token id, distinguishes tokens issued in the same second
    """

    user_id: UUID
    exp: datetime
    token_type: TokenKind
    is_admin: bool = False
    jti: str = ""

    def is_access_token(self) -> bool:
        """Check if this is an access token."""
        return self.token_type == TokenKind.ACCESS

    def is_refresh_token(self) -> bool:
        """Check if this is a refresh token."""
        return self.token_type == TokenKind.REFRESH
