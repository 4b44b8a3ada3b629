"""bcrypt-backed password hashing.

Hashes are self-describing (``$2b$<cost>$<salt+digest>``), so the work
factor a hash was made with can be read back and compared against the
configured one.
"""

import secrets
from functools import lru_cache

import bcrypt

from atelier_auth.exceptions import WeakPasswordError


@lru_cache(maxsize=8)
def _placeholder_hash(rounds: int) -> str:
    # Hash of a random secret nobody knows, checked when an account has no
    # password so the call costs the same as a real check.
    return bcrypt.hashpw(
        secrets.token_bytes(16),
        bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


class PasswordHashingService:
    """Hashes account passwords and checks login attempts against them.

    Examples
    --------
    >>> passwords = PasswordHashingService(rounds=4)
    >>> stored = passwords.hash("secret1")
    >>> passwords.verify("secret1", stored)
    True
    >>> passwords.verify("secret2", stored)
    False
    """

    MIN_LENGTH = 6
    # bcrypt only looks at the first 72 bytes of its input
    MAX_BYTES = 72

    def __init__(self, rounds: int = 12):
        """
        Parameters
        ----------
        rounds
            bcrypt cost; each step doubles the hashing time.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Return a salted bcrypt hash for a new password.

        Raises
        ------
        WeakPasswordError
            If the password is outside the accepted length range
        """
        self.validate_strength(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Check a login attempt against a stored hash.

        A missing hash (OAuth-only account, unknown user) is checked against
        a placeholder and fails, taking as long as a real mismatch. Malformed
        hashes fail too.
        """
        if not password:
            return False
        candidate = password_hash or _placeholder_hash(self._rounds)
        try:
            matched = bcrypt.checkpw(
                password.encode("utf-8"),
                candidate.encode("utf-8"),
            )
        except (ValueError, TypeError):
            return False
        return matched and bool(password_hash)

    def validate_strength(self, password: str) -> None:
        """Enforce the accepted length range.

        Raises
        ------
        WeakPasswordError
            If the password is empty, shorter than MIN_LENGTH characters
            or longer than MAX_BYTES once encoded.
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)

    def needs_rehash(self, password_hash: str) -> bool:
        """True when ``password_hash`` was made with another cost."""
        parts = password_hash.split("$")
        if len(parts) < 3 or not parts[2].isdigit():
            return True
        return int(parts[2]) != self._rounds
