"""Identifier parsing."""

from typing import Any
from uuid import UUID

from atelier.domain.shared.exceptions import CastError


def parse_id(value: Any, path: str = "id") -> UUID:
    """Interpret ``value`` as an entity identifier.

    Raises
    ------
    CastError
        If the value is not a well-formed UUID
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError, AttributeError) as e:
        raise CastError(path, value) from e
