"""Translation of driver integrity errors."""

import re
from typing import Any

from sqlalchemy.exc import IntegrityError

from atelier.domain.shared.exceptions import DuplicateKeyError

# PostgreSQL: Key (email)=(a@x.com) already exists.
_PG_KEY = re.compile(r"Key \((?P<field>[^)]+)\)=\((?P<value>.*?)\) already exists")
# SQLite: UNIQUE constraint failed: users.email
_SQLITE_KEY = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w., ]+)")


def is_unique_violation(error: IntegrityError) -> bool:
    text = str(error.orig if error.orig is not None else error)
    return "UNIQUE constraint failed" in text or "duplicate key" in text.lower()


def parse_unique_violation(error: IntegrityError) -> tuple[str | None, str | None]:
    """Extract ``(field, value)`` from a unique violation, where the driver says."""
    text = str(error.orig if error.orig is not None else error)

    match = _PG_KEY.search(text)
    if match:
        return match.group("field"), match.group("value")

    match = _SQLITE_KEY.search(text)
    if match:
        columns = [c.strip().split(".")[-1] for c in match.group("columns").split(",")]
        return ", ".join(columns), None

    return None, None


def to_duplicate_key_error(
    error: IntegrityError,
    attempted: dict[str, Any],
) -> DuplicateKeyError | None:
    """Build a DuplicateKeyError for a unique violation, None otherwise.

    ``attempted`` maps column names to the values that were written, used
    when the driver does not report the offending value itself.
    """
    if not is_unique_violation(error):
        return None

    field, value = parse_unique_violation(error)
    if field is None:
        field = next(iter(attempted), "unknown")
    if value is None:
        known = [
            str(attempted[name.strip()])
            for name in field.split(",")
            if name.strip() in attempted
        ]
        value = ", ".join(known) or None
    return DuplicateKeyError(field, value)
