"""Client entity: a customer with measurements and linked styles."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from atelier.domain.shared.exceptions import (
    BadRequestError,
    EntityValidationError,
    FieldError,
)
from atelier.domain.shared.time import utc_now

PHONE_PATTERN = re.compile(r"^[+]?[(]?[0-9]{1,4}[)]?[-\s./0-9]*$")
CLIENT_EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

# Fields a partial update may touch
UPDATABLE_FIELDS = ("name", "phone", "email", "event_type", "measurements")


@dataclass(frozen=True)
class Measurement:
    """A named body measurement, e.g. ``Waist: 32in``."""

    name: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Measurement:
        return cls(name=str(data.get("name", "")), value=str(data.get("value", "")))


@dataclass
class Client:
    """A customer of the atelier.

    Invariants: name and phone are non-empty, phone looks like a phone
    number, email (when set) is lower-cased and looks like an email, and
    a style is linked at most once.
    """

    name: str
    phone: str
    email: str | None = None
    event_type: str | None = None
    measurements: list[Measurement] = field(default_factory=list)
    style_ids: list[UUID] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        self.phone = (self.phone or "").strip()
        self.email = (self.email or "").strip().lower() or None
        self.event_type = (self.event_type or "").strip() or None
        self.validate()

    def validate(self) -> None:
        """Check all invariants and report every violation at once."""
        errors: list[FieldError] = []

        if not self.name:
            errors.append(FieldError("name", "Client name is required", self.name))
        if not self.phone:
            errors.append(FieldError("phone", "Phone number is required", self.phone))
        elif not PHONE_PATTERN.match(self.phone):
            errors.append(
                FieldError("phone", "Please fill a valid phone number", self.phone),
            )
        if self.email and not CLIENT_EMAIL_PATTERN.match(self.email):
            errors.append(
                FieldError("email", "Please fill a valid email address", self.email),
            )
        for index, measurement in enumerate(self.measurements):
            if not measurement.name or not measurement.value:
                errors.append(
                    FieldError(
                        f"measurements.{index}",
                        "Measurement name and value are required",
                        measurement.to_dict(),
                    ),
                )
        if len(set(self.style_ids)) != len(self.style_ids):
            errors.append(FieldError("styles", "A style can only be linked once"))

        if errors:
            raise EntityValidationError(errors)

    def apply_changes(self, changes: dict[str, Any]) -> None:
        """Apply a partial update.

        Keys absent from ``changes`` keep their value. ``None`` or an empty
        string clears optional fields.
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            msg = f"Unknown client fields: {sorted(unknown)}"
            raise ValueError(msg)

        if "name" in changes:
            self.name = (changes["name"] or "").strip()
        if "phone" in changes:
            self.phone = (changes["phone"] or "").strip()
        if "email" in changes:
            self.email = (changes["email"] or "").strip().lower() or None
        if "event_type" in changes:
            self.event_type = (changes["event_type"] or "").strip() or None
        if "measurements" in changes:
            self.measurements = [
                m if isinstance(m, Measurement) else Measurement.from_dict(m)
                for m in changes["measurements"] or []
            ]

        self.validate()
        self.updated_at = utc_now()

    def has_style(self, style_id: UUID) -> bool:
        return style_id in self.style_ids

    def link_style(self, style_id: UUID) -> None:
        if self.has_style(style_id):
            msg = "Style already linked to this client"
            raise BadRequestError(msg)
        self.style_ids.append(style_id)
        self.updated_at = utc_now()

    def unlink_style(self, style_id: UUID) -> bool:
        if not self.has_style(style_id):
            return False
        self.style_ids = [s for s in self.style_ids if s != style_id]
        self.updated_at = utc_now()
        return True
