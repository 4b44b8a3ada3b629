"""Style entity: a fashion-inspiration record with a hosted image."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from atelier.domain.shared.exceptions import EntityValidationError, FieldError
from atelier.domain.shared.time import utc_now
from atelier.domain.style.category import StyleCategory

UPDATABLE_FIELDS = ("name", "category", "description")


@dataclass
class Style:
    """A style record.

    ``image_url`` and ``image_public_id`` always travel together: the
    public id is what the image host needs to delete the image again.
    """

    name: str
    category: StyleCategory
    image_url: str
    image_public_id: str
    description: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        self.description = (self.description or "").strip() or None
        self.validate()

    def validate(self) -> None:
        errors: list[FieldError] = []

        if not self.name:
            errors.append(FieldError("name", "Style name is required", self.name))
        if not isinstance(self.category, StyleCategory):
            try:
                self.category = StyleCategory(self.category)
            except ValueError:
                errors.append(
                    FieldError(
                        "category",
                        f"{self.category} is not a supported category",
                        self.category,
                    ),
                )
        if not self.image_url or not self.image_public_id:
            errors.append(FieldError("styleImage", "Style image is required"))

        if errors:
            raise EntityValidationError(errors)

    def apply_changes(self, changes: dict[str, Any]) -> None:
        """Apply a partial update of the text fields."""
        if "name" in changes:
            self.name = (changes["name"] or "").strip()
        if "category" in changes and changes["category"] is not None:
            self.category = changes["category"]
        if "description" in changes:
            self.description = (changes["description"] or "").strip() or None
        self.validate()
        self.updated_at = utc_now()

    def replace_image(self, image_url: str, image_public_id: str) -> str:
        """Point the style at a new image. Returns the previous public id."""
        previous = self.image_public_id
        self.image_url = image_url
        self.image_public_id = image_public_id
        self.validate()
        self.updated_at = utc_now()
        return previous
