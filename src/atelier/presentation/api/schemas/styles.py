"""Style schemas."""

from datetime import datetime
from uuid import UUID

from atelier.domain.style import Style, StyleCategory
from atelier.presentation.api.schemas.common import CamelModel, sanitized

StyleName = sanitized(min_length=1, max_length=100)
StyleDescription = sanitized(max_length=1000)


class StyleResponse(CamelModel):
    id: UUID
    name: str
    category: StyleCategory
    image_url: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, style: Style) -> "StyleResponse":
        return cls(
            id=style.id,
            name=style.name,
            category=style.category,
            image_url=style.image_url,
            description=style.description,
            created_at=style.created_at,
            updated_at=style.updated_at,
        )
