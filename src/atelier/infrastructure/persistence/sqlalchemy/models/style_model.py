"""SQLAlchemy model for the Style entity."""

from uuid import UUID

from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from atelier.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)


class StyleModel(Base, TimestampMixin):
    __tablename__ = "styles"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    image_public_id: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<StyleModel(id={self.id}, name={self.name}, category={self.category})>"
