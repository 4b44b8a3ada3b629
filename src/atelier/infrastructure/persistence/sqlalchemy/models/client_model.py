"""SQLAlchemy models for the Client entity and its style links."""

from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from atelier.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)


class ClientModel(Base, TimestampMixin):
    """Persisted client.

    Measurements are an ordered list of ``{"name", "value"}`` objects.
    """

    __tablename__ = "clients"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    event_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    measurements: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    def __repr__(self) -> str:
        return f"<ClientModel(id={self.id}, name={self.name})>"


class ClientStyleModel(Base):
    """Link between a client and a style.

    The composite primary key guarantees a style is linked to a client at
    most once. ``position`` keeps the link order.
    """

    __tablename__ = "client_styles"

    client_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="CASCADE"),
        primary_key=True,
    )
    style_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("styles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
