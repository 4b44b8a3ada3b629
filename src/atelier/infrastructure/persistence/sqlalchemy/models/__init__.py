"""SQLAlchemy models."""

from atelier.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)
from atelier.infrastructure.persistence.sqlalchemy.models.client_model import (
    ClientModel,
    ClientStyleModel,
)
from atelier.infrastructure.persistence.sqlalchemy.models.style_model import StyleModel
from atelier.infrastructure.persistence.sqlalchemy.models.user_model import UserModel

__all__ = [
    "Base",
    "ClientModel",
    "ClientStyleModel",
    "StyleModel",
    "TimestampMixin",
    "UserModel",
]
