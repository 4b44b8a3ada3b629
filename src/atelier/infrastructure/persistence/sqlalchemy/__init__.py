"""SQLAlchemy persistence: models, repositories and the database handle."""

from atelier.infrastructure.persistence.sqlalchemy.database import Database
from atelier.infrastructure.persistence.sqlalchemy.models import Base
from atelier.infrastructure.persistence.sqlalchemy.repositories import (
    ClientRepositorySQLAlchemy,
    StyleRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

__all__ = [
    "Base",
    "ClientRepositorySQLAlchemy",
    "Database",
    "StyleRepositorySQLAlchemy",
    "UserRepositorySQLAlchemy",
]
