"""Style domain: inspiration records with hosted images."""

from atelier.domain.style.category import StyleCategory
from atelier.domain.style.repository import StyleRepository
from atelier.domain.style.style import Style

__all__ = [
    "Style",
    "StyleCategory",
    "StyleRepository",
]
