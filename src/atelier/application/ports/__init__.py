"""Ports: interfaces the application layer needs from the outside world."""

from atelier.application.ports.image_storage import (
    ImageStorage,
    ImageStorageError,
    ImageUpload,
    StoredImage,
)
from atelier.application.ports.oauth_provider import ExternalProfile, OAuthProvider
from atelier.application.ports.unit_of_work import UnitOfWork

__all__ = [
    "ExternalProfile",
    "ImageStorage",
    "ImageStorageError",
    "ImageUpload",
    "OAuthProvider",
    "StoredImage",
    "UnitOfWork",
]
