"""Image storage adapters."""

from atelier.infrastructure.storage.cloudinary_storage import CloudinaryImageStorage

__all__ = ["CloudinaryImageStorage"]
