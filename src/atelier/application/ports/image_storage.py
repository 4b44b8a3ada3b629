"""Image storage port. Interface for the external image host."""

from dataclasses import dataclass
from typing import Protocol

from atelier.domain.shared.exceptions import InternalError


class ImageStorageError(InternalError):
    """Raised when the image host fails."""

    default_message = "Image storage request failed"


@dataclass(frozen=True)
class ImageUpload:
    """An image received from a client, held in memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StoredImage:
    """Where the image host put an uploaded image."""

    url: str
    public_id: str


class ImageStorage(Protocol):
    """Port for uploading and deleting hosted images."""

    async def upload(self, image: ImageUpload, folder: str) -> StoredImage:
        """Upload an image into ``folder``.

        Raises
        ------
        ImageStorageError
            If the image host rejects the upload or cannot be reached
        """
        ...

    async def delete(self, public_id: str) -> bool:
        """Delete a hosted image.

        Returns
        -------
        True if the host deleted the image or no longer had it

        Raises
        ------
        ImageStorageError
            If the image host cannot be reached
        """
        ...
