"""Cloudinary adapter for the ImageStorage port."""

from __future__ import annotations

import asyncio
import io
import logging

import cloudinary.exceptions
import cloudinary.uploader

from atelier.application.ports import ImageStorageError, ImageUpload, StoredImage

logger = logging.getLogger(__name__)

# destroy() results that mean the image is gone
_DELETED_RESULTS = frozenset({"ok", "not found"})


class CloudinaryImageStorage:
    """Upload and delete images on Cloudinary.

    Credentials are passed with every call instead of through the SDK's
    global configuration, so several instances can coexist. The SDK is
    blocking and therefore runs in a worker thread.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 30.0,
    ):
        if not (cloud_name and api_key and api_secret):
            msg = "Cloudinary cloud name, API key and API secret are required"
            raise ValueError(msg)
        self._options = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "timeout": timeout,
        }

    async def upload(self, image: ImageUpload, folder: str) -> StoredImage:
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                io.BytesIO(image.data),
                folder=folder,
                resource_type="image",
                **self._options,
            )
        except cloudinary.exceptions.Error as e:
            logger.warning("Cloudinary upload failed for %s: %s", image.filename, e)
            msg = "Image upload failed"
            raise ImageStorageError(msg, details={"filename": image.filename}) from e

        stored = StoredImage(url=result["secure_url"], public_id=result["public_id"])
        logger.info("Uploaded image %s (%d bytes)", stored.public_id, image.size)
        return stored

    async def delete(self, public_id: str) -> bool:
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                public_id,
                invalidate=True,
                **self._options,
            )
        except cloudinary.exceptions.Error as e:
            msg = "Image deletion failed"
            raise ImageStorageError(msg, details={"public_id": public_id}) from e

        outcome = result.get("result")
        if outcome not in _DELETED_RESULTS:
            logger.warning(
                "Unexpected Cloudinary destroy result for %s: %s",
                public_id,
                outcome,
            )
            return False

        logger.info("Deleted image %s (%s)", public_id, outcome)
        return True
