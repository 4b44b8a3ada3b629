"""Style management service.

Styles live in two places: the database row and the image on the external
image host. There is no transaction spanning both, so every operation
orders its steps such that a failure leaves at worst an orphaned image,
never a row pointing at a missing image:

- create: upload, then persist. If persisting fails, the upload is deleted.
- update: upload the new image, persist, then delete the old image.
- delete: remove the row (and its client links), then delete the image.

Deleting images is best effort. Failures are logged and never surface to
the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from atelier.domain.shared.exceptions import (
    BadRequestError,
    InternalError,
    NotFoundError,
)
from atelier.domain.style import Style, StyleCategory

if TYPE_CHECKING:
    from atelier.application.ports import (
        ImageStorage,
        ImageUpload,
        StoredImage,
        UnitOfWork,
    )
    from atelier.domain.client import ClientRepository
    from atelier.domain.style import StyleRepository

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "fashion_styles"
DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024


class StyleService:
    """Use cases around styles and their hosted images.

    Unlike the other services this one commits its own unit of work: the
    old image may only be deleted once the new state is durable.
    """

    def __init__(  # NOQA: PLR0913
        self,
        style_repository: StyleRepository,
        client_repository: ClientRepository,
        image_storage: ImageStorage | None,
        unit_of_work: UnitOfWork,
        folder: str = DEFAULT_FOLDER,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    ):
        self._style_repo = style_repository
        self._client_repo = client_repository
        self._storage = image_storage
        self._uow = unit_of_work
        self._folder = folder
        self._max_image_bytes = max_image_bytes

    async def create_style(
        self,
        name: str,
        category: StyleCategory,
        image: ImageUpload | None,
        description: str | None = None,
    ) -> Style:
        """Upload the image and create the style record.

        Raises
        ------
        BadRequestError
            If no usable image was provided
        """
        if image is None or not image.data:
            msg = "Style image is required"
            raise BadRequestError(msg)
        self._check_image(image)

        stored = await self._require_storage().upload(image, self._folder)
        try:
            style = Style(
                name=name,
                category=category,
                description=description,
                image_url=stored.url,
                image_public_id=stored.public_id,
            )
            await self._style_repo.save(style)
            await self._uow.commit()
        except Exception:
            await self._uow.rollback()
            await self._discard_image(stored.public_id)
            raise

        logger.info("Style created: %s (%s)", style.id, style.name)
        return style

    async def list_styles(
        self,
        category: StyleCategory | None = None,
        name: str | None = None,
    ) -> list[Style]:
        return await self._style_repo.search(category=category, name=name)

    async def get_style(self, style_id: UUID) -> Style:
        return await self._get_or_raise(style_id)

    async def update_style(
        self,
        style_id: UUID,
        changes: dict[str, Any],
        image: ImageUpload | None = None,
    ) -> Style:
        """Apply a partial update, optionally replacing the image."""
        style = await self._get_or_raise(style_id)
        style.apply_changes(changes)

        stored: StoredImage | None = None
        previous_public_id: str | None = None
        if image is not None and image.data:
            self._check_image(image)
            stored = await self._require_storage().upload(image, self._folder)
            previous_public_id = style.replace_image(stored.url, stored.public_id)

        try:
            await self._style_repo.save(style)
            await self._uow.commit()
        except Exception:
            await self._uow.rollback()
            if stored is not None:
                await self._discard_image(stored.public_id)
            raise

        if previous_public_id and previous_public_id != style.image_public_id:
            await self._discard_image(previous_public_id)

        logger.info("Style updated: %s", style.id)
        return style

    async def delete_style(self, style_id: UUID) -> None:
        """Delete a style, unlink it from every client and drop its image."""
        style = await self._get_or_raise(style_id)

        unlinked = await self._client_repo.remove_style_everywhere(style.id)
        await self._style_repo.delete(style.id)
        await self._uow.commit()

        logger.info("Style deleted: %s (unlinked from %d clients)", style.id, unlinked)
        await self._discard_image(style.image_public_id)

    def _check_image(self, image: ImageUpload) -> None:
        if not (image.content_type or "").startswith("image/"):
            msg = "Only image files are allowed"
            raise BadRequestError(msg)
        if image.size > self._max_image_bytes:
            msg = f"Image exceeds the maximum size of {self._max_image_bytes} bytes"
            raise BadRequestError(msg)

    def _require_storage(self) -> ImageStorage:
        if self._storage is None:
            msg = "Image storage is not configured"
            raise InternalError(msg)
        return self._storage

    async def _discard_image(self, public_id: str) -> None:
        """Delete a hosted image without letting failures propagate."""
        if self._storage is None:
            logger.warning("No image storage configured, keeping image: %s", public_id)
            return
        try:
            deleted = await self._storage.delete(public_id)
        except Exception:
            logger.exception("Failed to delete hosted image: %s", public_id)
            return
        if not deleted:
            logger.warning("Image host did not delete image: %s", public_id)

    async def _get_or_raise(self, style_id: UUID) -> Style:
        style = await self._style_repo.find_by_id(style_id)
        if style is None:
            msg = f"Style not found with id {style_id}"
            raise NotFoundError(msg)
        return style
