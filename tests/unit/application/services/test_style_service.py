"""Unit tests for StyleService and its image compensation steps."""

from unittest.mock import AsyncMock, call
from uuid import uuid4

import pytest

from atelier.application.ports import ImageStorageError, ImageUpload, StoredImage
from atelier.application.services import StyleService
from atelier.domain.shared import BadRequestError, InternalError, NotFoundError
from atelier.domain.style import Style, StyleCategory

PNG = ImageUpload(filename="dress.png", content_type="image/png", data=b"\x89PNG")


def make_style() -> Style:
    return Style(
        name="Agbada",
        category=StyleCategory.TRADITIONAL,
        image_url="https://res.example.com/old.jpg",
        image_public_id="fashion_styles/old",
    )


class StyleServiceTestBase:
    def setup_method(self):
        self.style_repo = AsyncMock()
        self.client_repo = AsyncMock()
        self.storage = AsyncMock()
        self.storage.upload.return_value = StoredImage(
            url="https://res.example.com/new.jpg",
            public_id="fashion_styles/new",
        )
        self.storage.delete.return_value = True
        self.uow = AsyncMock()
        self.service = StyleService(
            style_repository=self.style_repo,
            client_repository=self.client_repo,
            image_storage=self.storage,
            unit_of_work=self.uow,
            folder="test_styles",
            max_image_bytes=1024,
        )


class TestCreateStyle(StyleServiceTestBase):
    @pytest.mark.asyncio
    async def test_upload_then_persist(self):
        style = await self.service.create_style(
            name="Kaftan",
            category=StyleCategory.CASUAL,
            image=PNG,
            description="Loose fit",
        )

        self.storage.upload.assert_awaited_once_with(PNG, "test_styles")
        self.style_repo.save.assert_awaited_once_with(style)
        self.uow.commit.assert_awaited_once()
        assert style.image_url == "https://res.example.com/new.jpg"
        assert style.image_public_id == "fashion_styles/new"

    @pytest.mark.asyncio
    async def test_uploaded_image_deleted_when_persist_fails(self):
        self.style_repo.save.side_effect = RuntimeError("database down")

        with pytest.raises(RuntimeError, match="database down"):
            await self.service.create_style("Kaftan", StyleCategory.CASUAL, PNG)

        self.uow.rollback.assert_awaited_once()
        self.storage.delete.assert_awaited_once_with("fashion_styles/new")

    @pytest.mark.asyncio
    async def test_commit_failure_also_compensates(self):
        self.uow.commit.side_effect = RuntimeError("commit failed")

        with pytest.raises(RuntimeError):
            await self.service.create_style("Kaftan", StyleCategory.CASUAL, PNG)

        self.storage.delete.assert_awaited_once_with("fashion_styles/new")

    @pytest.mark.asyncio
    async def test_failed_compensation_does_not_mask_error(self):
        self.style_repo.save.side_effect = RuntimeError("database down")
        self.storage.delete.side_effect = ImageStorageError("host down")

        with pytest.raises(RuntimeError, match="database down"):
            await self.service.create_style("Kaftan", StyleCategory.CASUAL, PNG)

    @pytest.mark.asyncio
    async def test_image_required(self):
        with pytest.raises(BadRequestError, match="Style image is required"):
            await self.service.create_style("Kaftan", StyleCategory.CASUAL, None)

        self.storage.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_only_images_allowed(self):
        pdf = ImageUpload("cv.pdf", "application/pdf", b"%PDF")

        with pytest.raises(BadRequestError, match="Only image files"):
            await self.service.create_style("Kaftan", StyleCategory.CASUAL, pdf)

    @pytest.mark.asyncio
    async def test_size_limit(self):
        big = ImageUpload("big.png", "image/png", b"x" * 1025)

        with pytest.raises(BadRequestError, match="maximum size"):
            await self.service.create_style("Kaftan", StyleCategory.CASUAL, big)

        self.storage.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_storage_configured(self):
        service = StyleService(
            style_repository=self.style_repo,
            client_repository=self.client_repo,
            image_storage=None,
            unit_of_work=self.uow,
        )

        with pytest.raises(InternalError, match="not configured"):
            await service.create_style("Kaftan", StyleCategory.CASUAL, PNG)


class TestUpdateStyle(StyleServiceTestBase):
    def setup_method(self):
        super().setup_method()
        self.style = make_style()
        self.style_repo.find_by_id.return_value = self.style

    @pytest.mark.asyncio
    async def test_text_only_update_keeps_image(self):
        style = await self.service.update_style(self.style.id, {"name": "Grand"})

        assert style.name == "Grand"
        assert style.image_public_id == "fashion_styles/old"
        self.storage.upload.assert_not_called()
        self.storage.delete.assert_not_called()
        self.uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_old_image_deleted_after_commit(self):
        order = []
        self.uow.commit.side_effect = lambda: order.append("commit")
        self.storage.delete.side_effect = lambda public_id: order.append(public_id)

        style = await self.service.update_style(self.style.id, {}, image=PNG)

        assert style.image_public_id == "fashion_styles/new"
        assert order == ["commit", "fashion_styles/old"]

    @pytest.mark.asyncio
    async def test_new_image_deleted_when_persist_fails(self):
        self.style_repo.save.side_effect = RuntimeError("database down")

        with pytest.raises(RuntimeError):
            await self.service.update_style(self.style.id, {}, image=PNG)

        assert self.storage.delete.await_args_list == [call("fashion_styles/new")]

    @pytest.mark.asyncio
    async def test_missing_style(self):
        self.style_repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Style not found"):
            await self.service.update_style(uuid4(), {"name": "X"})


class TestDeleteStyle(StyleServiceTestBase):
    def setup_method(self):
        super().setup_method()
        self.style = make_style()
        self.style_repo.find_by_id.return_value = self.style
        self.client_repo.remove_style_everywhere.return_value = 2

    @pytest.mark.asyncio
    async def test_unlinks_deletes_then_drops_image(self):
        await self.service.delete_style(self.style.id)

        self.client_repo.remove_style_everywhere.assert_awaited_once_with(
            self.style.id,
        )
        self.style_repo.delete.assert_awaited_once_with(self.style.id)
        self.uow.commit.assert_awaited_once()
        self.storage.delete.assert_awaited_once_with("fashion_styles/old")

    @pytest.mark.asyncio
    async def test_image_delete_failure_is_swallowed(self):
        self.storage.delete.side_effect = ImageStorageError("host down")

        await self.service.delete_style(self.style.id)

        self.uow.rollback.assert_not_called()

    @pytest.mark.asyncio
    async def test_image_host_refusal_is_tolerated(self):
        self.storage.delete.return_value = False

        await self.service.delete_style(self.style.id)

        self.style_repo.delete.assert_awaited_once()
