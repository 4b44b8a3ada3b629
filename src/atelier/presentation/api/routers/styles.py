"""Style router: style records with an image hosted on Cloudinary.

Create and update take ``multipart/form-data`` with the text fields and an
optional file field ``styleImage``.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from atelier.application.ports import ImageUpload
from atelier.domain.style import StyleCategory
from atelier.presentation.api.dependencies import (
    CurrentUser,
    StyleId,
    StyleServiceDep,
)
from atelier.presentation.api.schemas.common import MessageResponse
from atelier.presentation.api.schemas.styles import (
    StyleDescription,
    StyleName,
    StyleResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

STYLE_IMAGE_FIELD = "styleImage"


async def _read_upload(file: UploadFile | None) -> ImageUpload | None:
    if file is None:
        return None
    data = await file.read()
    return ImageUpload(
        filename=file.filename or "",
        content_type=file.content_type or "",
        data=data,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a style",
    responses={
        201: {"description": "Style created, image uploaded"},
        400: {"description": "Missing, oversized or non-image file"},
        422: {"description": "Invalid form fields"},
    },
)
async def create_style(
    _user: CurrentUser,
    service: StyleServiceDep,
    name: Annotated[StyleName, Form()],
    category: Annotated[StyleCategory, Form()],
    description: Annotated[StyleDescription | None, Form()] = None,
    style_image: Annotated[UploadFile | None, File(alias=STYLE_IMAGE_FIELD)] = None,
) -> StyleResponse:
    """
    Upload the image and create the style.

    If saving fails after the upload, the uploaded image is deleted again.
    """
    style = await service.create_style(
        name=name,
        category=category,
        description=description,
        image=await _read_upload(style_image),
    )
    return StyleResponse.from_domain(style)


@router.get(
    "",
    summary="List styles",
    responses={
        200: {"description": "Styles matching the filters"},
        401: {"description": "Not authenticated"},
    },
)
async def list_styles(
    _user: CurrentUser,
    service: StyleServiceDep,
    category: Annotated[StyleCategory | None, Query()] = None,
    name: Annotated[
        str | None,
        Query(description="Case-insensitive name filter"),
    ] = None,
) -> list[StyleResponse]:
    styles = await service.list_styles(category=category, name=name)
    return [StyleResponse.from_domain(s) for s in styles]


@router.get(
    "/{style_id}",
    summary="Get a style",
    responses={
        200: {"description": "The style"},
        400: {"description": "Malformed style id"},
        404: {"description": "Style not found"},
    },
)
async def get_style(
    style_id: StyleId,
    _user: CurrentUser,
    service: StyleServiceDep,
) -> StyleResponse:
    return StyleResponse.from_domain(await service.get_style(style_id))


@router.put(
    "/{style_id}",
    summary="Update a style",
    responses={
        200: {"description": "Style updated"},
        400: {"description": "Malformed id or invalid file"},
        404: {"description": "Style not found"},
    },
)
async def update_style(  # NOQA: PLR0913
    style_id: StyleId,
    _user: CurrentUser,
    service: StyleServiceDep,
    name: Annotated[StyleName | None, Form()] = None,
    category: Annotated[StyleCategory | None, Form()] = None,
    description: Annotated[StyleDescription | None, Form()] = None,
    style_image: Annotated[UploadFile | None, File(alias=STYLE_IMAGE_FIELD)] = None,
) -> StyleResponse:
    """
    Partially update a style.

    A new image is uploaded first. The previous image is deleted only after
    the update has been saved.
    """
    changes = {
        key: value
        for key, value in (
            ("name", name),
            ("category", category),
            ("description", description),
        )
        if value is not None
    }
    style = await service.update_style(
        style_id,
        changes,
        image=await _read_upload(style_image),
    )
    return StyleResponse.from_domain(style)


@router.delete(
    "/{style_id}",
    summary="Delete a style",
    responses={
        200: {"description": "Style removed"},
        404: {"description": "Style not found"},
    },
)
async def delete_style(
    style_id: StyleId,
    _user: CurrentUser,
    service: StyleServiceDep,
) -> MessageResponse:
    """Delete the style, unlink it from all clients and drop its image."""
    await service.delete_style(style_id)
    return MessageResponse(message="Style removed successfully")
