"""Client router: customer records, measurements and linked styles."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status

from atelier.domain.shared import parse_id
from atelier.presentation.api.dependencies import (
    ClientId,
    ClientServiceDep,
    CurrentUser,
    DBSession,
)
from atelier.presentation.api.schemas.clients import (
    ClientCreateRequest,
    ClientResponse,
    ClientUpdateRequest,
    LinkStyleRequest,
)
from atelier.presentation.api.schemas.common import MessageResponse
from atelier.presentation.api.schemas.styles import StyleResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a client",
    responses={
        201: {"description": "Client created"},
        401: {"description": "Not authenticated"},
        422: {"description": "Invalid input"},
    },
)
async def create_client(
    request: ClientCreateRequest,
    _user: CurrentUser,
    service: ClientServiceDep,
    session: DBSession,
) -> ClientResponse:
    view = await service.create_client(
        name=request.name,
        phone=request.phone,
        email=request.email,
        event_type=request.event_type,
        measurements=[m.to_domain() for m in request.measurements],
    )
    await session.commit()
    return ClientResponse.from_view(view)


@router.get(
    "",
    summary="List clients",
    responses={
        200: {"description": "Clients with their linked styles"},
        401: {"description": "Not authenticated"},
    },
)
async def list_clients(
    _user: CurrentUser,
    service: ClientServiceDep,
    name: Annotated[
        str | None,
        Query(description="Case-insensitive name filter"),
    ] = None,
    event_type: Annotated[
        str | None,
        Query(alias="eventType", description="Case-insensitive event type filter"),
    ] = None,
) -> list[ClientResponse]:
    """List clients, optionally filtered by name and event type substrings."""
    views = await service.list_clients(name=name, event_type=event_type)
    return [ClientResponse.from_view(v) for v in views]


@router.get(
    "/{client_id}",
    summary="Get a client",
    responses={
        200: {"description": "Client with linked styles"},
        400: {"description": "Malformed client id"},
        404: {"description": "Client not found"},
    },
)
async def get_client(
    client_id: ClientId,
    _user: CurrentUser,
    service: ClientServiceDep,
) -> ClientResponse:
    return ClientResponse.from_view(await service.get_client(client_id))


@router.put(
    "/{client_id}",
    summary="Update a client",
    responses={
        200: {"description": "Client updated"},
        400: {"description": "Malformed client id or invalid values"},
        404: {"description": "Client not found"},
    },
)
async def update_client(
    client_id: ClientId,
    request: ClientUpdateRequest,
    _user: CurrentUser,
    service: ClientServiceDep,
    session: DBSession,
) -> ClientResponse:
    """
    Partially update a client.

    Omitted fields keep their value. An empty string clears an optional
    field.
    """
    view = await service.update_client(client_id, request.to_changes())
    await session.commit()
    return ClientResponse.from_view(view)


@router.delete(
    "/{client_id}",
    summary="Delete a client",
    responses={
        200: {"description": "Client removed"},
        404: {"description": "Client not found"},
    },
)
async def delete_client(
    client_id: ClientId,
    _user: CurrentUser,
    service: ClientServiceDep,
    session: DBSession,
) -> MessageResponse:
    await service.delete_client(client_id)
    await session.commit()
    return MessageResponse(message="Client removed")


@router.post(
    "/{client_id}/styles",
    summary="Link a style to a client",
    responses={
        200: {"description": "Client with the style linked"},
        400: {"description": "Malformed id or style already linked"},
        404: {"description": "Client or style not found"},
    },
)
async def link_style(
    client_id: ClientId,
    request: LinkStyleRequest,
    _user: CurrentUser,
    service: ClientServiceDep,
    session: DBSession,
) -> ClientResponse:
    style_id = parse_id(request.style_id, "style_id")
    view = await service.link_style(client_id, style_id)
    await session.commit()
    return ClientResponse.from_view(view)


@router.get(
    "/{client_id}/styles",
    summary="List a client's styles",
    responses={
        200: {"description": "Styles linked to the client"},
        404: {"description": "Client not found"},
    },
)
async def list_client_styles(
    client_id: ClientId,
    _user: CurrentUser,
    service: ClientServiceDep,
) -> list[StyleResponse]:
    styles = await service.list_client_styles(client_id)
    return [StyleResponse.from_domain(s) for s in styles]
