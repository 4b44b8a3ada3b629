"""Client schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import ConfigDict, Field, StringConstraints

from atelier.application.services import ClientView
from atelier.domain.client import Measurement
from atelier.domain.client.client import PHONE_PATTERN
from atelier.presentation.api.schemas.common import CamelModel, sanitized
from atelier.presentation.api.schemas.styles import StyleResponse

ClientName = sanitized(min_length=1, max_length=100)
Phone = sanitized(min_length=1, max_length=30, pattern=PHONE_PATTERN.pattern)
EventType = sanitized(max_length=100)
MeasurementText = sanitized(min_length=1, max_length=50)
# Empty string is allowed and clears the stored email
OptionalEmail = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        to_lower=True,
        max_length=255,
        pattern=r"^(\S+@\S+\.\S+)?$",
    ),
]


class MeasurementSchema(CamelModel):
    name: MeasurementText
    value: MeasurementText

    def to_domain(self) -> Measurement:
        return Measurement(name=self.name, value=self.value)


class ClientCreateRequest(CamelModel):
    """Request schema for creating a client."""

    name: ClientName = Field(..., description="Client's full name")
    phone: Phone = Field(..., description="Contact phone number")
    email: OptionalEmail | None = None
    event_type: EventType | None = Field(None, description="e.g. Wedding, Gala")
    measurements: list[MeasurementSchema] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Amaka Eze",
                "phone": "+234 803 123 4567",
                "email": "amaka@example.com",
                "eventType": "Wedding",
                "measurements": [{"name": "Waist", "value": "30in"}],
            },
        },
    )


class ClientUpdateRequest(CamelModel):
    """Partial client update. Omitted fields keep their value."""

    name: ClientName | None = None
    phone: Phone | None = None
    email: OptionalEmail | None = None
    event_type: EventType | None = None
    measurements: list[MeasurementSchema] | None = None

    def to_changes(self) -> dict:
        changes = self.model_dump(exclude_unset=True)
        if "measurements" in changes:
            changes["measurements"] = [
                m.to_domain() for m in self.measurements or []
            ]
        return changes


class LinkStyleRequest(CamelModel):
    # Kept as a string so malformed ids surface as 400, not 422
    style_id: str = Field(..., description="Id of the style to link")


class MeasurementResponse(CamelModel):
    name: str
    value: str


class ClientResponse(CamelModel):
    id: UUID
    name: str
    phone: str
    email: str | None = None
    event_type: str | None = None
    measurements: list[MeasurementResponse]
    styles: list[StyleResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: ClientView) -> "ClientResponse":
        client = view.client
        return cls(
            id=client.id,
            name=client.name,
            phone=client.phone,
            email=client.email,
            event_type=client.event_type,
            measurements=[
                MeasurementResponse(name=m.name, value=m.value)
                for m in client.measurements
            ],
            styles=[StyleResponse.from_domain(s) for s in view.styles],
            created_at=client.created_at,
            updated_at=client.updated_at,
        )
