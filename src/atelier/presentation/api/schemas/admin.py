"""Admin schemas."""

from pydantic import BaseModel


class StatsResponse(BaseModel):
    users: int
    clients: int
    styles: int
    message: str
