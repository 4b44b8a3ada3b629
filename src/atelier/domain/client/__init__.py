"""Client domain: customers, their measurements and linked styles."""

from atelier.domain.client.client import Client, Measurement
from atelier.domain.client.repository import ClientRepository

__all__ = [
    "Client",
    "ClientRepository",
    "Measurement",
]
