"""Application services."""

from atelier.application.services.admin_service import AdminService, DashboardStats
from atelier.application.services.authentication_service import (
    AuthenticationService,
    AuthSession,
)
from atelier.application.services.client_service import ClientService, ClientView
from atelier.application.services.style_service import StyleService

__all__ = [
    "AdminService",
    "AuthSession",
    "AuthenticationService",
    "ClientService",
    "ClientView",
    "DashboardStats",
    "StyleService",
]
