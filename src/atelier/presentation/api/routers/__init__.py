from atelier.presentation.api.routers.admin import router as admin_router
from atelier.presentation.api.routers.auth import router as auth_router
from atelier.presentation.api.routers.clients import router as clients_router
from atelier.presentation.api.routers.styles import router as styles_router

__all__ = [
    "admin_router",
    "auth_router",
    "clients_router",
    "styles_router",
]
