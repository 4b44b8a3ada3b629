"""REST API presentation layer for Atelier.

Structure:
    api/
    ├── app.py                # FastAPI application factory
    ├── dependencies.py       # Dependency injection
    ├── exception_handlers.py # Error normalization and rendering
    ├── routers/              # API route handlers
    └── schemas/              # Pydantic request/response schemas
"""

from atelier.presentation.api.app import create_app

__all__ = ["create_app"]
