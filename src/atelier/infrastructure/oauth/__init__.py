"""OAuth provider adapters."""

from atelier.infrastructure.oauth.google_client import GoogleOAuthClient

__all__ = ["GoogleOAuthClient"]
