"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. ATELIER_ENV_FILE environment variable (path to a .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import SecretStr, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. ATELIER_ENV_FILE env var (absolute or relative to the project root)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("ATELIER_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - app fails without these)
    jwt_access_secret: SecretStr
    jwt_refresh_secret: SecretStr

    # Application
    app_name: str = "Atelier"
    environment: Literal["development", "production"] = "production"

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/atelier.db"

    # API (API_ prefix)
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_cors_origins: str = ""  # Empty = no CORS allowed
    api_cookie_secure: bool = True
    api_cookie_samesite: Literal["lax", "strict", "none"] = "strict"
    api_cookie_domain: str | None = None

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> str:
        """Ensure cors_origins is stored as comma-separated string."""
        if isinstance(v, list):
            return ",".join(v)
        return str(v) if v else ""

    # JWT
    jwt_access_token_expire_minutes: int = 15
    jwt_refresh_token_expire_days: int = 7

    # Password hashing
    bcrypt_rounds: int = 12

    # Google OAuth (GOOGLE_ prefix)
    google_client_id: str = ""
    google_client_secret: SecretStr | None = None
    google_callback_url: str = "http://localhost:8000/api/v1/auth/google/callback"
    oauth_allowed_domain: str | None = None
    oauth_timeout_seconds: float = 10.0

    # Frontend URL (OAuth redirect target)
    frontend_base_url: str = "http://localhost:3000"

    # Cloudinary (CLOUDINARY_ prefix)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: SecretStr | None = None
    cloudinary_folder: str = "fashion_styles"
    cloudinary_timeout_seconds: float = 30.0
    max_image_size_bytes: int = 5 * 1024 * 1024

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator("api_cookie_domain", "oauth_allowed_domain", mode="before")
    @classmethod
    def _blank_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _validate_jwt_secrets(self) -> Settings:
        access = self.jwt_access_secret.get_secret_value()
        refresh = self.jwt_refresh_secret.get_secret_value()
        if not access or not refresh:
            msg = "JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must not be empty"
            raise ValueError(msg)
        if access == refresh:
            msg = "JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ"
            raise ValueError(msg)
        return self

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def google_oauth_enabled(self) -> bool:
        """Google login is offered only when both client credentials are set."""
        return bool(self.google_client_id and self.google_client_secret)

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret,
        )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    Required fields (jwt_access_secret, jwt_refresh_secret) must be
    provided via environment variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
