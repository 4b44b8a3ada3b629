"""Unit tests for Settings."""

import pytest
from pydantic import ValidationError

from atelier_config.settings import Settings

SECRETS = {
    "jwt_access_secret": "access-secret",
    "jwt_refresh_secret": "refresh-secret",
}


class TestSettings:
    def test_defaults(self):
        settings = Settings(**SECRETS)

        assert settings.jwt_access_token_expire_minutes == 15
        assert settings.jwt_refresh_token_expire_days == 7
        assert settings.api_cookie_samesite == "strict"
        assert settings.cloudinary_folder == "fashion_styles"

    def test_secrets_must_differ(self):
        with pytest.raises(ValidationError, match="must differ"):
            Settings(jwt_access_secret="same", jwt_refresh_secret="same")

    def test_secrets_must_not_be_empty(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            Settings(jwt_access_secret="", jwt_refresh_secret="refresh")

    def test_cors_origins_parsed(self):
        settings = Settings(
            **SECRETS,
            api_cors_origins="http://localhost:3000, https://atelier.example.com",
        )

        assert settings.cors_origins == [
            "http://localhost:3000",
            "https://atelier.example.com",
        ]

    def test_cors_origins_from_list(self):
        settings = Settings(
            **SECRETS,
            api_cors_origins=["http://a.test", "http://b.test"],
        )
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_google_oauth_enabled_needs_both_credentials(self):
        assert not Settings(**SECRETS, google_client_id="id").google_oauth_enabled
        assert Settings(
            **SECRETS,
            google_client_id="id",
            google_client_secret="secret",
        ).google_oauth_enabled

    def test_cloudinary_configured(self):
        assert not Settings(**SECRETS).cloudinary_configured
        assert Settings(
            **SECRETS,
            cloudinary_cloud_name="demo",
            cloudinary_api_key="key",
            cloudinary_api_secret="secret",
        ).cloudinary_configured

    def test_environment_flag(self):
        assert Settings(**SECRETS, environment="development").is_development
        assert not Settings(**SECRETS).is_development

    def test_blank_optional_values_are_unset(self):
        settings = Settings(**SECRETS, api_cookie_domain="", oauth_allowed_domain=" ")

        assert settings.api_cookie_domain is None
        assert settings.oauth_allowed_domain is None
