"""Integration tests for admin endpoints."""

import pytest
from fastapi.testclient import TestClient

from tests.shared.fixtures.api import create_client, promote_to_admin

pytestmark = pytest.mark.integration


class TestAdminStats:
    """Tests for GET /api/v1/admin/stats."""

    def test_regular_user_is_forbidden(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        response = test_client.get(
            f"{api_v1_prefix}/admin/stats",
            headers=auth_headers,
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Not authorized as an admin"

    def test_anonymous_is_unauthorized(self, test_client: TestClient, api_v1_prefix):
        assert test_client.get(f"{api_v1_prefix}/admin/stats").status_code == 401

    def test_promoted_user(
        self,
        test_client: TestClient,
        app,
        registered_user: dict,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        create_client(test_client, auth_headers)
        promote_to_admin(test_client, app, registered_user["email"])

        # The same token works once the flag is set in the database
        response = test_client.get(
            f"{api_v1_prefix}/admin/stats",
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["users"] == 1
        assert data["clients"] == 1
        assert data["styles"] == 0
        assert data["message"].startswith("Admin dashboard data")


class TestAdminUsers:
    """Tests for GET /api/v1/admin/users."""

    def test_lists_users_without_secrets(
        self,
        test_client: TestClient,
        registered_user: dict,
        admin_headers: dict,
        api_v1_prefix: str,
    ):
        response = test_client.get(
            f"{api_v1_prefix}/admin/users",
            headers=admin_headers,
        )

        assert response.status_code == 200
        users = response.json()
        assert sorted(u["email"] for u in users) == [
            "ada@example.com",
            "boss@example.com",
        ]
        for user in users:
            assert "password" not in user
            assert "passwordHash" not in user
            assert "refreshToken" not in user
