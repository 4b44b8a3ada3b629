"""Integration tests for client endpoints."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from tests.shared.fixtures.api import create_client, create_style

pytestmark = pytest.mark.integration


class TestCreateClient:
    """Tests for POST /api/v1/clients."""

    def test_create_client(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        data = create_client(
            test_client,
            auth_headers,
            email="Amaka@Example.com",
            eventType="Wedding",
            measurements=[
                {"name": "Waist", "value": "30in"},
                {"name": "Hip", "value": "40in"},
            ],
        )

        assert data["name"] == "Amaka Eze"
        assert data["email"] == "amaka@example.com"
        assert data["eventType"] == "Wedding"
        assert [m["name"] for m in data["measurements"]] == ["Waist", "Hip"]
        assert data["styles"] == []

    def test_requires_authentication(self, test_client: TestClient, api_v1_prefix: str):
        response = test_client.post(
            f"{api_v1_prefix}/clients",
            json={"name": "Amaka Eze", "phone": "0803 123 4567"},
        )
        assert response.status_code == 401

    def test_missing_phone_is_rejected(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        response = test_client.post(
            f"{api_v1_prefix}/clients",
            json={"name": "Amaka Eze"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["status"] == "fail"
        assert [e["field"] for e in body["errors"]] == ["phone"]

        listed = test_client.get(f"{api_v1_prefix}/clients", headers=auth_headers)
        assert listed.json() == []

    @pytest.mark.parametrize("phone", ["", "   ", "call me", "abc-123"])
    def test_invalid_phone(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
        phone: str,
    ):
        response = test_client.post(
            f"{api_v1_prefix}/clients",
            json={"name": "Amaka Eze", "phone": phone},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_markup_is_escaped(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        data = create_client(
            test_client,
            auth_headers,
            name="Alice <Wonderland>",
        )
        assert data["name"] == "Alice &lt;Wonderland&gt;"

        fetched = test_client.get(
            f"{api_v1_prefix}/clients/{data['id']}",
            headers=auth_headers,
        )
        assert fetched.json()["name"] == "Alice &lt;Wonderland&gt;"


class TestListClients:
    """Tests for GET /api/v1/clients."""

    def test_filters(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        create_client(test_client, auth_headers, eventType="Wedding")
        create_client(
            test_client,
            auth_headers,
            name="Bola Ade",
            eventType="Gala",
        )

        by_name = test_client.get(
            f"{api_v1_prefix}/clients",
            params={"name": "bola"},
            headers=auth_headers,
        )
        by_event = test_client.get(
            f"{api_v1_prefix}/clients",
            params={"eventType": "wedding"},
            headers=auth_headers,
        )
        everything = test_client.get(f"{api_v1_prefix}/clients", headers=auth_headers)

        assert [c["name"] for c in by_name.json()] == ["Bola Ade"]
        assert [c["name"] for c in by_event.json()] == ["Amaka Eze"]
        assert len(everything.json()) == 2


class TestClientById:
    """Tests for GET/PUT/DELETE /api/v1/clients/{client_id}."""

    def test_malformed_id(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        response = test_client.get(
            f"{api_v1_prefix}/clients/not-an-id",
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid client_id: not-an-id."

    def test_unknown_id(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        response = test_client.get(
            f"{api_v1_prefix}/clients/{uuid4()}",
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Client not found"

    def test_partial_update(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        created = create_client(
            test_client,
            auth_headers,
            eventType="Wedding",
            measurements=[{"name": "Waist", "value": "30in"}],
        )

        response = test_client.put(
            f"{api_v1_prefix}/clients/{created['id']}",
            json={"phone": "0803 000 0000"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["phone"] == "0803 000 0000"
        assert data["name"] == "Amaka Eze"
        assert data["eventType"] == "Wedding"
        assert data["measurements"] == [{"name": "Waist", "value": "30in"}]

    def test_update_replaces_measurements(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        created = create_client(
            test_client,
            auth_headers,
            measurements=[{"name": "Waist", "value": "30in"}],
        )

        response = test_client.put(
            f"{api_v1_prefix}/clients/{created['id']}",
            json={"measurements": [{"name": "Chest", "value": "38in"}]},
            headers=auth_headers,
        )

        assert response.json()["measurements"] == [{"name": "Chest", "value": "38in"}]

    def test_delete(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        created = create_client(test_client, auth_headers)
        url = f"{api_v1_prefix}/clients/{created['id']}"

        response = test_client.delete(url, headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Client removed"}

        assert test_client.get(url, headers=auth_headers).status_code == 404
        assert test_client.delete(url, headers=auth_headers).status_code == 404


class TestClientStyles:
    """Tests for /api/v1/clients/{client_id}/styles."""

    def test_link_and_list(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        client = create_client(test_client, auth_headers)
        first = create_style(test_client, auth_headers, name="Kaftan")
        second = create_style(test_client, auth_headers, name="Agbada")
        url = f"{api_v1_prefix}/clients/{client['id']}/styles"

        for style in (first, second):
            response = test_client.post(
                url,
                json={"styleId": style["id"]},
                headers=auth_headers,
            )
            assert response.status_code == 200

        assert [s["name"] for s in response.json()["styles"]] == ["Kaftan", "Agbada"]

        listed = test_client.get(url, headers=auth_headers)
        assert [s["id"] for s in listed.json()] == [first["id"], second["id"]]

    def test_link_twice(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        client = create_client(test_client, auth_headers)
        style = create_style(test_client, auth_headers)
        url = f"{api_v1_prefix}/clients/{client['id']}/styles"

        test_client.post(url, json={"styleId": style["id"]}, headers=auth_headers)
        response = test_client.post(
            url,
            json={"styleId": style["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Style already linked to this client"
        assert len(test_client.get(url, headers=auth_headers).json()) == 1

    def test_link_unknown_style(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        client = create_client(test_client, auth_headers)

        response = test_client.post(
            f"{api_v1_prefix}/clients/{client['id']}/styles",
            json={"styleId": str(uuid4())},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Style not found"

    def test_link_malformed_style_id(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        client = create_client(test_client, auth_headers)

        response = test_client.post(
            f"{api_v1_prefix}/clients/{client['id']}/styles",
            json={"styleId": "abc"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid style_id: abc."

    def test_styles_of_unknown_client(
        self,
        test_client: TestClient,
        auth_headers: dict,
        api_v1_prefix: str,
    ):
        response = test_client.get(
            f"{api_v1_prefix}/clients/{uuid4()}/styles",
            headers=auth_headers,
        )
        assert response.status_code == 404
