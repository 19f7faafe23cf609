"""Tests for the customer CRUD endpoints."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.core.constants import (
    ACCOUNT_NUMBER_EXISTS_MESSAGE,
    CUSTOMER_NOT_FOUND_MESSAGE,
    UNAUTHORIZED_MESSAGE,
)


def _create(client: TestClient, **overrides) -> dict:
    payload = {"name": "Alice Rahman", "account_number": "1001", "phone": "01711000000"}
    payload.update(overrides)
    response = client.post("/api/customers", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_requires_session(client: TestClient) -> None:
    response = client.get("/api/customers")
    assert response.status_code == 401
    assert response.json() == {"error": UNAUTHORIZED_MESSAGE}


class TestCreate:
    def test_create(self, auth_client: TestClient, current_user_id: str) -> None:
        customer = _create(auth_client, nominee="  ", notes="VIP", status="lead")

        assert customer["name"] == "Alice Rahman"
        assert customer["status"] == "lead"
        assert customer["nominee"] is None
        assert customer["notes"] == "VIP"
        assert customer["created_by"] == current_user_id

    def test_unknown_status_defaults_to_active(self, auth_client: TestClient) -> None:
        assert _create(auth_client, status="archived")["status"] == "active"

    def test_duplicate_account_number(self, auth_client: TestClient) -> None:
        _create(auth_client)

        response = auth_client.post(
            "/api/customers",
            json={"name": "Bob", "account_number": "1001", "phone": "555"},
        )

        assert response.status_code == 409
        assert response.json() == {"error": ACCOUNT_NUMBER_EXISTS_MESSAGE}

    def test_missing_required_field(self, auth_client: TestClient) -> None:
        response = auth_client.post("/api/customers", json={"name": "Bob", "phone": "555"})

        assert response.status_code == 400
        assert "account_number" in response.json()["error"]


class TestReadUpdateDelete:
    def test_get(self, auth_client: TestClient) -> None:
        customer = _create(auth_client)

        response = auth_client.get(f"/api/customers/{customer['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == customer

    def test_get_missing(self, auth_client: TestClient) -> None:
        response = auth_client.get(f"/api/customers/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": CUSTOMER_NOT_FOUND_MESSAGE}

    def test_partial_update(self, auth_client: TestClient) -> None:
        """Only fields present in the body change."""
        customer = _create(auth_client, nominee="Karim")

        response = auth_client.put(
            f"/api/customers/{customer['id']}",
            json={"phone": "999", "status": "inactive"},
        )

        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated["phone"] == "999"
        assert updated["status"] == "inactive"
        assert updated["name"] == customer["name"]
        assert updated["nominee"] == "Karim"

    def test_update_to_taken_account_number(self, auth_client: TestClient) -> None:
        _create(auth_client, account_number="1001")
        second = _create(auth_client, account_number="1002")

        response = auth_client.put(
            f"/api/customers/{second['id']}",
            json={"account_number": "1001"},
        )

        assert response.status_code == 409
        unchanged = auth_client.get(f"/api/customers/{second['id']}").json()["data"]
        assert unchanged["account_number"] == "1002"

    def test_update_missing(self, auth_client: TestClient) -> None:
        response = auth_client.put(f"/api/customers/{uuid4()}", json={"phone": "1"})
        assert response.status_code == 404

    def test_delete(self, auth_client: TestClient) -> None:
        customer = _create(auth_client)

        response = auth_client.delete(f"/api/customers/{customer['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert auth_client.get(f"/api/customers/{customer['id']}").status_code == 404
        assert auth_client.delete(f"/api/customers/{customer['id']}").status_code == 404


class TestList:
    @pytest.fixture
    def seeded(self, auth_client: TestClient) -> TestClient:
        _create(auth_client, name="Alice Rahman", account_number="1001", phone="0171")
        _create(auth_client, name="Bob Karim", account_number="1002", phone="0181", nid="55_01")
        _create(auth_client, name="Carol", account_number="2001", phone="0191", nominee="Alicia")
        return auth_client

    def test_pagination(self, seeded: TestClient) -> None:
        body = seeded.get("/api/customers", params={"page": 2, "limit": 2}).json()

        assert len(body["data"]) == 1
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "totalPages": 2}

    def test_search_is_case_insensitive_across_columns(self, seeded: TestClient) -> None:
        """Name and nominee both match."""
        body = seeded.get("/api/customers", params={"search": "ALI"}).json()

        assert sorted(c["account_number"] for c in body["data"]) == ["1001", "2001"]
        assert body["pagination"]["total"] == 2

    def test_search_account_number(self, seeded: TestClient) -> None:
        body = seeded.get("/api/customers", params={"search": "100"}).json()
        assert body["pagination"]["total"] == 2

    def test_search_wildcards_are_literal(self, seeded: TestClient) -> None:
        assert seeded.get("/api/customers", params={"search": "%"}).json()["data"] == []
        body = seeded.get("/api/customers", params={"search": "5_0"}).json()
        assert [c["account_number"] for c in body["data"]] == ["1002"]

    def test_limit_bounds(self, seeded: TestClient) -> None:
        assert seeded.get("/api/customers", params={"limit": 0}).status_code == 400
        assert seeded.get("/api/customers", params={"limit": 101}).status_code == 400
