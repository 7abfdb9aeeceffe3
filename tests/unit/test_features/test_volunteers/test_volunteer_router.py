"""HTTP tests for the volunteers router."""

from __future__ import annotations

import pytest

from volunteer_service.features.volunteers.exceptions import PublishFailureError

API = "/api/v1/volunteers"

JANE = {
    "name": "Jane",
    "phone": "0711000111",
    "email": "jane@x.com",
    "ward": "Kibra",
    "interest": "Health",
}


async def _register(client, **overrides) -> dict:
    response = await client.post(API, json={**JANE, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


# ──────────────────────────────────────────────────────────────
# Registration
# ──────────────────────────────────────────────────────────────


@pytest.mark.unit
class TestRegisterEndpoint:
    """Tests for POST /volunteers."""

    @pytest.mark.asyncio
    async def test_register_returns_created(self, client, publisher):
        response = await client.post(API, json=JANE)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 1
        assert data["status"] == "ACTIVE"
        assert data["phone"] == "0711000111"
        assert "created_at" in data
        publisher.publish.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_phone_is_conflict(self, client):
        await _register(client)

        response = await client.post(API, json={**JANE, "name": "Other"})

        assert response.status_code == 409
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["type"] == "duplicate-registration"
        assert body["status"] == 409
        assert body["detail"] == "Phone number already registered!"
        assert body["kind"] == "DUPLICATE_REGISTRATION"

    @pytest.mark.asyncio
    async def test_publish_failure_does_not_change_response(self, client, publisher):
        publisher.publish.side_effect = PublishFailureError(1, "volunteer-events", "down")

        response = await client.post(API, json=JANE)

        assert response.status_code == 201
        assert response.json()["id"] == 1

    @pytest.mark.asyncio
    async def test_missing_fields_is_validation_problem(self, client):
        response = await client.post(API, json={"name": "Jane"})

        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["type"] == "validation-error"
        fields = {e["field"] for e in body["errors"]}
        assert {"body.phone", "body.ward"} <= fields

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.post(
            API, json={**JANE, "phone": "0799"}, headers={"X-Request-ID": "req-123"}
        )

        assert response.status_code == 422
        assert response.headers["x-request-id"] == "req-123"
        assert response.json()["request_id"] == "req-123"


# ──────────────────────────────────────────────────────────────
# Queries
# ──────────────────────────────────────────────────────────────


@pytest.mark.unit
class TestQueryEndpoints:
    """Tests for the read endpoints."""

    @pytest.fixture
    async def roster(self, client):
        await _register(client, name="Jane", phone="0711000111", ward="Kibra")
        otieno = await _register(client, name="Otieno", phone="0711000112", ward="Kibra")
        await _register(client, name="Achieng", phone="0711000113", ward="Langata")
        response = await client.put(f"{API}/{otieno['id']}/status", params={"status": "INACTIVE"})
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_get_by_id(self, client):
        created = await _register(client)

        response = await client.get(f"{API}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "Jane"

    @pytest.mark.asyncio
    async def test_get_unknown_is_not_found(self, client):
        response = await client.get(f"{API}/404")

        assert response.status_code == 404
        body = response.json()
        assert body["type"] == "volunteer-not-found"
        assert body["volunteer_id"] == 404

    @pytest.mark.asyncio
    async def test_paginated_list(self, client, roster):
        response = await client.get(API, params={"limit": 2})

        data = response.json()
        assert data["total"] == 3
        assert data["limit"] == 2
        assert data["has_next"] is True
        assert [v["name"] for v in data["items"]] == ["Jane", "Otieno"]

    @pytest.mark.asyncio
    async def test_list_filtered_by_status(self, client, roster):
        response = await client.get(API, params={"status": "INACTIVE"})

        assert [v["name"] for v in response.json()["items"]] == ["Otieno"]

    @pytest.mark.asyncio
    async def test_list_limit_is_bounded(self, client):
        response = await client.get(API, params={"limit": 1000})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_active(self, client, roster):
        response = await client.get(f"{API}/active")

        assert [v["name"] for v in response.json()] == ["Jane", "Achieng"]

    @pytest.mark.asyncio
    async def test_active_by_ward(self, client, roster):
        response = await client.get(f"{API}/active/ward/Kibra")

        assert [v["name"] for v in response.json()] == ["Jane"]

    @pytest.mark.asyncio
    async def test_by_ward(self, client, roster):
        response = await client.get(f"{API}/ward/Kibra")

        assert [v["name"] for v in response.json()] == ["Jane", "Otieno"]

    @pytest.mark.asyncio
    async def test_by_status(self, client, roster):
        response = await client.get(f"{API}/status/INACTIVE")

        assert [v["name"] for v in response.json()] == ["Otieno"]

    @pytest.mark.asyncio
    async def test_unknown_status_is_validation_error(self, client):
        response = await client.get(f"{API}/status/RETIRED")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_active_count(self, client, roster):
        response = await client.get(f"{API}/stats/active-count")

        assert response.json() == {"count": 2, "ward": None, "status": "ACTIVE"}

    @pytest.mark.asyncio
    async def test_ward_count(self, client, roster):
        response = await client.get(f"{API}/stats/ward/Langata")

        assert response.json() == {"count": 1, "ward": "Langata", "status": None}


# ──────────────────────────────────────────────────────────────
# Administration
# ──────────────────────────────────────────────────────────────


@pytest.mark.unit
class TestAdministrationEndpoints:
    """Tests for status changes, profile updates and deletion."""

    @pytest.mark.asyncio
    async def test_change_status(self, client, publisher):
        created = await _register(client)
        publisher.publish.reset_mock()

        response = await client.put(f"{API}/{created['id']}/status", params={"status": "SUSPENDED"})

        assert response.status_code == 200
        assert response.json()["status"] == "SUSPENDED"
        assert (await client.get(f"{API}/{created['id']}")).json()["status"] == "SUSPENDED"
        publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_change_status_unknown_volunteer(self, client):
        response = await client.put(f"{API}/99/status", params={"status": "SUSPENDED"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_change_status_requires_status(self, client):
        created = await _register(client)

        response = await client.put(f"{API}/{created['id']}/status")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_patch_profile(self, client):
        created = await _register(client)

        response = await client.patch(f"{API}/{created['id']}", json={"ward": "Langata"})

        assert response.status_code == 200
        assert response.json()["ward"] == "Langata"
        assert response.json()["name"] == "Jane"

    @pytest.mark.asyncio
    async def test_patch_to_taken_phone_is_conflict(self, client):
        await _register(client)
        other = await _register(client, name="Otieno", phone="0722000222")

        response = await client.patch(f"{API}/{other['id']}", json={"phone": "0711000111"})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete(self, client):
        created = await _register(client)

        response = await client.delete(f"{API}/{created['id']}")

        assert response.status_code == 204
        assert (await client.get(f"{API}/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown(self, client):
        response = await client.delete(f"{API}/12")

        assert response.status_code == 404
