"""Tests for the warranty status and registration endpoints."""

from typing import Any

import pytest
from httpx import AsyncClient


async def create_asset(client: AsyncClient, headers: dict[str, str], name: str = "ThinkPad X1 Carbon") -> int:
    response = await client.post(
        "/api/v1/assets/",
        json={"name": name, "cost": 1899.99, "serial_number": "PF3XK2A9"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestWarrantyStatusList:
    """Tests for GET /warranties/status."""

    @pytest.mark.asyncio
    async def test_badges_for_own_assets(
        self,
        asset_tracker_client: AsyncClient,
        warranty_service: Any,
        user_headers: dict[str, str],
        admin_headers: dict[str, str],
    ) -> None:
        registered = await create_asset(asset_tracker_client, user_headers, "Laptop")
        unchecked = await create_asset(asset_tracker_client, user_headers, "Monitor")
        await create_asset(asset_tracker_client, admin_headers, "Server")

        await asset_tracker_client.post(f"/api/v1/warranties/register/{registered}", headers=user_headers)
        warranty_service.failing_ids.add(str(unchecked))

        response = await asset_tracker_client.get("/api/v1/warranties/status", headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["failed"] == 1

        badges = {item["asset_id"]: item for item in data["items"]}
        assert badges[registered]["badge"] == "registered"
        assert badges[registered]["offers_registration"] is False
        assert badges[unchecked]["badge"] == "unknown"
        assert badges[unchecked]["status"]["error"] is True

    @pytest.mark.asyncio
    async def test_unregistered_asset_offers_registration(
        self,
        asset_tracker_client: AsyncClient,
        user_headers: dict[str, str],
    ) -> None:
        await create_asset(asset_tracker_client, user_headers)

        response = await asset_tracker_client.get("/api/v1/warranties/status", headers=user_headers)

        item = response.json()["items"][0]
        assert item["badge"] == "not_registered"
        assert item["label"] == "Not Registered"
        assert item["offers_registration"] is True

    @pytest.mark.asyncio
    async def test_expiring_soon(
        self,
        asset_tracker_client: AsyncClient,
        warranty_service: Any,
        user_headers: dict[str, str],
    ) -> None:
        asset_id = await create_asset(asset_tracker_client, user_headers)
        warranty_service.status_overrides[str(asset_id)] = {
            "is_registered": True,
            "status": "registered",
            "days_until_expiry": 12,
        }

        response = await asset_tracker_client.get("/api/v1/warranties/status", headers=user_headers)

        item = response.json()["items"][0]
        assert item["badge"] == "expiring_soon"
        assert item["label"] == "Expiring Soon (12 days)"

    @pytest.mark.asyncio
    async def test_all_scope_requires_admin(
        self,
        asset_tracker_client: AsyncClient,
        user_headers: dict[str, str],
    ) -> None:
        response = await asset_tracker_client.get(
            "/api/v1/warranties/status",
            params={"scope": "all"},
            headers=user_headers,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_all_scope_for_admin(
        self,
        asset_tracker_client: AsyncClient,
        user_headers: dict[str, str],
        admin_headers: dict[str, str],
    ) -> None:
        await create_asset(asset_tracker_client, user_headers, "Laptop")
        await create_asset(asset_tracker_client, admin_headers, "Server")

        response = await asset_tracker_client.get(
            "/api/v1/warranties/status",
            params={"scope": "all"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["total"] == 2

    @pytest.mark.asyncio
    async def test_single_asset_status(
        self,
        asset_tracker_client: AsyncClient,
        warranty_service: Any,
        user_headers: dict[str, str],
    ) -> None:
        asset_id = await create_asset(asset_tracker_client, user_headers)
        warranty_service.status_overrides[str(asset_id)] = {
            "is_registered": True,
            "status": "expired",
            "days_until_expiry": -3,
        }

        response = await asset_tracker_client.get(f"/api/v1/warranties/status/{asset_id}", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["badge"] == "expired"


class TestRegisterWarranty:
    """Tests for POST /warranties/register/{asset_id}."""

    @pytest.mark.asyncio
    async def test_register(
        self,
        asset_tracker_client: AsyncClient,
        warranty_service: Any,
        store: Any,
        user_headers: dict[str, str],
    ) -> None:
        department = store.create_department("Engineering")
        response = await asset_tracker_client.post(
            "/api/v1/assets/",
            json={"name": "Laptop", "cost": 1200, "department_id": department["id"]},
            headers=user_headers,
        )
        asset_id = response.json()["id"]

        response = await asset_tracker_client.post(
            f"/api/v1/warranties/register/{asset_id}",
            json={"warranty_duration_months": 24},
            headers=user_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["result"]["success"] is True
        assert data["recovered_duplicate"] is False
        assert data["warranty"]["badge"] == "registered"
        assert data["warranty"]["days_until_expiry"] == 720

        payload = warranty_service.registration_payloads[0]
        assert payload["id"] == asset_id
        assert payload["department"] == "Engineering"
        assert payload["category"] == ""
        assert payload["created_by"] == "Jane Doe"
        assert payload["registered_by_name"] == "Jane Doe"
        assert payload["warranty_duration_months"] == 24

    @pytest.mark.asyncio
    async def test_default_duration(
        self,
        asset_tracker_client: AsyncClient,
        warranty_service: Any,
        user_headers: dict[str, str],
    ) -> None:
        asset_id = await create_asset(asset_tracker_client, user_headers)

        await asset_tracker_client.post(f"/api/v1/warranties/register/{asset_id}", headers=user_headers)

        assert warranty_service.registration_payloads[0]["warranty_duration_months"] == 12

    @pytest.mark.asyncio
    async def test_already_registered_counts_as_success(
        self,
        asset_tracker_client: AsyncClient,
        user_headers: dict[str, str],
    ) -> None:
        asset_id = await create_asset(asset_tracker_client, user_headers)
        await asset_tracker_client.post(f"/api/v1/warranties/register/{asset_id}", headers=user_headers)

        response = await asset_tracker_client.post(f"/api/v1/warranties/register/{asset_id}", headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["result"]["success"] is False
        assert data["recovered_duplicate"] is True
        assert data["warranty"]["badge"] == "registered"

    @pytest.mark.asyncio
    async def test_rejected_with_details(
        self,
        asset_tracker_client: AsyncClient,
        warranty_service: Any,
        user_headers: dict[str, str],
    ) -> None:
        asset_id = await create_asset(asset_tracker_client, user_headers)
        warranty_service.register_response = (
            400,
            {
                "success": False,
                "message": "Invalid data",
                "details": {"serial_number": ["Serial number is not recognised."]},
            },
        )

        response = await asset_tracker_client.post(f"/api/v1/warranties/register/{asset_id}", headers=user_headers)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["success"] is False
        assert detail["message"] == "Invalid data"
        assert detail["details"] == {"serial_number": ["Serial number is not recognised."]}

    @pytest.mark.asyncio
    async def test_rejected_with_list_details(
        self,
        asset_tracker_client: AsyncClient,
        warranty_service: Any,
        user_headers: dict[str, str],
    ) -> None:
        asset_id = await create_asset(asset_tracker_client, user_headers)
        details = [{"field": "serial_number", "message": "Serial number is required"}]
        warranty_service.register_response = (
            400,
            {"success": False, "message": "Serial number is required", "details": details},
        )

        response = await asset_tracker_client.post(f"/api/v1/warranties/register/{asset_id}", headers=user_headers)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["message"] == "Serial number is required"
        assert detail["details"] == details

    @pytest.mark.asyncio
    async def test_service_failure(
        self,
        asset_tracker_client: AsyncClient,
        warranty_service: Any,
        user_headers: dict[str, str],
    ) -> None:
        asset_id = await create_asset(asset_tracker_client, user_headers)
        warranty_service.register_response = (500, {"success": False, "error": "Database unavailable"})

        response = await asset_tracker_client.post(f"/api/v1/warranties/register/{asset_id}", headers=user_headers)

        assert response.status_code == 502
        detail = response.json()["detail"]
        assert detail["error"] == "Database unavailable"
        assert detail["message"] == "Database unavailable"

    @pytest.mark.asyncio
    async def test_other_users_asset(
        self,
        asset_tracker_client: AsyncClient,
        warranty_service: Any,
        user_headers: dict[str, str],
        admin_headers: dict[str, str],
    ) -> None:
        asset_id = await create_asset(asset_tracker_client, admin_headers)

        response = await asset_tracker_client.post(f"/api/v1/warranties/register/{asset_id}", headers=user_headers)

        assert response.status_code == 404
        assert warranty_service.requests == []

    @pytest.mark.asyncio
    async def test_duration_out_of_range(
        self,
        asset_tracker_client: AsyncClient,
        user_headers: dict[str, str],
    ) -> None:
        asset_id = await create_asset(asset_tracker_client, user_headers)

        response = await asset_tracker_client.post(
            f"/api/v1/warranties/register/{asset_id}",
            json={"warranty_duration_months": 0},
            headers=user_headers,
        )

        assert response.status_code == 422
