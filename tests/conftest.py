"""
Test Configuration
==================

Pytest fixtures for asset tracker tests.
"""

import json
import os
from collections.abc import AsyncGenerator, Iterator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["WARRANTY_API_URL"] = "http://warranty.test"
os.environ["WARRANTY_TIMEOUT_SECONDS"] = "5"
os.environ["BOOTSTRAP_ADMIN_EMAIL"] = ""

WARRANTY_BASE_URL = "http://warranty.test"


class FakeWarrantyService:
    """
    In-process stand-in for the remote warranty service.

    Registers at most one warranty per asset; a second registration gets
    the service's "already registered" rejection.
    """

    def __init__(self) -> None:
        self.registered: dict[str, dict[str, Any]] = {}
        self.status_overrides: dict[str, dict[str, Any]] = {}
        self.failing_ids: set[str] = set()
        self.register_response: tuple[int, dict[str, Any]] | None = None
        self.requests: list[httpx.Request] = []
        self._next_warranty_id = 100

    @property
    def registration_payloads(self) -> list[dict[str, Any]]:
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == "POST"
        ]

    @property
    def status_checks(self) -> list[str]:
        return [
            r.url.path.rstrip("/").rsplit("/", 1)[-1]
            for r in self.requests
            if r.method == "GET"
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path == "/api/warranty/register/":
            return self._register(json.loads(request.content))

        if request.method == "GET" and path.startswith("/api/warranty/check/"):
            return self._check(path.rstrip("/").rsplit("/", 1)[-1])

        return httpx.Response(404, json={"detail": "Not found"})

    def _register(self, payload: dict[str, Any]) -> httpx.Response:
        if self.register_response is not None:
            status_code, body = self.register_response
            return httpx.Response(status_code, json=body)

        key = str(payload["id"])
        existing = self.registered.get(key)
        if existing is not None:
            return httpx.Response(
                400,
                json={
                    "success": False,
                    "message": "Warranty already registered for this asset",
                    "status": "registered",
                    "warranty_id": existing["warranty_id"],
                },
            )

        months = payload["warranty_duration_months"]
        record = {
            "status": "registered",
            "status_label": "Registered",
            "warranty_id": self._next_warranty_id,
            "asset_id": payload["id"],
            "registered_at": "2026-10-18T09:00:00Z",
            "warranty_start_date": "2026-10-18",
            "warranty_end_date": "2027-10-18" if months == 12 else "2028-10-18",
            "days_until_expiry": months * 30,
            "registered_by": payload["registered_by_name"],
        }
        self._next_warranty_id += 1
        self.registered[key] = record

        body = {"success": True, "message": "Warranty registered successfully", **record}
        body.pop("days_until_expiry")
        body.pop("registered_by")
        return httpx.Response(201, json=body)

    def _check(self, key: str) -> httpx.Response:
        if key in self.failing_ids:
            return httpx.Response(500, json={"detail": "Internal error"})
        if key in self.status_overrides:
            return httpx.Response(200, json=self.status_overrides[key])

        record = self.registered.get(key)
        if record is None:
            return httpx.Response(
                200,
                json={"is_registered": False, "message": "No warranty registered for this asset"},
            )
        return httpx.Response(200, json={"is_registered": True, **record})


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def warranty_service() -> FakeWarrantyService:
    """Fresh fake warranty service."""
    return FakeWarrantyService()


@pytest_asyncio.fixture
async def warranty_client(
    warranty_service: FakeWarrantyService,
) -> AsyncGenerator[Any, None]:
    """Warranty client wired to the fake service."""
    from services.asset_tracker.warranty import WarrantyServiceClient

    client = WarrantyServiceClient(
        base_url=WARRANTY_BASE_URL,
        transport=httpx.MockTransport(warranty_service.handler),
    )
    yield client
    await client.close()


@pytest.fixture
def store() -> Iterator[Any]:
    """Empty in-memory store, reset after the test."""
    from services.asset_tracker.dependencies import cache_registry
    from services.asset_tracker.store import store as app_store

    app_store.reset()
    cache_registry.clear()
    yield app_store
    app_store.reset()
    cache_registry.clear()


@pytest_asyncio.fixture
async def asset_tracker_client(
    store: Any,
    warranty_client: Any,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Asset Tracker Service."""
    from services.asset_tracker.dependencies import get_warranty_client
    from services.asset_tracker.main import app

    app.dependency_overrides[get_warranty_client] = lambda: warranty_client
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()


def _auth_headers(profile: dict[str, Any]) -> dict[str, str]:
    from shared.auth import create_access_token

    token = create_access_token({"sub": profile["id"], "email": profile["email"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_profile(store: Any) -> dict[str, Any]:
    """Regular user."""
    return store.create_profile(email="jane@example.com", full_name="Jane Doe")


@pytest.fixture
def admin_profile(store: Any) -> dict[str, Any]:
    """Administrator."""
    from services.asset_tracker.store import Role

    return store.create_profile(email="admin@example.com", full_name="Ada Admin", role=Role.ADMIN)


@pytest.fixture
def user_headers(user_profile: dict[str, Any]) -> dict[str, str]:
    """Bearer token headers for the regular user."""
    return _auth_headers(user_profile)


@pytest.fixture
def admin_headers(admin_profile: dict[str, Any]) -> dict[str, str]:
    """Bearer token headers for the administrator."""
    return _auth_headers(admin_profile)


@pytest.fixture
def sample_asset() -> dict[str, Any]:
    """Joined asset row as the store returns it."""
    return {
        "id": 42,
        "name": "ThinkPad X1 Carbon",
        "category_id": 1,
        "department_id": 2,
        "categories": {"name": "Laptops"},
        "departments": {"name": "Engineering"},
        "profiles": {"full_name": "Jane Doe"},
        "cost": "1899.99",
        "date_purchased": "2026-03-01",
        "created_by": "user-123",
        "created_at": "2026-03-02T10:15:00+00:00",
        "serial_number": "PF3XK2A9",
        "manufacturer": "Lenovo",
        "model_number": None,
        "modelNumber": "20XW",
    }
