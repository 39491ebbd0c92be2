"""Dining table management API tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _authenticate(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


async def test_floor_plan_is_public(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]

    response = await client.get("/api/v1/tables")

    assert response.status_code == 200
    capacities = [table["capacity"] for table in response.json()]
    assert capacities == [2, 2, 4, 4, 6, 8, 2, 4, 12]

    missing = await client.get("/api/v1/tables/999")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Table not found"


async def test_admin_manages_tables(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, app_context["admin_email"], app_context["admin_password"]
    )
    headers = {"Authorization": f"Bearer {token}"}

    create_resp = await client.post(
        "/api/v1/tables",
        json={"name": "Bar 1", "capacity": 3, "location": "Bar"},
        headers=headers,
    )
    assert create_resp.status_code == 201, create_resp.text
    table = create_resp.json()
    assert table["is_active"] is True

    update_resp = await client.patch(
        f"/api/v1/tables/{table['id']}",
        json={"capacity": 4, "is_active": False},
        headers=headers,
    )
    assert update_resp.status_code == 200
    assert update_resp.json()["capacity"] == 4
    assert update_resp.json()["is_active"] is False
    assert update_resp.json()["name"] == "Bar 1"

    invalid_resp = await client.post(
        "/api/v1/tables",
        json={"name": "Broken", "capacity": 0, "location": "Bar"},
        headers=headers,
    )
    assert invalid_resp.status_code == 422

    delete_resp = await client.delete(f"/api/v1/tables/{table['id']}", headers=headers)
    assert delete_resp.status_code == 204
    assert (await client.get(f"/api/v1/tables/{table['id']}")).status_code == 404


async def test_diners_cannot_change_tables(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, app_context["diner_email"], app_context["diner_password"]
    )
    headers = {"Authorization": f"Bearer {token}"}

    create_resp = await client.post(
        "/api/v1/tables",
        json={"name": "Sneaky", "capacity": 20, "location": "Main"},
        headers=headers,
    )
    patch_resp = await client.patch(
        "/api/v1/tables/1", json={"is_active": False}, headers=headers
    )
    anonymous_resp = await client.delete("/api/v1/tables/1")

    assert create_resp.status_code == 403
    assert create_resp.json()["detail"] == "Insufficient permissions"
    assert patch_resp.status_code == 403
    assert anonymous_resp.status_code == 401


async def test_deactivated_table_stops_taking_bookings(
    app_context: dict[str, Any],
) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, app_context["admin_email"], app_context["admin_password"]
    )
    headers = {"Authorization": f"Bearer {token}"}
    day = (datetime.now(UTC).date() + timedelta(days=2)).isoformat()

    tables = (await client.get("/api/v1/tables")).json()
    private_room = next(table for table in tables if table["capacity"] == 12)

    before = await client.get(
        "/api/v1/available-times", params={"date": day, "guests": 12}
    )
    assert len(before.json()) == 10

    deactivate = await client.patch(
        f"/api/v1/tables/{private_room['id']}",
        json={"is_active": False},
        headers=headers,
    )
    assert deactivate.status_code == 200

    after = await client.get(
        "/api/v1/available-times", params={"date": day, "guests": 12}
    )
    assert after.json() == []

    booking = await client.post(
        "/api/v1/reservations",
        json={
            "date": day,
            "time": "19:00",
            "guests": 10,
            "name": "Large Party",
            "email": "party@example.com",
            "phone": "5550102030",
        },
    )
    assert booking.status_code == 400
