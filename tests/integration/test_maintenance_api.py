# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Integration tests for maintenance endpoints."""

import pytest


@pytest.fixture
async def property_id(rental) -> int:
    """ID of the committed rental."""
    return rental.id


@pytest.fixture
async def approved(client, property_id, contact_data) -> int:
    """ID of an approved booking for 2027-09-01..2027-09-04."""
    response = await client.post(
        "/api/bookings",
        json={
            "property_id": property_id,
            "start_date": "2027-09-01",
            "end_date": "2027-09-04",
            "contact": contact_data,
        },
    )
    booking_id = response.json()["booking"]["id"]
    await client.post(f"/api/bookings/{booking_id}/approve")
    return booking_id


async def _unavailable(client, property_id) -> list[str]:
    response = await client.get(
        f"/api/properties/{property_id}/unavailable-nights",
        params={"from": "2027-09-01", "to": "2027-10-01"},
    )
    return response.json()["nights"]


class TestMaintenance:
    """Tests for /api/properties/{id}/maintenance."""

    @pytest.mark.asyncio
    async def test_clear_then_rebuild(self, client, property_id, approved):
        """Test a cleared ledger is restored from approved bookings."""
        base = f"/api/properties/{property_id}/maintenance"

        response = await client.post(
            f"{base}/clear-inventory",
            json={"start": "2027-09-01", "end": "2027-10-01"},
        )
        assert response.status_code == 200
        assert response.json()["count"] == 3
        assert await _unavailable(client, property_id) == []

        response = await client.post(f"{base}/rebuild-inventory")
        assert response.status_code == 200
        assert response.json() == {
            "property_id": property_id,
            "action": "rebuild-inventory",
            "count": 3,
        }
        assert await _unavailable(client, property_id) == [
            "2027-09-01",
            "2027-09-02",
            "2027-09-03",
        ]

    @pytest.mark.asyncio
    async def test_release_all_holds(self, client, property_id, contact_data):
        """Test releasing holds reopens a requested range."""
        await client.post(
            "/api/bookings",
            json={
                "property_id": property_id,
                "start_date": "2027-09-10",
                "end_date": "2027-09-12",
                "contact": contact_data,
            },
        )

        response = await client.post(
            f"/api/properties/{property_id}/maintenance/release-holds", json={}
        )

        assert response.status_code == 200
        assert response.json()["count"] == 2
        assert await _unavailable(client, property_id) == []

    @pytest.mark.asyncio
    async def test_invalid_range(self, client, property_id):
        """Test an empty clear range returns 422."""
        response = await client.post(
            f"/api/properties/{property_id}/maintenance/clear-inventory",
            json={"start": "2027-09-05", "end": "2027-09-01"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_property(self, client):
        """Test maintenance on an unknown property returns 404."""
        response = await client.post("/api/properties/999/maintenance/rebuild-inventory")

        assert response.status_code == 404
