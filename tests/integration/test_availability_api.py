# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Integration tests for availability, quote and calendar endpoints."""

import pytest


@pytest.fixture
async def property_id(rental) -> int:
    """ID of the committed rental."""
    return rental.id


async def _request(client, property_id, contact, start, end) -> int:
    response = await client.post(
        "/api/bookings",
        json={
            "property_id": property_id,
            "start_date": start,
            "end_date": end,
            "adults": 2,
            "contact": contact,
        },
    )
    assert response.status_code == 201
    return response.json()["booking"]["id"]


class TestAvailability:
    """Tests for GET /api/properties/{id}/availability."""

    @pytest.mark.asyncio
    async def test_free_range(self, client, property_id):
        """Test an empty calendar is available."""
        response = await client.get(
            f"/api/properties/{property_id}/availability",
            params={"start": "2027-08-01", "end": "2027-08-05"},
        )

        assert response.status_code == 200
        assert response.json()["available"] is True

    @pytest.mark.asyncio
    async def test_held_range(self, client, property_id, contact_data):
        """Test a requested range is no longer available."""
        await _request(client, property_id, contact_data, "2027-08-01", "2027-08-05")

        response = await client.get(
            f"/api/properties/{property_id}/availability",
            params={"start": "2027-08-04", "end": "2027-08-06"},
        )

        assert response.json()["available"] is False

    @pytest.mark.asyncio
    async def test_empty_range_rejected(self, client, property_id):
        """Test start equal to end returns 422."""
        response = await client.get(
            f"/api/properties/{property_id}/availability",
            params={"start": "2027-08-01", "end": "2027-08-01"},
        )

        assert response.status_code == 422
        assert response.json()["type"] == "invalid_range"

    @pytest.mark.asyncio
    async def test_unknown_property(self, client):
        """Test an unknown property returns 404."""
        response = await client.get(
            "/api/properties/999/availability",
            params={"start": "2027-08-01", "end": "2027-08-03"},
        )

        assert response.status_code == 404


class TestUnavailableNights:
    """Tests for GET /api/properties/{id}/unavailable-nights."""

    @pytest.mark.asyncio
    async def test_union_of_held_and_confirmed(
        self, client, property_id, contact_data
    ):
        """Test held and confirmed nights are merged and sorted."""
        approved = await _request(
            client, property_id, contact_data, "2027-08-10", "2027-08-12"
        )
        await client.post(f"/api/bookings/{approved}/approve")
        await _request(client, property_id, contact_data, "2027-08-01", "2027-08-03")

        response = await client.get(
            f"/api/properties/{property_id}/unavailable-nights",
            params={"from": "2027-08-01", "to": "2027-09-01"},
        )

        assert response.status_code == 200
        assert response.json()["nights"] == [
            "2027-08-01",
            "2027-08-02",
            "2027-08-10",
            "2027-08-11",
        ]


class TestQuote:
    """Tests for GET /api/properties/{id}/quote."""

    @pytest.mark.asyncio
    async def test_quote_with_season_and_tax(self, client, property_id):
        """Test a stay across a season boundary with tourist tax."""
        await client.post(
            f"/api/properties/{property_id}/seasons",
            json={
                "name": "Hochsaison",
                "start_date": "2027-07-03",
                "end_date": "2027-09-01",
                "nightly_rate": "180.00",
                "min_nights": 3,
            },
        )
        await client.post(
            f"/api/properties/{property_id}/tax-bands",
            json={
                "label": "Hauptsaison",
                "rate": "2.50",
                "ranges": [{"start_md": "05-01", "end_md": "10-01"}],
            },
        )

        response = await client.get(
            f"/api/properties/{property_id}/quote",
            params={"start": "2027-07-01", "end": "2027-07-05", "adults": 2},
        )

        assert response.status_code == 200
        data = response.json()
        # 2 x 140 + 2 x 180 + 110 cleaning, tax 4 nights x 2 adults x 2.50
        assert data["summary"]["nightly_total"] == "640.00"
        assert data["summary"]["tourist_tax"] == "20.00"
        assert data["summary"]["grand_total"] == "770.00"
        assert data["min_nights"] == 3
        assert data["available"] is True

    @pytest.mark.asyncio
    async def test_quote_unknown_property(self, client):
        """Test quoting an unknown property returns 404."""
        response = await client.get(
            "/api/properties/999/quote",
            params={"start": "2027-07-01", "end": "2027-07-05"},
        )

        assert response.status_code == 404


class TestBookingList:
    """Tests for GET /api/properties/{id}/bookings."""

    @pytest.mark.asyncio
    async def test_filter_by_status_and_window(
        self, client, property_id, contact_data
    ):
        """Test approved bookings overlapping a window are listed."""
        first = await _request(
            client, property_id, contact_data, "2027-08-01", "2027-08-04"
        )
        second = await _request(
            client, property_id, contact_data, "2027-08-10", "2027-08-14"
        )
        await client.post(f"/api/bookings/{first}/approve")
        await client.post(f"/api/bookings/{second}/approve")
        await _request(client, property_id, contact_data, "2027-08-20", "2027-08-22")

        response = await client.get(
            f"/api/properties/{property_id}/bookings",
            params={"status": "approved", "from": "2027-08-03", "to": "2027-08-11"},
        )
        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == [first, second]

        response = await client.get(
            f"/api/properties/{property_id}/bookings",
            params={"from": "2027-08-04", "to": "2027-08-10"},
        )
        assert response.json() == []

        response = await client.get(
            f"/api/properties/{property_id}/bookings", params={"status": "requested"}
        )
        assert [b["start_date"] for b in response.json()] == ["2027-08-20"]
