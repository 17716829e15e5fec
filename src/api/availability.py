# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Availability, price quote and booking calendar endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.bookings import BookingResponse
from src.database import get_db
from src.models.booking import Booking, BookingStatus
from src.services.availability_service import AvailabilityService, StayQuote

router = APIRouter(prefix="/api/properties", tags=["Availability"])


class AvailabilityResponse(BaseModel):
    """Response model for a range availability check."""

    property_id: int = Field(description="Property ID")
    start: str = Field(description="Check-in date")
    end: str = Field(description="Checkout date")
    available: bool = Field(description="Whether every night is free")


class UnavailableNightsResponse(BaseModel):
    """Response model for the calendar's blocked nights."""

    property_id: int = Field(description="Property ID")
    nights: list[str] = Field(description="Confirmed or held nights, sorted")


def get_availability_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AvailabilityService:
    """FastAPI dependency for the availability service."""
    return AvailabilityService(db)


ServiceDep = Annotated[AvailabilityService, Depends(get_availability_service)]


@router.get("/{property_id}/availability", response_model=AvailabilityResponse)
async def check_availability(
    property_id: int,
    start: str,
    end: str,
    service: ServiceDep,
) -> dict[str, Any]:
    """Check whether ``[start, end)`` can be requested."""
    await service.get_property(property_id)
    return {
        "property_id": property_id,
        "start": start,
        "end": end,
        "available": await service.is_range_available(property_id, start, end),
    }


@router.get(
    "/{property_id}/unavailable-nights", response_model=UnavailableNightsResponse
)
async def unavailable_nights(
    property_id: int,
    from_date: Annotated[str, Query(alias="from")],
    to_date: Annotated[str, Query(alias="to")],
    service: ServiceDep,
) -> dict[str, Any]:
    """List nights in ``[from, to)`` that are confirmed or held."""
    await service.get_property(property_id)
    return {
        "property_id": property_id,
        "nights": await service.list_unavailable_nights(property_id, from_date, to_date),
    }


@router.get("/{property_id}/quote", response_model=StayQuote)
async def quote(
    property_id: int,
    start: str,
    end: str,
    service: ServiceDep,
    adults: Annotated[int, Query(ge=0)] = 2,
) -> StayQuote:
    """Price a stay with the current seasons and tourist-tax bands."""
    return await service.quote(property_id, start, end, adults)


@router.get("/{property_id}/bookings", response_model=list[BookingResponse])
async def list_bookings(
    property_id: int,
    service: ServiceDep,
    status: Annotated[list[BookingStatus] | None, Query()] = None,
    from_date: Annotated[str | None, Query(alias="from")] = None,
    to_date: Annotated[str | None, Query(alias="to")] = None,
) -> list[Booking]:
    """List bookings of a property, optionally by status and overlap window.

    Without a window, every booking with a matching status is returned.
    """
    await service.get_property(property_id)
    statuses = [s.value for s in status] if status else None
    if from_date is None or to_date is None:
        return list(await service.list_bookings(property_id, statuses))
    return list(
        await service.list_overlap_bookings(property_id, from_date, to_date, statuses)
    )
