# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Booking request and lifecycle API endpoints."""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.errors import BookingNotFoundError
from src.models.booking import Booking
from src.repositories.booking_repository import BookingRepository
from src.schemas import BookingCreate
from src.services.booking_service import BookingService
from src.services.notification_service import (
    NotificationResult,
    Notifier,
    get_notifier,
)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


class BookingResponse(BaseModel):
    """Response model for a booking."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Booking ID")
    property_id: int = Field(description="Property ID")
    start_date: str = Field(description="Check-in date (YYYY-MM-DD)")
    end_date: str = Field(description="Checkout date (YYYY-MM-DD)")
    adults: int = Field(description="Number of adults")
    children: int = Field(description="Number of children")
    status: str = Field(description="Booking status")
    contact_name: str = Field(description="Guest name")
    contact_email: str = Field(description="Guest e-mail")
    contact_phone: str | None = Field(default=None, description="Guest phone")
    contact_address: dict[str, Any] | None = Field(
        default=None, description="Guest postal address"
    )
    message: str | None = Field(default=None, description="Guest message")
    summary: dict[str, Any] | None = Field(
        default=None, description="Server-computed price summary"
    )
    created_at: datetime | None = Field(default=None, description="Request time")


class BookingCreatedResponse(BaseModel):
    """Response model for a new booking request."""

    booking: BookingResponse = Field(description="Stored booking")
    notification: NotificationResult = Field(description="Mail delivery outcome")


class TransitionResponse(BaseModel):
    """Response model for a lifecycle transition."""

    booking_id: int = Field(description="Booking ID")
    status: str = Field(description="Status after the transition")
    notification: NotificationResult = Field(description="Mail delivery outcome")


def get_booking_notifier() -> Notifier:
    """FastAPI dependency for the configured notifier."""
    return get_notifier()


def get_booking_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    notifier: Annotated[Notifier, Depends(get_booking_notifier)],
) -> BookingService:
    """FastAPI dependency for the booking service."""
    return BookingService(db, notifier=notifier)


ServiceDep = Annotated[BookingService, Depends(get_booking_service)]


@router.post(
    "", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED
)
async def create_booking(body: BookingCreate, service: ServiceDep) -> dict[str, Any]:
    """Submit a booking request.

    The nights are held immediately. A conflicting request gets 409 with
    type ``range_already_requested`` or ``range_already_confirmed``.
    """
    booking, notification = await service.request_booking(body)
    return {"booking": booking, "notification": notification}


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Get a booking by ID."""
    booking = await BookingRepository(db).get_by_id(booking_id)
    if booking is None:
        raise BookingNotFoundError(f"Booking {booking_id} not found")
    return booking


@router.post("/{booking_id}/approve", response_model=TransitionResponse)
async def approve_booking(booking_id: int, service: ServiceDep) -> dict[str, Any]:
    """Approve a booking and block its nights."""
    notification = await service.approve(booking_id)
    return {"booking_id": booking_id, "status": "approved", "notification": notification}


@router.post("/{booking_id}/decline", response_model=TransitionResponse)
async def decline_booking(booking_id: int, service: ServiceDep) -> dict[str, Any]:
    """Decline a requested booking."""
    notification = await service.decline(booking_id)
    return {"booking_id": booking_id, "status": "declined", "notification": notification}


@router.post("/{booking_id}/cancel", response_model=TransitionResponse)
async def cancel_booking(booking_id: int, service: ServiceDep) -> dict[str, Any]:
    """Cancel an approved booking and free its nights."""
    notification = await service.cancel(booking_id)
    return {
        "booking_id": booking_id,
        "status": "cancelled",
        "notification": notification,
    }


@router.delete("/{booking_id}", response_model=TransitionResponse)
async def delete_booking(booking_id: int, service: ServiceDep) -> dict[str, Any]:
    """Delete a booking in any state."""
    notification = await service.delete(booking_id)
    return {"booking_id": booking_id, "status": "deleted", "notification": notification}
