# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Booking lifecycle: guest requests and operator transitions.

State machine::

    requested -> approved | declined
    approved  -> cancelled
    declined, cancelled -> approved   (re-approval)
    any       -> deleted

Every transition runs in one session transaction. Inventory and hold writes
are either all committed together with the status change or all rolled
back. The guest notification is sent only after the commit and its failure
never undoes a transition.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings, get_settings
from src.errors import (
    BookingNotFoundError,
    BookingValidationError,
    InvalidTransitionError,
    MinimumStayError,
    RangeAlreadyConfirmedError,
)
from src.models.booking import Booking, BookingStatus
from src.models.property import Property
from src.repositories.booking_repository import BookingRepository
from src.repositories.hold_repository import HoldRepository
from src.repositories.inventory_repository import InventoryRepository
from src.schemas import BookingCreate
from src.services.availability_service import AvailabilityService
from src.services.notification_service import (
    NotificationAction,
    NotificationResult,
    Notifier,
    get_notifier,
)
from src.services.pricing import nights_between
from src.utils.clock import Clock, get_clock

logger = logging.getLogger(__name__)

APPROVABLE = frozenset(
    {BookingStatus.REQUESTED, BookingStatus.DECLINED, BookingStatus.CANCELLED}
)


class BookingService:
    """Service coordinating bookings, inventory and public holds."""

    def __init__(
        self,
        session: AsyncSession,
        notifier: Notifier | None = None,
        clock: Clock | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize BookingService.

        Args:
            session: Async database session. The service commits it.
            notifier: Mail collaborator. Defaults to the configured notifier.
            clock: Time source for holds. Defaults to the system clock.
            settings: Application settings. Defaults to the cached settings.
        """
        self._session = session
        self._settings = settings or get_settings()
        self._clock = clock or get_clock()
        self._notifier = notifier or get_notifier(self._settings)
        self._bookings = BookingRepository(session)
        self._inventory = InventoryRepository(session)
        self._holds = HoldRepository(
            session,
            clock=self._clock,
            ttl=timedelta(hours=self._settings.hold_ttl_hours),
        )
        self._availability = AvailabilityService(
            session, clock=self._clock, settings=self._settings
        )

    @asynccontextmanager
    async def _transition(self) -> AsyncIterator[None]:
        """Commit on success, roll back on any error."""
        try:
            yield
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

    async def _get_booking(self, booking_id: int) -> Booking:
        booking = await self._bookings.get_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")
        return booking

    async def _notify(
        self,
        action: NotificationAction,
        booking: Booking,
        prop: Property,
    ) -> NotificationResult:
        try:
            return await self._notifier.notify(action, booking, prop.name)
        except Exception as e:
            logger.exception(
                "Notifier failed for %s of booking %s", action, booking.id
            )
            return NotificationResult(ok=False, detail=str(e))

    async def request_booking(
        self, request: BookingCreate
    ) -> tuple[Booking, NotificationResult]:
        """Submit a guest booking request.

        Holds every night of the stay and stores the booking as
        ``requested`` with a server-side price summary. The summary sent by
        the client, if any, is ignored.

        Args:
            request: Validated guest request.

        Returns:
            Tuple of the stored booking and the notification result.

        Raises:
            PropertyNotFoundError: If the property does not exist.
            BookingValidationError: If the guest count is not allowed.
            MinimumStayError: If the stay is shorter than the minimum stay.
            RangeAlreadyConfirmedError: If a night is already approved.
            RangeAlreadyRequestedError: If a night carries a live hold.
        """
        start, end = request.start_date, request.end_date
        nights = nights_between(start, end)

        async with self._transition():
            prop = await self._availability.get_property(request.property_id)

            guests = request.adults + request.children
            if guests < 1:
                raise BookingValidationError("Mindestens ein Gast erforderlich.")
            if guests > prop.max_guests:
                raise BookingValidationError(
                    f"Maximal {prop.max_guests} Gäste erlaubt (angefragt: {guests})."
                )

            quote = await self._availability.quote(prop.id, start, end, request.adults)
            if nights < quote.min_nights:
                raise MinimumStayError(nights, quote.min_nights)

            occupied = await self._inventory.list_occupied_nights(prop.id, start, end)
            if occupied:
                raise RangeAlreadyConfirmedError(prop.id, occupied)

            booking = await self._bookings.create(
                Booking(
                    property_id=prop.id,
                    start_date=start,
                    end_date=end,
                    adults=request.adults,
                    children=request.children,
                    status=BookingStatus.REQUESTED.value,
                    contact_name=request.contact.name,
                    contact_email=str(request.contact.email),
                    contact_phone=request.contact.phone or None,
                    contact_address=request.contact.address.model_dump(),
                    message=request.message or None,
                    summary=quote.summary.model_dump(mode="json"),
                )
            )
            await self._holds.create_holds_for_range(
                prop.id, start, end, booking_ref=booking.id
            )

        logger.info(
            "Booking %s requested for property %s, %s..%s (%d nights)",
            booking.id,
            prop.id,
            start,
            end,
            nights,
        )
        notification = await self._notify(NotificationAction.REQUESTED, booking, prop)
        return booking, notification

    async def approve(self, booking_id: int) -> NotificationResult:
        """Confirm a booking and block its nights.

        Args:
            booking_id: Booking to approve.

        Returns:
            Notification result; the approval stands even if it failed.

        Raises:
            BookingNotFoundError: If the booking does not exist.
            InvalidTransitionError: If the booking is already approved.
            RangeAlreadyConfirmedError: If any night is confirmed for another
                booking. Nothing is changed in that case.
        """
        async with self._transition():
            booking = await self._get_booking(booking_id)
            if booking.status not in APPROVABLE:
                raise InvalidTransitionError(booking_id, booking.status, "approve")

            start, end = booking.start_date, booking.end_date
            occupied = await self._inventory.list_occupied_nights(
                booking.property_id, start, end
            )
            if occupied:
                logger.warning(
                    "Cannot approve booking %s: %d nights already confirmed",
                    booking_id,
                    len(occupied),
                )
                raise RangeAlreadyConfirmedError(booking.property_id, occupied)

            blocked = await self._inventory.block_nights_for_booking(
                booking.id, booking.property_id, start, end
            )
            await self._bookings.set_status(booking, BookingStatus.APPROVED)
            await self._holds.release_holds_for_range(booking.property_id, start, end)
            prop = await self._availability.get_property(booking.property_id)

        logger.info(
            "Approved booking %s for property %s (%d nights)",
            booking.id,
            booking.property_id,
            blocked,
        )
        return await self._notify(NotificationAction.APPROVED, booking, prop)

    async def decline(self, booking_id: int) -> NotificationResult:
        """Reject a requested booking and release its holds.

        Raises:
            BookingNotFoundError: If the booking does not exist.
            InvalidTransitionError: If the booking is not requested.
        """
        async with self._transition():
            booking = await self._get_booking(booking_id)
            if booking.status != BookingStatus.REQUESTED:
                raise InvalidTransitionError(booking_id, booking.status, "decline")

            await self._bookings.set_status(booking, BookingStatus.DECLINED)
            await self._holds.release_holds_for_range(
                booking.property_id, booking.start_date, booking.end_date
            )
            prop = await self._availability.get_property(booking.property_id)

        logger.info("Declined booking %s for property %s", booking.id, booking.property_id)
        return await self._notify(NotificationAction.DECLINED, booking, prop)

    async def cancel(self, booking_id: int) -> NotificationResult:
        """Cancel an approved booking and free its nights.

        Only inventory rows owned by this booking are freed.

        Raises:
            BookingNotFoundError: If the booking does not exist.
            InvalidTransitionError: If the booking is not approved.
        """
        async with self._transition():
            booking = await self._get_booking(booking_id)
            if booking.status != BookingStatus.APPROVED:
                raise InvalidTransitionError(booking_id, booking.status, "cancel")

            freed = await self._inventory.free_nights_for_booking(booking)
            await self._bookings.set_status(booking, BookingStatus.CANCELLED)
            await self._holds.release_holds_for_range(
                booking.property_id, booking.start_date, booking.end_date
            )
            prop = await self._availability.get_property(booking.property_id)

        logger.info(
            "Cancelled booking %s for property %s (%d nights freed)",
            booking.id,
            booking.property_id,
            freed,
        )
        return await self._notify(NotificationAction.CANCELLED, booking, prop)

    async def delete(self, booking_id: int) -> NotificationResult:
        """Remove a booking permanently.

        Holds for its range are released. An approved booking also gives its
        nights back so no orphaned inventory is left behind. Deleting a
        missing booking is a no-op. No mail is sent.

        Args:
            booking_id: Booking to delete.

        Returns:
            Result describing what was done.
        """
        async with self._transition():
            booking = await self._bookings.get_by_id(booking_id)
            if booking is None:
                return NotificationResult(ok=True, detail="booking not found")

            status = booking.status
            freed = 0
            if status == BookingStatus.APPROVED:
                freed = await self._inventory.free_nights_for_booking(booking)
            await self._holds.release_holds_for_range(
                booking.property_id, booking.start_date, booking.end_date
            )
            await self._bookings.delete(booking)

        logger.info(
            "Deleted booking %s (%s, %d nights freed)", booking_id, status, freed
        )
        return NotificationResult(ok=True, detail="deleted")
