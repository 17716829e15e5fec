# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Repository for Booking database operations."""

from collections.abc import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.booking import Booking, BookingStatus


class BookingRepository:
    """Repository for Booking CRUD operations.

    Dates are ISO strings, so range filters compare lexicographically.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self._session = session

    async def get_by_id(self, booking_id: int) -> Booking | None:
        """Get booking by ID.

        Args:
            booking_id: Booking primary key.

        Returns:
            Booking if found, None otherwise.
        """
        result = await self._session.execute(
            select(Booking).where(Booking.id == booking_id)
        )
        return result.scalar_one_or_none()

    async def get_for_property(
        self,
        property_id: int,
        statuses: Iterable[str] | None = None,
    ) -> Sequence[Booking]:
        """Get bookings for a property.

        Args:
            property_id: Property ID to filter by.
            statuses: Optional status filter.

        Returns:
            Bookings ordered by start date.
        """
        query = select(Booking).where(Booking.property_id == property_id)
        if statuses is not None:
            query = query.where(Booking.status.in_(list(statuses)))
        result = await self._session.execute(
            query.order_by(Booking.start_date, Booking.id)
        )
        return result.scalars().all()

    async def get_approved_for_property(self, property_id: int) -> Sequence[Booking]:
        """Get approved bookings for a property.

        Args:
            property_id: Property ID to filter by.

        Returns:
            Approved bookings ordered by start date.
        """
        return await self.get_for_property(property_id, [BookingStatus.APPROVED])

    async def get_overlapping(
        self,
        property_id: int,
        from_date: str,
        to_date: str,
        statuses: Iterable[str] | None = None,
    ) -> Sequence[Booking]:
        """Get bookings sharing at least one night with ``[from_date, to_date)``.

        Args:
            property_id: Property ID to filter by.
            from_date: Window start (inclusive).
            to_date: Window end (exclusive).
            statuses: Optional status filter.

        Returns:
            Overlapping bookings ordered by start date.
        """
        query = select(Booking).where(
            Booking.property_id == property_id,
            Booking.start_date < to_date,
            Booking.end_date > from_date,
        )
        if statuses is not None:
            query = query.where(Booking.status.in_(list(statuses)))
        result = await self._session.execute(
            query.order_by(Booking.start_date, Booking.id)
        )
        return result.scalars().all()

    async def create(self, booking: Booking) -> Booking:
        """Create a new booking.

        Args:
            booking: Booking entity to create.

        Returns:
            Created booking with ID.
        """
        self._session.add(booking)
        await self._session.flush()
        await self._session.refresh(booking)
        return booking

    async def update(self, booking: Booking) -> Booking:
        """Flush pending changes of a booking.

        Args:
            booking: Booking entity with updates.

        Returns:
            Updated booking.
        """
        await self._session.flush()
        await self._session.refresh(booking)
        return booking

    async def set_status(self, booking: Booking, status: BookingStatus) -> Booking:
        """Change a booking's status.

        Args:
            booking: Booking to update.
            status: New status.

        Returns:
            Updated booking.
        """
        booking.status = status.value
        return await self.update(booking)

    async def delete(self, booking: Booking) -> None:
        """Delete a booking.

        Args:
            booking: Booking entity to delete.
        """
        await self._session.delete(booking)
        await self._session.flush()
