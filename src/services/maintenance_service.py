# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Operator tools for repairing inventory and hold state."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.models.booking import Booking
from src.repositories.booking_repository import BookingRepository
from src.repositories.hold_repository import HoldRepository
from src.repositories.inventory_repository import InventoryRepository
from src.services.pricing import nights_between
from src.utils.clock import Clock
from src.utils.dates import each_night, ranges_overlap

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Recovery operations outside the regular booking lifecycle.

    Each method commits its own transaction.
    """

    def __init__(self, session: AsyncSession, clock: Clock | None = None) -> None:
        """Initialize MaintenanceService.

        Args:
            session: Async database session.
            clock: Time source passed to the hold repository.
        """
        self._session = session
        self._bookings = BookingRepository(session)
        self._inventory = InventoryRepository(session)
        self._holds = HoldRepository(session, clock=clock)

    async def clear_inventory_range(self, property_id: int, start: str, end: str) -> int:
        """Delete every inventory row in ``[start, end)``, whoever owns it.

        Returns:
            Number of rows deleted.

        Raises:
            InvalidRangeError: If ``end`` is not after ``start``.
        """
        nights_between(start, end)
        try:
            deleted = await self._inventory.clear_range(property_id, start, end)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.warning(
            "Cleared %d inventory nights for property %s, %s..%s",
            deleted,
            property_id,
            start,
            end,
        )
        return deleted

    async def rebuild_inventory_from_approved(self, property_id: int) -> int:
        """Recreate the inventory ledger from approved bookings.

        All rows of the property are deleted, then every approved booking is
        replayed in start-date order. Approved bookings that overlap each
        other are logged; the later booking owns the shared nights.

        Returns:
            Number of nights occupied after the rebuild.
        """
        try:
            await self._inventory.clear_property(property_id)
            approved = list(await self._bookings.get_approved_for_property(property_id))
            self._log_overlaps(approved)
            for booking in approved:
                await self._inventory.block_nights_for_booking(
                    booking.id,
                    property_id,
                    booking.start_date,
                    booking.end_date,
                    replace=True,
                )
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        occupied = len(
            {n for b in approved for n in each_night(b.start_date, b.end_date)}
        )
        logger.info(
            "Rebuilt inventory for property %s from %d approved bookings "
            "(%d nights occupied)",
            property_id,
            len(approved),
            occupied,
        )
        return occupied

    async def release_holds(
        self,
        property_id: int,
        start: str | None = None,
        end: str | None = None,
    ) -> int:
        """Release public holds, all of them or those in ``[start, end)``.

        Returns:
            Number of holds deleted.
        """
        try:
            if start is None or end is None:
                released = await self._holds.release_all_for_property(property_id)
            else:
                nights_between(start, end)
                released = await self._holds.release_holds_for_range(
                    property_id, start, end
                )
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        logger.info("Released %d holds for property %s", released, property_id)
        return released

    def _log_overlaps(self, approved: list[Booking]) -> None:
        for i, first in enumerate(approved):
            for second in approved[i + 1 :]:
                if ranges_overlap(
                    first.start_date, first.end_date, second.start_date, second.end_date
                ):
                    logger.warning(
                        "Approved bookings %s and %s overlap; booking %s keeps "
                        "the shared nights",
                        first.id,
                        second.id,
                        second.id,
                    )
