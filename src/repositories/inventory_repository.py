# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Repository for the inventory ledger of confirmed nights."""

import logging
from collections.abc import Sequence
from typing import cast

from sqlalchemy import CursorResult, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import RangeAlreadyConfirmedError
from src.models.booking import Booking
from src.models.inventory_night import InventoryNight
from src.utils.dates import each_night

logger = logging.getLogger(__name__)


class InventoryRepository:
    """Per-property, per-night record of confirmed occupancy.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self._session = session

    async def is_free_range(self, property_id: int, start: str, end: str) -> bool:
        """Check that no night in ``[start, end)`` is confirmed.

        Args:
            property_id: Property to check.
            start: First night.
            end: Checkout day (exclusive).

        Returns:
            True if no inventory row exists in the range.
        """
        result = await self._session.execute(
            select(func.count())
            .select_from(InventoryNight)
            .where(
                InventoryNight.property_id == property_id,
                InventoryNight.night >= start,
                InventoryNight.night < end,
            )
        )
        return result.scalar_one() == 0

    async def get_range(
        self, property_id: int, start: str, end: str
    ) -> Sequence[InventoryNight]:
        """Get inventory rows in ``[start, end)`` ordered by night."""
        result = await self._session.execute(
            select(InventoryNight)
            .where(
                InventoryNight.property_id == property_id,
                InventoryNight.night >= start,
                InventoryNight.night < end,
            )
            .order_by(InventoryNight.night)
        )
        return result.scalars().all()

    async def list_occupied_nights(
        self, property_id: int, from_date: str, to_date: str
    ) -> list[str]:
        """List confirmed nights in ``[from_date, to_date)``."""
        return [row.night for row in await self.get_range(property_id, from_date, to_date)]

    async def block_nights_for_booking(
        self,
        booking_id: int | None,
        property_id: int,
        start: str,
        end: str,
        replace: bool = False,
    ) -> int:
        """Write one inventory row per night, tagged with the booking.

        Nights already owned by the same booking are kept, so repeating the
        call is harmless. A night owned by anyone else is a conflict and
        nothing is written. With ``replace`` the rows are merged instead and
        existing owners are overwritten; only a full rebuild does that.

        Args:
            booking_id: Owning booking, or None for untagged rows.
            property_id: Property of the booking.
            start: First night.
            end: Checkout day (exclusive).
            replace: Overwrite nights owned by other bookings.

        Returns:
            Number of nights covered.

        Raises:
            RangeAlreadyConfirmedError: If a night belongs to another booking,
                including one inserted by a concurrent transaction.
        """
        nights = each_night(start, end)
        try:
            if replace:
                for night in nights:
                    await self._session.merge(
                        InventoryNight(
                            property_id=property_id,
                            night=night,
                            booking_id=booking_id,
                        )
                    )
            else:
                existing = {
                    row.night: row.booking_id
                    for row in await self.get_range(property_id, start, end)
                }
                taken = [n for n, owner in existing.items() if owner != booking_id]
                if taken:
                    raise RangeAlreadyConfirmedError(property_id, taken)
                for night in nights:
                    if night not in existing:
                        self._session.add(
                            InventoryNight(
                                property_id=property_id,
                                night=night,
                                booking_id=booking_id,
                            )
                        )
            await self._session.flush()
        except IntegrityError as e:
            logger.warning(
                "Concurrent inventory write for property %s, %s..%s",
                property_id,
                start,
                end,
            )
            raise RangeAlreadyConfirmedError(property_id, nights) from e
        return len(nights)

    async def free_nights_for_booking(self, booking: Booking) -> int:
        """Delete the booking's inventory rows.

        Rows owned by another booking are left alone, so a rebuild that
        reassigned a night cannot be undone by a stale cancel. Calling this
        twice is a no-op the second time.

        Args:
            booking: Booking whose nights to free.

        Returns:
            Number of rows deleted.
        """
        nights = each_night(booking.start_date, booking.end_date)
        if not nights:
            return 0
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                delete(InventoryNight).where(
                    InventoryNight.property_id == booking.property_id,
                    InventoryNight.night.in_(nights),
                    or_(
                        InventoryNight.booking_id.is_(None),
                        InventoryNight.booking_id == booking.id,
                    ),
                )
            ),
        )
        await self._session.flush()
        return result.rowcount or 0

    async def clear_range(self, property_id: int, start: str, end: str) -> int:
        """Unconditionally delete inventory rows in ``[start, end)``.

        Returns:
            Number of rows deleted.
        """
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                delete(InventoryNight).where(
                    InventoryNight.property_id == property_id,
                    InventoryNight.night >= start,
                    InventoryNight.night < end,
                )
            ),
        )
        await self._session.flush()
        return result.rowcount or 0

    async def clear_property(self, property_id: int) -> int:
        """Unconditionally delete every inventory row of a property.

        Returns:
            Number of rows deleted.
        """
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                delete(InventoryNight).where(InventoryNight.property_id == property_id)
            ),
        )
        await self._session.flush()
        return result.rowcount or 0
