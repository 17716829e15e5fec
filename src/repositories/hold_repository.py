# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Repository for public holds on requested nights."""

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import cast

from sqlalchemy import CursorResult, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import get_settings
from src.errors import InvalidRangeError, RangeAlreadyRequestedError
from src.models.public_hold import HoldStatus, PublicHold
from src.utils.clock import Clock, as_utc, get_clock
from src.utils.dates import each_night

logger = logging.getLogger(__name__)


class HoldRepository:
    """Short-lived per-night holds preventing concurrent double requests.

    Expiry is enforced only when reading: a hold whose ``expires_at`` is not
    in the future is treated as absent and may be overwritten.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Clock | None = None,
        ttl: timedelta | None = None,
    ) -> None:
        """Initialize repository.

        Args:
            session: Async SQLAlchemy session.
            clock: Time source. Defaults to the system clock.
            ttl: Hold lifetime. Defaults to ``hold_ttl_hours`` from settings.
        """
        self._session = session
        self._clock = clock or get_clock()
        self._ttl = ttl or timedelta(hours=get_settings().hold_ttl_hours)

    async def get_range(
        self, property_id: int, start: str, end: str
    ) -> Sequence[PublicHold]:
        """Get hold rows in ``[start, end)``, live or expired."""
        result = await self._session.execute(
            select(PublicHold)
            .where(
                PublicHold.property_id == property_id,
                PublicHold.night >= start,
                PublicHold.night < end,
            )
            .order_by(PublicHold.night)
        )
        return result.scalars().all()

    async def create_holds_for_range(
        self,
        property_id: int,
        start: str,
        end: str,
        booking_ref: int | None = None,
    ) -> list[str]:
        """Hold every night of ``[start, end)`` or none of them.

        All nights are read first; if any carries a live hold nothing is
        written. Expired rows are taken over with a compare-and-set update so
        that two transactions cannot both revive the same row, and new rows
        rely on the primary key to reject a concurrent insert.

        Args:
            property_id: Property to hold.
            start: First night.
            end: Checkout day (exclusive).
            booking_ref: Optional booking the holds belong to.

        Returns:
            The held nights.

        Raises:
            InvalidRangeError: If the range contains no night.
            RangeAlreadyRequestedError: If any night is already held.
        """
        nights = each_night(start, end)
        if not nights:
            raise InvalidRangeError()

        now = self._clock.now()
        expires_at = now + self._ttl
        existing = {hold.night: hold for hold in await self.get_range(property_id, start, end)}

        live = [night for night, hold in existing.items() if as_utc(hold.expires_at) > now]
        if live:
            logger.info(
                "Hold rejected for property %s, %s..%s: %d nights already held",
                property_id,
                start,
                end,
                len(live),
            )
            raise RangeAlreadyRequestedError(property_id, live)

        try:
            for night in nights:
                if night in existing:
                    await self._take_over_expired(
                        existing[night], now, expires_at, booking_ref
                    )
                else:
                    self._session.add(
                        PublicHold(
                            property_id=property_id,
                            night=night,
                            status=HoldStatus.REQUESTED.value,
                            expires_at=expires_at,
                            booking_ref=booking_ref,
                            created_at=now,
                        )
                    )
            await self._session.flush()
        except IntegrityError as e:
            logger.warning(
                "Concurrent hold for property %s, %s..%s", property_id, start, end
            )
            raise RangeAlreadyRequestedError(property_id, nights) from e

        logger.debug(
            "Held %d nights for property %s until %s",
            len(nights),
            property_id,
            expires_at.isoformat(),
        )
        return nights

    async def _take_over_expired(
        self,
        hold: PublicHold,
        now: datetime,
        expires_at: datetime,
        booking_ref: int | None,
    ) -> None:
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                update(PublicHold)
                .where(
                    PublicHold.property_id == hold.property_id,
                    PublicHold.night == hold.night,
                    PublicHold.expires_at <= now,
                )
                .values(
                    status=HoldStatus.REQUESTED.value,
                    expires_at=expires_at,
                    booking_ref=booking_ref,
                    created_at=now,
                )
                .execution_options(synchronize_session=False)
            ),
        )
        if result.rowcount != 1:
            raise RangeAlreadyRequestedError(hold.property_id, [hold.night])
        await self._session.refresh(hold)

    async def list_public_holds(
        self, property_id: int, from_date: str, to_date: str
    ) -> list[str]:
        """List nights in ``[from_date, to_date)`` with a live hold.

        Returns:
            Ordered ISO dates.
        """
        result = await self._session.execute(
            select(PublicHold.night)
            .where(
                PublicHold.property_id == property_id,
                PublicHold.night >= from_date,
                PublicHold.night < to_date,
                PublicHold.expires_at > self._clock.now(),
            )
            .order_by(PublicHold.night)
        )
        return list(result.scalars().all())

    async def has_live_hold(self, property_id: int, start: str, end: str) -> bool:
        """Check whether any night in ``[start, end)`` is held."""
        return bool(await self.list_public_holds(property_id, start, end))

    async def release_holds_for_range(
        self, property_id: int, start: str, end: str
    ) -> int:
        """Delete holds in ``[start, end)``, live or expired.

        Returns:
            Number of rows deleted.
        """
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                delete(PublicHold).where(
                    PublicHold.property_id == property_id,
                    PublicHold.night >= start,
                    PublicHold.night < end,
                )
            ),
        )
        await self._session.flush()
        return result.rowcount or 0

    async def release_all_for_property(self, property_id: int) -> int:
        """Delete every hold of a property.

        Returns:
            Number of rows deleted.
        """
        result = cast(
            "CursorResult[tuple[()]]",
            await self._session.execute(
                delete(PublicHold).where(PublicHold.property_id == property_id)
            ),
        )
        await self._session.flush()
        return result.rowcount or 0
