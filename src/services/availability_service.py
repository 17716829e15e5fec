# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Read-only availability and price queries for the booking calendar."""

import logging
from collections.abc import Iterable, Sequence
from datetime import timedelta

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings, get_settings
from src.errors import PropertyNotFoundError
from src.models.booking import Booking, BookingStatus
from src.models.property import Property
from src.repositories.booking_repository import BookingRepository
from src.repositories.hold_repository import HoldRepository
from src.repositories.inventory_repository import InventoryRepository
from src.repositories.property_repository import PropertyRepository
from src.schemas import PriceSummary, PropertyRates, SeasonRate, TaxBand
from src.services.pricing import (
    MatchPolicy,
    StayPrice,
    TouristTax,
    min_nights_required,
    nights_between,
    price_for_stay,
    summarize,
    tourist_tax_for_stay,
)
from src.utils.clock import Clock, get_clock
from src.utils.dates import parse_iso_date

logger = logging.getLogger(__name__)


class StayQuote(BaseModel):
    """Price, tax and availability of a candidate stay."""

    property_id: int
    start_date: str
    end_date: str
    adults: int
    price: StayPrice
    tax: TouristTax
    summary: PriceSummary
    min_nights: int
    available: bool


class AvailabilityService:
    """Answers "is this range free" and "which nights are taken".

    Nights are unavailable when they carry a confirmed inventory row or a
    live public hold. This service never writes.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Clock | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize AvailabilityService.

        Args:
            session: Async database session.
            clock: Time source for hold expiry. Defaults to the system clock.
            settings: Application settings. Defaults to the cached settings.
        """
        self._settings = settings or get_settings()
        self._clock = clock or get_clock()
        self._properties = PropertyRepository(session)
        self._bookings = BookingRepository(session)
        self._inventory = InventoryRepository(session)
        self._holds = HoldRepository(
            session,
            clock=self._clock,
            ttl=timedelta(hours=self._settings.hold_ttl_hours),
        )

    async def is_range_available(self, property_id: int, start: str, end: str) -> bool:
        """Check that no night of ``[start, end)`` is confirmed or held.

        Raises:
            InvalidRangeError: If ``end`` is not after ``start``.
        """
        nights_between(start, end)
        if not await self._inventory.is_free_range(property_id, start, end):
            return False
        return not await self._holds.has_live_hold(property_id, start, end)

    async def list_unavailable_nights(
        self, property_id: int, from_date: str, to_date: str
    ) -> list[str]:
        """List nights in ``[from_date, to_date)`` that cannot be requested.

        Args:
            property_id: Property to query.
            from_date: Window start (inclusive).
            to_date: Window end (exclusive).

        Returns:
            Sorted, de-duplicated ISO dates from inventory and live holds.
        """
        parse_iso_date(from_date)
        parse_iso_date(to_date)
        occupied = await self._inventory.list_occupied_nights(
            property_id, from_date, to_date
        )
        held = await self._holds.list_public_holds(property_id, from_date, to_date)
        return sorted(set(occupied) | set(held))

    async def list_approved_bookings(
        self,
        property_id: int,
        from_date: str | None = None,
        to_date: str | None = None,
    ) -> Sequence[Booking]:
        """List approved bookings, optionally limited to an overlap window."""
        if from_date is None or to_date is None:
            return await self._bookings.get_approved_for_property(property_id)
        return await self._bookings.get_overlapping(
            property_id, from_date, to_date, [BookingStatus.APPROVED]
        )

    async def list_bookings(
        self,
        property_id: int,
        statuses: Iterable[str] | None = None,
    ) -> Sequence[Booking]:
        """List every booking of a property, optionally filtered by status."""
        return await self._bookings.get_for_property(property_id, statuses)

    async def list_overlap_bookings(
        self,
        property_id: int,
        from_date: str,
        to_date: str,
        statuses: Iterable[str] | None = None,
    ) -> Sequence[Booking]:
        """List bookings sharing a night with ``[from_date, to_date)``.

        Args:
            property_id: Property to query.
            from_date: Window start (inclusive).
            to_date: Window end (exclusive).
            statuses: Optional status filter; all statuses when None.

        Returns:
            Bookings ordered by start date.
        """
        parse_iso_date(from_date)
        parse_iso_date(to_date)
        return await self._bookings.get_overlapping(
            property_id, from_date, to_date, statuses
        )

    async def get_property(self, property_id: int) -> Property:
        """Get a property or raise.

        Raises:
            PropertyNotFoundError: If the property does not exist.
        """
        prop = await self._properties.get_by_id(property_id)
        if prop is None:
            raise PropertyNotFoundError(f"Property {property_id} not found")
        return prop

    async def load_seasons(self, property_id: int) -> list[SeasonRate]:
        """Load a property's seasons as validated records."""
        return [
            SeasonRate.model_validate(season)
            for season in await self._properties.list_seasons(property_id)
        ]

    async def load_tax_bands(self, property_id: int) -> list[TaxBand]:
        """Load a property's tourist-tax bands as validated records."""
        return [
            TaxBand.model_validate(band)
            for band in await self._properties.list_tax_bands(property_id)
        ]

    async def quote(
        self,
        property_id: int,
        start: str,
        end: str,
        adults: int = 2,
    ) -> StayQuote:
        """Price a candidate stay from the stored seasons and tax bands.

        Args:
            property_id: Property to quote.
            start: Check-in date.
            end: Checkout date.
            adults: Persons liable for tourist tax.

        Returns:
            Quote including the minimum stay and current availability.

        Raises:
            InvalidRangeError: If ``end`` is not after ``start``.
            PropertyNotFoundError: If the property does not exist.
        """
        nights_between(start, end)
        prop = await self.get_property(property_id)
        rates = PropertyRates.model_validate(prop)
        seasons = await self.load_seasons(property_id)
        bands = await self.load_tax_bands(property_id)

        season_policy = MatchPolicy(self._settings.season_match_policy)
        band_policy = MatchPolicy(self._settings.tax_band_match_policy)
        price = price_for_stay(
            rates,
            seasons,
            start,
            end,
            season_policy,
            default_currency=self._settings.default_currency,
        )
        tax = tourist_tax_for_stay(bands, start, end, adults, band_policy)
        min_nights = max(
            self._settings.min_stay_nights,
            min_nights_required(seasons, start, end, season_policy),
        )

        logger.debug(
            "Quoted property %s %s..%s: %s %s",
            property_id,
            start,
            end,
            price.total + tax.total,
            price.currency,
        )
        return StayQuote(
            property_id=property_id,
            start_date=start,
            end_date=end,
            adults=adults,
            price=price,
            tax=tax,
            summary=summarize(price, tax),
            min_nights=min_nights,
            available=await self.is_range_available(property_id, start, end),
        )
