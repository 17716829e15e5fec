# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Pricing engine: nightly rates and tourist tax for a stay.

Everything in this module is synchronous and touches no storage. Amounts are
:class:`~decimal.Decimal` so that summing many nights never drifts.
"""

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from typing import TypeVar

from pydantic import BaseModel

from src.config import get_settings
from src.errors import InvalidRangeError
from src.schemas import PriceSummary, PropertyRates, SeasonRate, TaxBand
from src.utils.dates import each_night, month_day, parse_iso_date

ZERO = Decimal("0")

_T = TypeVar("_T", SeasonRate, TaxBand)


class MatchPolicy(StrEnum):
    """Tie-break when several seasons or tax bands cover the same night.

    FIRST: the first candidate in the given order wins. Repositories return
    seasons ordered by ``(start_date, id)`` and bands by ``(zone, id)``.
    NARROWEST: the candidate covering the fewest days wins.
    LATEST: the most recently created candidate wins.
    Remaining ties always fall back to the given order.
    """

    FIRST = "first"
    NARROWEST = "narrowest"
    LATEST = "latest"


class PriceNight(BaseModel):
    """Rate applied to one night."""

    date: str
    nightly_rate: Decimal
    season_id: int | None = None


class StayPrice(BaseModel):
    """Accommodation price for a stay."""

    nights: int
    nights_total: Decimal
    cleaning_fee: Decimal
    total: Decimal
    currency: str
    breakdown: list[PriceNight]


class TaxNight(BaseModel):
    """Tourist tax charged for one night."""

    date: str
    per_person: Decimal
    persons: int
    total: Decimal
    band_id: int | None = None
    band_label: str | None = None


class TouristTax(BaseModel):
    """Tourist tax for a stay."""

    nights: int
    total: Decimal
    breakdown: list[TaxNight]


def nights_between(start: str, end: str) -> int:
    """Count charged nights between check-in and checkout.

    Args:
        start: Check-in date (``YYYY-MM-DD``).
        end: Checkout date (``YYYY-MM-DD``).

    Returns:
        Number of nights, at least 1.

    Raises:
        InvalidRangeError: If ``end`` is not after ``start``.
    """
    nights = (parse_iso_date(end) - parse_iso_date(start)).days
    if nights <= 0:
        raise InvalidRangeError()
    return nights


def _created_key(candidate: SeasonRate | TaxBand) -> datetime:
    value = candidate.created_at
    if value is None:
        return datetime.min.replace(tzinfo=UTC)
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _pick(
    candidates: Sequence[_T],
    matches: Callable[[_T], bool],
    policy: MatchPolicy,
) -> _T | None:
    """Select the winning candidate for one night under ``policy``."""
    matching = [c for c in candidates if matches(c)]
    if not matching:
        return None
    if policy is MatchPolicy.NARROWEST:
        # min() keeps the first of equal keys
        return min(matching, key=lambda c: c.span_days)
    if policy is MatchPolicy.LATEST:
        return max(matching, key=_created_key)
    return matching[0]


def season_for_date(
    night: str,
    seasons: Sequence[SeasonRate],
    policy: MatchPolicy = MatchPolicy.FIRST,
) -> SeasonRate | None:
    """Find the season that applies to a night, if any."""
    return _pick(seasons, lambda s: s.covers(night), policy)


def band_for_date(
    night: str,
    bands: Sequence[TaxBand],
    policy: MatchPolicy = MatchPolicy.FIRST,
) -> TaxBand | None:
    """Find the tourist-tax band that applies to a night, if any."""
    md = month_day(night)
    return _pick(bands, lambda b: b.covers(md), policy)


def price_for_stay(
    rates: PropertyRates,
    seasons: Sequence[SeasonRate],
    start: str,
    end: str,
    policy: MatchPolicy = MatchPolicy.FIRST,
    default_currency: str | None = None,
) -> StayPrice:
    """Calculate the accommodation price of a stay.

    Seasons override the property's default nightly rate for the nights they
    cover. The cleaning fee is added once.

    Args:
        rates: Property rates.
        seasons: Candidate seasons, in tie-break order.
        start: Check-in date.
        end: Checkout date.
        policy: Tie-break for overlapping seasons.
        default_currency: Currency when the property has none. Defaults to
            the ``default_currency`` setting.

    Returns:
        Price with one breakdown entry per night.

    Raises:
        InvalidRangeError: If ``end`` is not after ``start``.
    """
    nights = nights_between(start, end)
    breakdown: list[PriceNight] = []
    nights_total = ZERO

    for night in each_night(start, end):
        season = season_for_date(night, seasons, policy)
        rate = season.nightly_rate if season else rates.default_nightly_rate
        nights_total += rate
        breakdown.append(
            PriceNight(
                date=night,
                nightly_rate=rate,
                season_id=season.id if season else None,
            )
        )

    cleaning_fee = rates.cleaning_fee or ZERO
    currency = rates.currency or default_currency or get_settings().default_currency
    return StayPrice(
        nights=nights,
        nights_total=nights_total,
        cleaning_fee=cleaning_fee,
        total=nights_total + cleaning_fee,
        currency=currency,
        breakdown=breakdown,
    )


def tourist_tax_for_stay(
    bands: Sequence[TaxBand],
    start: str,
    end: str,
    adults: int,
    policy: MatchPolicy = MatchPolicy.FIRST,
) -> TouristTax:
    """Calculate tourist tax for a stay.

    Only adults (16 and older) are charged. A night matched by no band is
    free of tax.

    Args:
        bands: Candidate tax bands, in tie-break order.
        start: Check-in date.
        end: Checkout date.
        adults: Number of chargeable persons.
        policy: Tie-break for overlapping bands.

    Returns:
        Tax with one breakdown entry per night.

    Raises:
        InvalidRangeError: If ``end`` is not after ``start``.
    """
    nights = nights_between(start, end)
    persons = max(0, adults)
    breakdown: list[TaxNight] = []
    total = ZERO

    for night in each_night(start, end):
        band = band_for_date(night, bands, policy)
        per_person = band.rate if band else ZERO
        night_total = per_person * persons
        total += night_total
        breakdown.append(
            TaxNight(
                date=night,
                per_person=per_person,
                persons=persons,
                total=night_total,
                band_id=band.id if band else None,
                band_label=band.label if band else None,
            )
        )

    return TouristTax(nights=nights, total=total, breakdown=breakdown)


def min_nights_required(
    seasons: Sequence[SeasonRate],
    start: str,
    end: str,
    policy: MatchPolicy = MatchPolicy.FIRST,
) -> int:
    """Return the largest ``min_nights`` among seasons applied to the stay.

    Raises:
        InvalidRangeError: If ``end`` is not after ``start``.
    """
    nights_between(start, end)
    required = 1
    for night in each_night(start, end):
        season = season_for_date(night, seasons, policy)
        if season and season.min_nights and season.min_nights > required:
            required = season.min_nights
    return required


def summarize(price: StayPrice, tax: TouristTax) -> PriceSummary:
    """Build the price snapshot stored with a booking."""
    return PriceSummary(
        nights=price.nights,
        nightly_total=price.nights_total,
        cleaning_fee=price.cleaning_fee,
        tourist_tax=_round_money(tax.total),
        grand_total=_round_money(price.total + tax.total),
        currency=price.currency,
    )


def _round_money(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"))
