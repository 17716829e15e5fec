# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Validated records exchanged between storage, pricing and the API.

ORM rows are converted into these models with ``model_validate(row)`` before
they reach the pricing engine, so malformed dates, negative rates and empty
ranges are rejected at the boundary instead of deep inside a calculation.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    model_validator,
)

from src.utils.dates import MONTH_DAY_PATTERN, parse_iso_date


def _check_iso_date(value: str) -> str:
    parse_iso_date(value)
    return value


def _check_month_day(value: str) -> str:
    if not MONTH_DAY_PATTERN.match(value):
        raise ValueError("Bitte als MM-DD angeben (z. B. 01-01 für 1. Januar)")
    month, day = (int(part) for part in value.split("-"))
    # 2000 is a leap year, so 02-29 is accepted
    try:
        date(2000, month, day)
    except ValueError as e:
        raise ValueError(f"Ungültiger Monat-Tag: {value!r}") from e
    return value


def _day_of_year(md: str) -> int:
    month, day = (int(part) for part in md.split("-"))
    return date(2000, month, day).timetuple().tm_yday


IsoDate = Annotated[str, AfterValidator(_check_iso_date)]
MonthDay = Annotated[str, AfterValidator(_check_month_day)]
Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
Rate = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=4)]


class _DateRangeModel(BaseModel):
    """Mixin validating a half-open ``[start_date, end_date)`` range."""

    @model_validator(mode="after")
    def _check_range(self) -> Any:
        start = getattr(self, "start_date", None)
        end = getattr(self, "end_date", None)
        if start is not None and end is not None and end <= start:
            raise ValueError("end_date must be after start_date (at least 1 night)")
        return self


class PropertyRates(BaseModel):
    """Pricing-relevant fields of a property."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int | None = None
    name: str = ""
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    default_nightly_rate: Money
    cleaning_fee: Money = Decimal("0")
    max_guests: int = Field(default=1, ge=1)


class SeasonRate(_DateRangeModel):
    """Nightly rate override for a date range."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int | None = None
    name: str = ""
    start_date: IsoDate
    end_date: IsoDate
    nightly_rate: Money
    min_nights: int | None = Field(default=None, ge=1)
    created_at: datetime | None = None

    def covers(self, night: str) -> bool:
        """Check whether the night falls inside ``[start_date, end_date)``."""
        return self.start_date <= night < self.end_date

    @property
    def span_days(self) -> int:
        """Number of nights the season covers."""
        return (parse_iso_date(self.end_date) - parse_iso_date(self.start_date)).days


class MonthDayRange(BaseModel):
    """Recurring yearly window, ``end_md`` exclusive.

    ``start_md > end_md`` wraps over New Year, e.g. ``12-25``..``01-07``.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    start_md: MonthDay
    end_md: MonthDay

    @model_validator(mode="after")
    def _check_not_empty(self) -> "MonthDayRange":
        if self.start_md == self.end_md:
            raise ValueError("start_md and end_md must differ")
        return self

    def contains(self, md: str) -> bool:
        """Check whether a ``MM-DD`` key lies in this window."""
        if self.start_md <= self.end_md:
            return self.start_md <= md < self.end_md
        return md >= self.start_md or md < self.end_md

    @property
    def span_days(self) -> int:
        """Number of days covered, counted in a leap year."""
        days = _day_of_year(self.end_md) - _day_of_year(self.start_md)
        return days if days > 0 else days + 366


class TaxBand(BaseModel):
    """Tourist-tax band charged per adult and night."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int | None = None
    zone: str = "Kurzone 1"
    label: str = Field(min_length=1)
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    rate: Rate
    ranges: list[MonthDayRange] = Field(min_length=1)
    created_at: datetime | None = None

    def covers(self, md: str) -> bool:
        """Check whether any of the band's windows contains ``md``."""
        return any(r.contains(md) for r in self.ranges)

    @property
    def span_days(self) -> int:
        """Total days covered by all windows."""
        return sum(r.span_days for r in self.ranges)


class Address(BaseModel):
    """Postal address, all parts optional."""

    street: str = ""
    zip: str = ""
    city: str = ""
    country: str = ""


class Contact(BaseModel):
    """Guest contact details."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(default="", max_length=50)
    address: Address = Field(default_factory=Address)


class PriceSummary(BaseModel):
    """Price snapshot stored with a booking."""

    nights: int = Field(ge=0)
    nightly_total: Money
    cleaning_fee: Money
    tourist_tax: Money
    grand_total: Money
    currency: str = "EUR"


class BookingCreate(_DateRangeModel):
    """Guest booking request."""

    property_id: int
    start_date: IsoDate
    end_date: IsoDate
    adults: int = Field(default=2, ge=0)
    children: int = Field(default=0, ge=0)
    contact: Contact
    message: str = Field(default="", max_length=5000)
    summary: PriceSummary | None = Field(
        default=None,
        description="Client-computed price snapshot, advisory only",
    )


class PropertyCreate(BaseModel):
    """Operator input for a new property."""

    name: str = Field(min_length=2, max_length=255)
    slug: str = Field(min_length=2, max_length=100)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    default_nightly_rate: Money
    cleaning_fee: Money = Decimal("0")
    max_guests: int = Field(default=1, ge=1)
    check_in_hour: int = Field(default=15, ge=0, le=23)
    check_out_hour: int = Field(default=10, ge=0, le=23)
    address: Address = Field(default_factory=Address)
    description: str = ""


class SeasonCreate(_DateRangeModel):
    """Operator input for a new season."""

    name: str = Field(min_length=1, max_length=255)
    start_date: IsoDate
    end_date: IsoDate
    nightly_rate: Money
    min_nights: int | None = Field(default=None, ge=1)


class TaxBandCreate(BaseModel):
    """Operator input for a new tourist-tax band."""

    zone: str = Field(default="Kurzone 1", min_length=1)
    label: str = Field(min_length=1)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    rate: Rate
    ranges: list[MonthDayRange] = Field(min_length=1)


class PropertyUpdate(BaseModel):
    """Operator input for changing a property; omitted fields are kept."""

    name: str | None = Field(default=None, min_length=2, max_length=255)
    slug: str | None = Field(default=None, min_length=2, max_length=100)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    default_nightly_rate: Money | None = None
    cleaning_fee: Money | None = None
    max_guests: int | None = Field(default=None, ge=1)
    check_in_hour: int | None = Field(default=None, ge=0, le=23)
    check_out_hour: int | None = Field(default=None, ge=0, le=23)
    address: Address | None = None
    description: str | None = None
