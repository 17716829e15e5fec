# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Calendar date helpers for half-open night ranges.

All dates are plain calendar dates (``YYYY-MM-DD``). Arithmetic is done on
:class:`datetime.date`, never on timestamps, so DST transitions cannot shift
a night onto a neighbouring day.
"""

import re
from datetime import date, timedelta

from src.errors import InvalidRangeError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_DAY_PATTERN = re.compile(r"^\d{2}-\d{2}$")

ONE_DAY = timedelta(days=1)


def parse_iso_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Args:
        value: ISO date string or date.

    Returns:
        Parsed date.

    Raises:
        InvalidRangeError: If the string is not a valid calendar date.
    """
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise InvalidRangeError(f"Bitte Datum als YYYY-MM-DD angeben: {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidRangeError(f"Ungültiges Datum: {value!r}") from e


def to_iso(value: date) -> str:
    """Format a date as ``YYYY-MM-DD``."""
    return value.isoformat()


def month_day(value: str | date) -> str:
    """Return the ``MM-DD`` recurrence key of a date."""
    d = parse_iso_date(value)
    return f"{d.month:02d}-{d.day:02d}"


def each_night(start: str | date, end: str | date) -> list[str]:
    """List every night in the half-open range ``[start, end)``.

    Args:
        start: First occupied night (check-in).
        end: Checkout day, not occupied.

    Returns:
        Ordered ISO dates. Empty when ``start >= end``.
    """
    current = parse_iso_date(start)
    stop = parse_iso_date(end)
    nights: list[str] = []
    while current < stop:
        nights.append(to_iso(current))
        current += ONE_DAY
    return nights


def ranges_overlap(
    start_a: str | date,
    end_a: str | date,
    start_b: str | date,
    end_b: str | date,
) -> bool:
    """Check whether two half-open ranges share at least one night."""
    return parse_iso_date(start_a) < parse_iso_date(end_b) and parse_iso_date(
        end_a
    ) > parse_iso_date(start_b)
