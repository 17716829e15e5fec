# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Unit tests for night enumeration and date helpers."""

from datetime import date

import pytest
from src.errors import InvalidRangeError
from src.utils.dates import each_night, month_day, parse_iso_date, ranges_overlap


class TestEachNight:
    """Tests for each_night."""

    def test_excludes_checkout_day(self):
        """Test that the checkout day is not a night."""
        assert each_night("2025-07-01", "2025-07-04") == [
            "2025-07-01",
            "2025-07-02",
            "2025-07-03",
        ]

    def test_empty_when_start_equals_end(self):
        """Test that a zero-length range has no nights."""
        assert each_night("2025-07-01", "2025-07-01") == []

    def test_empty_when_end_before_start(self):
        """Test that a reversed range has no nights."""
        assert each_night("2025-07-05", "2025-07-01") == []

    def test_crosses_month_and_year(self):
        """Test enumeration across a year boundary."""
        assert each_night("2025-12-30", "2026-01-02") == [
            "2025-12-30",
            "2025-12-31",
            "2026-01-01",
        ]

    def test_dst_change_does_not_skip_or_repeat(self):
        """Test that the spring DST switch still yields one entry per day."""
        nights = each_night("2025-03-29", "2025-04-01")
        assert nights == ["2025-03-29", "2025-03-30", "2025-03-31"]

    def test_leap_day(self):
        """Test that February 29th is enumerated in leap years."""
        assert "2024-02-29" in each_night("2024-02-28", "2024-03-01")

    def test_accepts_date_objects(self):
        """Test that date objects are accepted."""
        assert each_night(date(2025, 1, 1), date(2025, 1, 2)) == ["2025-01-01"]


class TestParseIsoDate:
    """Tests for parse_iso_date."""

    def test_parses_valid_date(self):
        """Test parsing a valid ISO date."""
        assert parse_iso_date("2025-06-10") == date(2025, 6, 10)

    @pytest.mark.parametrize(
        "value", ["2025-6-10", "10.06.2025", "2025-02-30", "", "2025-06-10T00:00"]
    )
    def test_rejects_malformed(self, value):
        """Test that malformed or impossible dates are rejected."""
        with pytest.raises(InvalidRangeError):
            parse_iso_date(value)


class TestMonthDay:
    """Tests for month_day."""

    def test_zero_padded(self):
        """Test that month and day are zero padded."""
        assert month_day("2026-01-02") == "01-02"


class TestRangesOverlap:
    """Tests for ranges_overlap."""

    def test_touching_ranges_do_not_overlap(self):
        """Test that checkout day equal to the next check-in is no overlap."""
        assert not ranges_overlap("2025-07-01", "2025-07-05", "2025-07-05", "2025-07-08")

    def test_shared_night_overlaps(self):
        """Test that one shared night is an overlap."""
        assert ranges_overlap("2025-07-01", "2025-07-05", "2025-07-04", "2025-07-08")
