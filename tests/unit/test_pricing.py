# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Unit tests for the pricing engine."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from src.config import get_settings
from src.errors import InvalidRangeError
from src.schemas import MonthDayRange, PropertyRates, SeasonRate, TaxBand
from src.services.pricing import (
    MatchPolicy,
    band_for_date,
    min_nights_required,
    nights_between,
    price_for_stay,
    season_for_date,
    summarize,
    tourist_tax_for_stay,
)


@pytest.fixture
def rates() -> PropertyRates:
    """Property rates: 140 per night, 110 cleaning fee."""
    return PropertyRates(
        id=1,
        name="Seeblick",
        currency="EUR",
        default_nightly_rate=Decimal("140"),
        cleaning_fee=Decimal("110"),
        max_guests=4,
    )


def _season(
    season_id: int,
    start: str,
    end: str,
    rate: str,
    min_nights: int | None = None,
    created: datetime | None = None,
) -> SeasonRate:
    return SeasonRate(
        id=season_id,
        name=f"Season {season_id}",
        start_date=start,
        end_date=end,
        nightly_rate=Decimal(rate),
        min_nights=min_nights,
        created_at=created,
    )


def _band(band_id: int, rate: str, *ranges: tuple[str, str], created=None) -> TaxBand:
    return TaxBand(
        id=band_id,
        label=f"Band {band_id}",
        rate=Decimal(rate),
        ranges=[MonthDayRange(start_md=s, end_md=e) for s, e in ranges],
        created_at=created,
    )


class TestNightsBetween:
    """Tests for nights_between."""

    def test_counts_nights(self):
        """Test night count of a three-night stay."""
        assert nights_between("2025-07-01", "2025-07-04") == 3

    @pytest.mark.parametrize("end", ["2025-07-01", "2025-06-30"])
    def test_rejects_empty_or_reversed(self, end):
        """Test that zero or negative stays are rejected."""
        with pytest.raises(InvalidRangeError):
            nights_between("2025-07-01", end)


class TestPriceForStay:
    """Tests for price_for_stay."""

    def test_default_rate_and_cleaning_fee(self, rates):
        """Test a stay without seasons: 3 x 140 + 110."""
        price = price_for_stay(rates, [], "2025-07-01", "2025-07-04")

        assert price.nights == 3
        assert price.nights_total == Decimal("420")
        assert price.cleaning_fee == Decimal("110")
        assert price.total == Decimal("530")
        assert price.currency == "EUR"
        assert [n.date for n in price.breakdown] == [
            "2025-07-01",
            "2025-07-02",
            "2025-07-03",
        ]
        assert all(n.season_id is None for n in price.breakdown)

    def test_currency_falls_back_to_default(self):
        """Test that a property without a currency uses the given default."""
        rates = PropertyRates(default_nightly_rate=Decimal("80"))

        price = price_for_stay(
            rates, [], "2025-07-01", "2025-07-03", default_currency="CHF"
        )

        assert price.currency == "CHF"

    def test_currency_falls_back_to_setting(self):
        """Test that without an explicit default the setting applies."""
        rates = PropertyRates(default_nightly_rate=Decimal("80"))

        price = price_for_stay(rates, [], "2025-07-01", "2025-07-03")

        assert price.currency == get_settings().default_currency

    def test_property_currency_wins(self, rates):
        """Test that the property's own currency beats the default."""
        price = price_for_stay(
            rates, [], "2025-07-01", "2025-07-03", default_currency="CHF"
        )

        assert price.currency == "EUR"

    def test_season_end_is_exclusive(self, rates):
        """Test that a season's end date is charged at the default rate."""
        season = _season(7, "2025-06-01", "2025-06-10", "200")
        price = price_for_stay(rates, [season], "2025-06-08", "2025-06-12")

        by_date = {n.date: n for n in price.breakdown}
        assert by_date["2025-06-08"].nightly_rate == Decimal("200")
        assert by_date["2025-06-09"].nightly_rate == Decimal("200")
        assert by_date["2025-06-09"].season_id == 7
        assert by_date["2025-06-10"].nightly_rate == Decimal("140")
        assert by_date["2025-06-10"].season_id is None
        assert price.nights_total == Decimal("680")

    def test_season_start_is_inclusive(self, rates):
        """Test that the first night of a season uses its rate."""
        season = _season(7, "2025-06-01", "2025-06-10", "200")
        assert season_for_date("2025-06-01", [season]) is season
        assert season_for_date("2025-05-31", [season]) is None

    def test_many_nights_do_not_drift(self, rates):
        """Test that fractional rates sum exactly over a long stay."""
        season = _season(1, "2025-01-01", "2026-01-01", "99.99")
        price = price_for_stay(rates, [season], "2025-01-01", "2025-04-11")
        assert price.nights == 100
        assert price.nights_total == Decimal("9999.00")

    def test_rejects_invalid_range(self, rates):
        """Test that an empty stay is rejected."""
        with pytest.raises(InvalidRangeError):
            price_for_stay(rates, [], "2025-07-04", "2025-07-04")


class TestMatchPolicy:
    """Tests for overlapping season and band resolution."""

    @pytest.fixture
    def overlapping(self) -> list[SeasonRate]:
        """A wide early season and a narrow later one."""
        return [
            _season(
                1, "2025-06-01", "2025-07-01", "100",
                created=datetime(2025, 1, 1, tzinfo=UTC),
            ),
            _season(
                2, "2025-06-10", "2025-06-15", "200",
                created=datetime(2025, 2, 1, tzinfo=UTC),
            ),
        ]

    def test_first_uses_given_order(self, overlapping):
        """Test that FIRST picks the first season in the given order."""
        season = season_for_date("2025-06-12", overlapping, MatchPolicy.FIRST)
        assert season.id == 1

    def test_narrowest_prefers_shorter_season(self, overlapping):
        """Test that NARROWEST picks the season with fewer nights."""
        season = season_for_date("2025-06-12", overlapping, MatchPolicy.NARROWEST)
        assert season.id == 2

    def test_latest_prefers_newest_season(self, overlapping):
        """Test that LATEST picks the most recently created season."""
        reordered = list(reversed(overlapping))
        season = season_for_date("2025-06-12", reordered, MatchPolicy.LATEST)
        assert season.id == 2

    def test_latest_falls_back_to_order_without_timestamps(self):
        """Test that LATEST keeps the given order when timestamps are missing."""
        seasons = [
            _season(1, "2025-06-01", "2025-07-01", "100"),
            _season(2, "2025-06-01", "2025-07-01", "200"),
        ]
        assert season_for_date("2025-06-12", seasons, MatchPolicy.LATEST).id == 1

    def test_narrowest_band(self):
        """Test NARROWEST with tax bands."""
        bands = [
            _band(1, "2.00", ("01-01", "12-31")),
            _band(2, "3.00", ("07-01", "09-01")),
        ]
        assert band_for_date("2025-07-15", bands, MatchPolicy.NARROWEST).id == 2
        assert band_for_date("2025-07-15", bands, MatchPolicy.FIRST).id == 1


class TestTouristTaxForStay:
    """Tests for tourist_tax_for_stay."""

    def test_two_adults_two_nights(self):
        """Test 2 nights x 2 adults x 2.50."""
        band = _band(1, "2.5", ("04-01", "11-01"))
        tax = tourist_tax_for_stay([band], "2025-07-01", "2025-07-03", adults=2)

        assert tax.nights == 2
        assert tax.total == Decimal("10.0")
        assert [n.band_id for n in tax.breakdown] == [1, 1]
        assert all(n.persons == 2 for n in tax.breakdown)

    def test_zero_adults_is_free(self):
        """Test that zero adults pay no tax."""
        band = _band(1, "2.5", ("01-01", "12-31"))
        tax = tourist_tax_for_stay([band], "2025-07-01", "2025-07-03", adults=0)
        assert tax.total == Decimal("0")

    def test_negative_adults_is_free(self):
        """Test that a negative adult count is treated as zero."""
        band = _band(1, "2.5", ("01-01", "12-31"))
        tax = tourist_tax_for_stay([band], "2025-07-01", "2025-07-03", adults=-1)
        assert tax.total == Decimal("0")

    def test_year_wrap_range(self):
        """Test a range from 12-20 to 01-05 across New Year."""
        band = _band(1, "1.00", ("12-20", "01-05"))

        assert band_for_date("2025-12-25", [band]) is band
        assert band_for_date("2026-01-02", [band]) is band
        assert band_for_date("2026-01-05", [band]) is None
        assert band_for_date("2026-01-10", [band]) is None

    def test_night_outside_all_bands_is_free(self):
        """Test that nights matched by no band carry no tax."""
        band = _band(1, "2.5", ("04-01", "11-01"))
        tax = tourist_tax_for_stay([band], "2025-10-31", "2025-11-02", adults=2)

        assert tax.total == Decimal("5.0")
        assert tax.breakdown[1].band_id is None
        assert tax.breakdown[1].per_person == Decimal("0")

    def test_band_with_several_ranges(self):
        """Test that a band applies in each of its windows."""
        band = _band(1, "1.50", ("01-01", "03-01"), ("11-01", "12-01"))
        assert band_for_date("2025-02-14", [band]) is band
        assert band_for_date("2025-11-14", [band]) is band
        assert band_for_date("2025-07-14", [band]) is None


class TestMinNightsRequired:
    """Tests for min_nights_required."""

    def test_defaults_to_one(self):
        """Test that a stay without seasons requires one night."""
        assert min_nights_required([], "2025-07-01", "2025-07-02") == 1

    def test_takes_maximum_of_applied_seasons(self):
        """Test that the strictest season touched by the stay wins."""
        seasons = [
            _season(1, "2025-07-01", "2025-07-05", "100", min_nights=3),
            _season(2, "2025-07-05", "2025-07-20", "150", min_nights=7),
            _season(3, "2025-08-01", "2025-08-20", "150", min_nights=14),
        ]
        assert min_nights_required(seasons, "2025-07-03", "2025-07-06") == 7
        assert min_nights_required(seasons, "2025-07-01", "2025-07-03") == 3

    def test_rejects_invalid_range(self):
        """Test that an empty stay is rejected."""
        with pytest.raises(InvalidRangeError):
            min_nights_required([], "2025-07-03", "2025-07-01")


class TestSummarize:
    """Tests for summarize."""

    def test_grand_total(self, rates):
        """Test that the summary adds tourist tax to the stay price."""
        band = _band(1, "2.5", ("04-01", "11-01"))
        price = price_for_stay(rates, [], "2025-07-01", "2025-07-04")
        tax = tourist_tax_for_stay([band], "2025-07-01", "2025-07-04", adults=2)

        summary = summarize(price, tax)

        assert summary.nights == 3
        assert summary.nightly_total == Decimal("420")
        assert summary.cleaning_fee == Decimal("110")
        assert summary.tourist_tax == Decimal("15.00")
        assert summary.grand_total == Decimal("545.00")
        assert summary.currency == "EUR"
