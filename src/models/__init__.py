# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""SQLAlchemy ORM models for StayLedger."""

from src.models.booking import Booking, BookingStatus
from src.models.inventory_night import InventoryNight
from src.models.property import Property
from src.models.public_hold import HoldStatus, PublicHold
from src.models.season import Season
from src.models.tourist_tax_band import TouristTaxBand

__all__ = [
    "Booking",
    "BookingStatus",
    "HoldStatus",
    "InventoryNight",
    "Property",
    "PublicHold",
    "Season",
    "TouristTaxBand",
]
