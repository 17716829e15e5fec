# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Inventory night model: one row per confirmed occupied night."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database import Base


def _utc_now() -> datetime:
    """Get current UTC datetime for SQLAlchemy defaults."""
    return datetime.now(UTC)


class InventoryNight(Base):
    """Confirmed occupancy of one night.

    The composite primary key ``(property_id, night)`` guarantees at most one
    confirmed booking per night and property.
    """

    __tablename__ = "inventory_nights"

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        primary_key=True,
    )
    night: Mapped[str] = mapped_column(String(10), primary_key=True)
    booking_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now
    )

    __table_args__ = (Index("idx_inventory_booking", "booking_id"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<InventoryNight(property_id={self.property_id}, night={self.night}, "
            f"booking_id={self.booking_id})>"
        )
