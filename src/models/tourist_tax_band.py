# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Tourist tax band model (Kurtaxe)."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database import Base


def _utc_now() -> datetime:
    """Get current UTC datetime for SQLAlchemy defaults."""
    return datetime.now(UTC)


class TouristTaxBand(Base):
    """Per-adult nightly tax applied on recurring month-day windows.

    ``ranges`` is a JSON list of ``{"start_md": "MM-DD", "end_md": "MM-DD"}``
    objects; ``end_md`` is exclusive and windows may wrap over New Year.
    """

    __tablename__ = "tourist_tax_bands"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    zone: Mapped[str] = mapped_column(String(100), nullable=False, default="Kurzone 1")
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    rate: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    ranges: Mapped[list[dict[str, str]]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now, onupdate=_utc_now
    )

    __table_args__ = (Index("idx_tax_band_property_zone", "property_id", "zone"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TouristTaxBand(id={self.id}, label={self.label}, rate={self.rate})>"
