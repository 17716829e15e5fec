# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Property model for a rentable holiday home."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.database import Base


def _utc_now() -> datetime:
    """Get current UTC datetime for SQLAlchemy defaults."""
    return datetime.now(UTC)


class Property(Base):
    """A single rentable property.

    Properties are maintained by the operator and are read-only to the
    availability and reservation engine.
    """

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    default_nightly_rate: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False
    )
    cleaning_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    check_in_hour: Mapped[int] = mapped_column(Integer, nullable=False, default=15)
    check_out_hour: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    address: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now, onupdate=_utc_now
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Property(id={self.id}, name={self.name})>"
