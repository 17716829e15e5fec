# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Public hold model: short-lived per-night reservation marker."""

from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database import Base


def _utc_now() -> datetime:
    """Get current UTC datetime for SQLAlchemy defaults."""
    return datetime.now(UTC)


class HoldStatus(StrEnum):
    """State a hold was written with."""

    REQUESTED = "requested"
    APPROVED = "approved"


class PublicHold(Base):
    """Hold on one night while a request is in flight or pending review.

    A hold is live while ``expires_at`` lies in the future. Expired rows are
    inert and are overwritten by the next hold on the same night; they are
    never swept in the background.
    """

    __tablename__ = "public_holds"

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        primary_key=True,
    )
    night: Mapped[str] = mapped_column(String(10), primary_key=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=HoldStatus.REQUESTED.value
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    booking_ref: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now
    )

    __table_args__ = (Index("idx_hold_expiry", "property_id", "expires_at"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<PublicHold(property_id={self.property_id}, night={self.night}, "
            f"expires_at={self.expires_at})>"
        )
