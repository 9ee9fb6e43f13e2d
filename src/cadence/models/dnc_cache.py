"""DNC cache model - one row per canonical phone number."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cadence.models.base import Base


class DncCacheEntry(Base):
    """Last known verdict for each DNC list, keyed by phone.

    The blacklist and national columns are written independently: a row may
    hold a fresh blacklist verdict next to a stale (or never checked)
    national one.
    """

    __tablename__ = "cadence_dnc_cache"

    phone: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        index=True,
        doc="Canonical phone number (see cadence.phone.normalize_phone)",
    )

    # Company blacklist
    is_company_blacklisted: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    blacklist_checked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
        doc="Last time the company blacklist was actually queried",
    )

    # National DNC registry
    is_national_dnc: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    national_dnc_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    national_dnc_expiry: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Registry-asserted expiry of the DNC status (not the cache TTL)",
    )
    national_checked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
        doc="Last time the national registry was actually queried",
    )

    def __repr__(self) -> str:
        return (
            f"<DncCacheEntry ***{self.phone[-4:]} "
            f"blacklist={self.is_company_blacklisted} national={self.is_national_dnc}>"
        )

