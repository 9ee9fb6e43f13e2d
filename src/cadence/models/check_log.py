"""Check log model - the persisted trail of every DNC check."""

from enum import Enum

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cadence.models.base import Base


class CacheStatus(str, Enum):
    """How a check was served.

    - hit: both lists answered from cache
    - partial: exactly one list answered from cache
    - miss: both lists queried live
    - skipped_tagged: contact already carried both DNC tags, nothing checked
    """

    HIT = "hit"
    PARTIAL = "partial"
    MISS = "miss"
    SKIPPED_TAGGED = "skipped_tagged"

    @classmethod
    def from_freshness(cls, blacklist_fresh: bool, national_fresh: bool) -> "CacheStatus":
        if blacklist_fresh and national_fresh:
            return cls.HIT
        if blacklist_fresh or national_fresh:
            return cls.PARTIAL
        return cls.MISS


class DncCheckLog(Base):
    """One row per DNC check event.

    Only the redacted phone is ever stored here.
    """

    __tablename__ = "cadence_dnc_check_logs"

    event: Mapped[str] = mapped_column(String(50), nullable=False, default="dnc_check")
    phone_redacted: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        doc="Phone with all but the last four digits masked",
    )
    cache_status: Mapped[CacheStatus] = mapped_column(
        nullable=False,
        index=True,
    )

    blacklist_cached: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    national_cached: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_blacklisted: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_national_dnc: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    duration_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    contact_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    location_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    __table_args__ = (
        Index("ix_dnc_check_logs_status_created", "cache_status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<DncCheckLog {self.cache_status.value} {self.phone_redacted} @ {self.created_at}>"
