"""Cache freshness evaluation."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from cadence.models import utcnow

DEFAULT_TTL = timedelta(hours=12)


@dataclass(frozen=True)
class CacheTtlConfig:
    """Independent time-to-live for each DNC list."""

    blacklist_ttl: timedelta = DEFAULT_TTL
    national_ttl: timedelta = DEFAULT_TTL

    @classmethod
    def from_settings(cls, settings) -> "CacheTtlConfig":
        return cls(
            blacklist_ttl=timedelta(hours=settings.dnc_cache_ttl_blacklist_hours),
            national_ttl=timedelta(hours=settings.dnc_cache_ttl_national_hours),
        )


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_fresh(
    checked_at: datetime | None,
    ttl: timedelta,
    now: datetime | None = None,
) -> bool:
    """Return True if a verdict checked at ``checked_at`` is still usable.

    Never checked means always stale.
    """
    if checked_at is None:
        return False
    now = as_utc(now) if now is not None else utcnow()
    return (now - as_utc(checked_at)) < ttl
