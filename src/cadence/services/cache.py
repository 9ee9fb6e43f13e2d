"""DNC cache store - per-phone, per-list persisted verdicts."""

from datetime import datetime, timedelta
from typing import Callable

import structlog
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError

from cadence.models import db, DncCacheEntry, utcnow
from cadence.phone import redact_phone

logger = structlog.get_logger()


class DncCacheStore:
    """Read and partially upsert cached DNC verdicts.

    Blacklist and national writes touch disjoint columns, so the two can land
    in either order for the same phone without clobbering each other.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock

    def get(self, phone: str) -> DncCacheEntry | None:
        """Return the cached row for ``phone``, or None on a cache miss."""
        return DncCacheEntry.query.filter_by(phone=phone).first()

    def upsert_blacklist(self, phone: str, is_on_list: bool) -> DncCacheEntry:
        """Record a live company blacklist answer."""
        _require_bool(is_on_list)
        checked_at = self.clock()

        def apply(entry: DncCacheEntry) -> None:
            entry.is_company_blacklisted = is_on_list
            entry.blacklist_checked_at = checked_at

        entry = self._upsert(phone, apply)
        logger.debug("dnc_cache_blacklist_saved", phone=redact_phone(phone), on_list=is_on_list)
        return entry

    def upsert_national(
        self,
        phone: str,
        is_on_list: bool,
        reason: str | None = None,
        expiry: datetime | None = None,
    ) -> DncCacheEntry:
        """Record a live national registry answer."""
        _require_bool(is_on_list)
        checked_at = self.clock()

        def apply(entry: DncCacheEntry) -> None:
            entry.is_national_dnc = is_on_list
            entry.national_dnc_reason = reason
            entry.national_dnc_expiry = expiry
            entry.national_checked_at = checked_at

        entry = self._upsert(phone, apply)
        logger.debug("dnc_cache_national_saved", phone=redact_phone(phone), on_list=is_on_list)
        return entry

    def delete_stale(self, retention: timedelta) -> int:
        """Delete rows whose lists are both older than ``retention``.

        A list that was never checked counts as old once the row itself is
        older than the window. Rows are only ever removed whole.

        Returns:
            Number of rows deleted
        """
        cutoff = self.clock() - retention

        deleted = (
            DncCacheEntry.query
            .filter(
                _older_than(DncCacheEntry.blacklist_checked_at, cutoff),
                _older_than(DncCacheEntry.national_checked_at, cutoff),
            )
            .delete(synchronize_session=False)
        )
        db.session.commit()

        logger.info(
            "dnc_cache_cleaned",
            deleted_count=deleted,
            retention_days=retention.days,
        )
        return deleted

    def stats(self) -> dict[str, int]:
        """Row counts for monitoring."""
        return {
            "total_entries": DncCacheEntry.query.count(),
            "company_blacklisted": DncCacheEntry.query.filter_by(is_company_blacklisted=True).count(),
            "national_dnc": DncCacheEntry.query.filter_by(is_national_dnc=True).count(),
        }

    def _upsert(self, phone: str, apply: Callable[[DncCacheEntry], None]) -> DncCacheEntry:
        entry = self.get(phone)
        if entry is None:
            entry = DncCacheEntry(phone=phone)
            db.session.add(entry)
        apply(entry)

        try:
            db.session.commit()
        except IntegrityError:
            # Another writer inserted this phone first; update its row instead.
            db.session.rollback()
            entry = self.get(phone)
            if entry is None:
                raise
            apply(entry)
            db.session.commit()

        return entry


def _older_than(column, cutoff: datetime):
    return or_(
        column < cutoff,
        and_(column.is_(None), DncCacheEntry.created_at < cutoff),
    )


def _require_bool(value: object) -> None:
    if not isinstance(value, bool):
        raise TypeError(f"is_on_list must be a bool, got {type(value).__name__}")
