"""Check log service - the observability sink for DNC checks."""

from typing import Any, Protocol

import structlog
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from cadence.models import db, DncCheckLog, CacheStatus

logger = structlog.get_logger()


class EventSink(Protocol):
    """Anything that can take a structured check record."""

    def record_event(self, event: dict[str, Any]) -> None:
        ...


class LogEventSink:
    """Sink that only writes the record to the structlog stream."""

    def record_event(self, event: dict[str, Any]) -> None:
        fields = dict(event)
        name = fields.pop("event", "dnc_check")
        logger.info(name, **fields)


class CheckLogService(LogEventSink):
    """Logs every check record and keeps a queryable copy in the database.

    Records arrive already redacted; this service never sees a full phone
    number or a token.
    """

    def record_event(self, event: dict[str, Any]) -> None:
        """Log a check record and persist it.

        A failed insert is logged and swallowed: losing one log row must not
        fail the check that produced it.
        """
        super().record_event(event)

        entry = DncCheckLog(
            event=event.get("event", "dnc_check"),
            phone_redacted=event.get("phone", "***"),
            cache_status=CacheStatus(event["cache_status"]),
            blacklist_cached=event.get("blacklist_cached"),
            national_cached=event.get("national_cached"),
            is_blacklisted=event.get("is_blacklisted"),
            is_national_dnc=event.get("is_national_dnc"),
            duration_ms=int(event.get("duration_ms", 0)),
            contact_id=event.get("contact_id"),
            location_id=event.get("location_id"),
        )

        try:
            db.session.add(entry)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.warning("check_log_persist_failed", error_type=type(exc).__name__)

    def get_logs(
        self,
        cache_status: CacheStatus | None = None,
        location_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[DncCheckLog]:
        """Query check logs with optional filters.

        Args:
            cache_status: Filter by how the check was served
            location_id: Filter by tenant location
            limit: Maximum results to return
            offset: Pagination offset

        Returns:
            List of matching DncCheckLog entries, newest first
        """
        query = db.session.query(DncCheckLog)

        if cache_status:
            query = query.filter(DncCheckLog.cache_status == cache_status)
        if location_id:
            query = query.filter(DncCheckLog.location_id == location_id)

        return (
            query
            .order_by(DncCheckLog.created_at.desc(), DncCheckLog.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def get_stats(self) -> dict[str, Any]:
        """Aggregate counts by cache status."""
        total = db.session.query(DncCheckLog).count()

        by_status = (
            db.session.query(DncCheckLog.cache_status, func.count(DncCheckLog.id))
            .group_by(DncCheckLog.cache_status)
            .all()
        )

        return {
            "total_entries": total,
            "by_cache_status": {status.value: count for status, count in by_status},
        }
