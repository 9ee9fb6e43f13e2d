"""DNC orchestrator - cache-aware checks against both DNC lists.

For each list independently, a fresh cached verdict is reused and a stale or
missing one triggers a live lookup. Live lookups for the two lists run
concurrently and each writes back only its own cache columns.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

import structlog
from sqlalchemy.exc import SQLAlchemyError

from cadence.exceptions import InvalidPhoneError
from cadence.models import db, CacheStatus, DncCacheEntry, utcnow
from cadence.phone import normalize_phone, redact_phone
from cadence.services.cache import DncCacheStore
from cadence.services.check_log import CheckLogService, EventSink
from cadence.services.checkers import (
    CompanyBlacklistChecker,
    ListChecker,
    ListCheckResult,
    NationalDncChecker,
)
from cadence.services.freshness import CacheTtlConfig, is_fresh

logger = structlog.get_logger()


@dataclass
class DncVerdict:
    """Combined outcome of one check against both lists."""

    phone: str
    is_blacklisted: bool = False
    is_national_dnc: bool = False
    national_reason: str | None = None
    national_expiry: datetime | None = None
    blacklist_from_cache: bool = False
    national_from_cache: bool = False
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_flagged(self) -> bool:
        return self.is_blacklisted or self.is_national_dnc

    @property
    def cache_status(self) -> CacheStatus:
        return CacheStatus.from_freshness(self.blacklist_from_cache, self.national_from_cache)

    def to_dict(self) -> dict[str, Any]:
        return {
            "phone": self.phone,
            "is_blacklisted": self.is_blacklisted,
            "is_national_dnc": self.is_national_dnc,
            "national_reason": self.national_reason,
            "national_expiry": self.national_expiry.isoformat() if self.national_expiry else None,
            "blacklist_from_cache": self.blacklist_from_cache,
            "national_from_cache": self.national_from_cache,
            "errors": dict(self.errors),
        }


class DncOrchestrator:
    """Decides per list whether to trust the cache or ask the list live."""

    def __init__(
        self,
        cache: DncCacheStore,
        blacklist_checker: ListChecker,
        national_checker: ListChecker,
        ttl_config: CacheTtlConfig | None = None,
        sink: EventSink | None = None,
        check_timeout: float = 10.0,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize the orchestrator.

        Args:
            cache: Persistent per-phone verdict store
            blacklist_checker: Company blacklist lookup
            national_checker: National registry lookup
            ttl_config: Per-list cache lifetimes (12h each by default)
            sink: Receives one structured record per check
            check_timeout: Upper bound in seconds for a single list lookup
            clock: Source of "now" for freshness decisions
        """
        self.cache = cache
        self.blacklist_checker = blacklist_checker
        self.national_checker = national_checker
        self.ttl = ttl_config or CacheTtlConfig()
        self.sink = sink or CheckLogService()
        self.check_timeout = check_timeout
        self.clock = clock

    @classmethod
    def from_settings(cls, settings, sink: EventSink | None = None) -> "DncOrchestrator":
        return cls(
            cache=DncCacheStore(),
            blacklist_checker=CompanyBlacklistChecker.from_settings(settings),
            national_checker=NationalDncChecker.from_settings(settings),
            ttl_config=CacheTtlConfig.from_settings(settings),
            sink=sink,
            check_timeout=settings.dnc_request_timeout_seconds,
        )

    async def check(
        self,
        phone: str,
        contact_id: str | None = None,
        location_id: str | None = None,
    ) -> DncVerdict:
        """Check a phone against both DNC lists.

        Args:
            phone: Phone number in any common format
            contact_id: Optional CRM contact, for the check record only
            location_id: Optional tenant location, for the check record only

        Returns:
            The merged verdict. Failed lookups fail open rather than raise.

        Raises:
            InvalidPhoneError: if ``phone`` is empty
        """
        started = time.perf_counter()
        key = self._canonical(phone)

        entry = self._read_cache(key)
        now = self.clock()
        blacklist_fresh = entry is not None and is_fresh(
            entry.blacklist_checked_at, self.ttl.blacklist_ttl, now
        )
        national_fresh = entry is not None and is_fresh(
            entry.national_checked_at, self.ttl.national_ttl, now
        )

        verdict = DncVerdict(phone=key)
        if entry is not None:
            verdict.is_blacklisted = bool(entry.is_company_blacklisted)
            verdict.is_national_dnc = bool(entry.is_national_dnc)
            verdict.national_reason = entry.national_dnc_reason
            verdict.national_expiry = entry.national_dnc_expiry

        pending = []
        if not blacklist_fresh:
            pending.append(self._refresh_blacklist(key, verdict))
        if not national_fresh:
            pending.append(self._refresh_national(key, verdict))
        if pending:
            await asyncio.gather(*pending)

        verdict.blacklist_from_cache = blacklist_fresh
        verdict.national_from_cache = national_fresh

        self.sink.record_event({
            "event": "dnc_check",
            "phone": redact_phone(key),
            "cache_status": verdict.cache_status.value,
            "blacklist_cached": blacklist_fresh,
            "national_cached": national_fresh,
            "is_blacklisted": verdict.is_blacklisted,
            "is_national_dnc": verdict.is_national_dnc,
            "duration_ms": int((time.perf_counter() - started) * 1000),
            "contact_id": contact_id,
            "location_id": location_id,
        })

        return verdict

    async def _refresh_blacklist(self, phone: str, verdict: DncVerdict) -> None:
        result = await self._run_checker(self.blacklist_checker, phone)
        verdict.is_blacklisted = result.is_on_list

        if result.degraded:
            verdict.errors[self.blacklist_checker.name] = result.error
            return
        self._write(self.cache.upsert_blacklist, phone, result.is_on_list)

    async def _refresh_national(self, phone: str, verdict: DncVerdict) -> None:
        result = await self._run_checker(self.national_checker, phone)
        verdict.is_national_dnc = result.is_on_list
        verdict.national_reason = result.reason
        verdict.national_expiry = result.expiry

        if result.degraded:
            verdict.errors[self.national_checker.name] = result.error
            return
        self._write(
            self.cache.upsert_national,
            phone,
            result.is_on_list,
            reason=result.reason,
            expiry=result.expiry,
        )

    async def _run_checker(self, checker: ListChecker, phone: str) -> ListCheckResult:
        log = logger.bind(dnc_list=checker.name, phone=redact_phone(phone))
        try:
            return await asyncio.wait_for(checker.check(phone), timeout=self.check_timeout)
        except asyncio.TimeoutError:
            log.warning("dnc_list_timeout", timeout_s=self.check_timeout)
            return ListCheckResult.failed(f"timed out after {self.check_timeout}s")
        except Exception as exc:
            # A crashing checker must not take down the other list.
            log.error("dnc_list_checker_crashed", error_type=type(exc).__name__)
            return ListCheckResult.failed(f"checker error: {type(exc).__name__}")

    def _read_cache(self, phone: str) -> DncCacheEntry | None:
        try:
            return self.cache.get(phone)
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.warning(
                "dnc_cache_read_failed",
                phone=redact_phone(phone),
                error_type=type(exc).__name__,
            )
            return None

    def _write(self, upsert: Callable[..., Any], phone: str, *args, **kwargs) -> None:
        try:
            upsert(phone, *args, **kwargs)
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.warning(
                "dnc_cache_write_failed",
                phone=redact_phone(phone),
                error_type=type(exc).__name__,
            )

    @staticmethod
    def _canonical(phone: str | None) -> str:
        if phone is None or not str(phone).strip():
            raise InvalidPhoneError()

        canonical = normalize_phone(phone)
        if canonical is None:
            # No usable digits; the raw value becomes its own cache key
            raw = str(phone).strip()
            logger.debug("phone_not_normalized", phone=redact_phone(raw))
            return raw
        return canonical
