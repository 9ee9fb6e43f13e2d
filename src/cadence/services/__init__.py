"""Business logic services."""

from cadence.services.cache import DncCacheStore
from cadence.services.check_log import CheckLogService, EventSink, LogEventSink
from cadence.services.checkers import (
    CompanyBlacklistChecker,
    ListCheckResult,
    NationalDncChecker,
)
from cadence.services.credentials import InstallationTokenResolver
from cadence.services.crm import CrmClient, CrmContact
from cadence.services.flagging import ContactFlagger, FlagResult
from cadence.services.freshness import CacheTtlConfig, is_fresh
from cadence.services.orchestrator import DncOrchestrator, DncVerdict
from cadence.services.webhooks import DncWebhookHandler, EventOutcome, EventStatus

__all__ = [
    "DncCacheStore",
    "CheckLogService",
    "EventSink",
    "LogEventSink",
    "CompanyBlacklistChecker",
    "ListCheckResult",
    "NationalDncChecker",
    "InstallationTokenResolver",
    "CrmClient",
    "CrmContact",
    "ContactFlagger",
    "FlagResult",
    "CacheTtlConfig",
    "is_fresh",
    "DncOrchestrator",
    "DncVerdict",
    "DncWebhookHandler",
    "EventOutcome",
    "EventStatus",
]
