"""Webhook handler - turns one inbound CRM event into a DNC check and flag."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

import structlog

from cadence.models import CacheStatus
from cadence.phone import normalize_phone, redact_phone
from cadence.schemas.events import ContactEvent, MessageEvent
from cadence.services.crm import CrmClient
from cadence.services.credentials import CredentialResolver, InstallationTokenResolver
from cadence.services.flagging import ContactFlagger, FlagResult, is_fully_tagged
from cadence.services.orchestrator import DncOrchestrator, DncVerdict

logger = structlog.get_logger()


class EventStatus(str, Enum):
    """Terminal state of one handled event."""

    CLEAR = "clear"
    FLAGGED = "flagged"
    FLAG_FAILED = "flag_failed"
    SKIPPED_TAGGED = "skipped_tagged"
    SKIPPED_NO_CREDENTIALS = "skipped_no_credentials"
    SKIPPED_CONTACT_UNAVAILABLE = "skipped_contact_unavailable"
    SKIPPED_NO_PHONE = "skipped_no_phone"


@dataclass
class EventOutcome:
    status: EventStatus
    contact_id: str
    verdict: DncVerdict | None = None
    flag: FlagResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "contact_id": self.contact_id,
            "verdict": self.verdict.to_dict() if self.verdict else None,
            "flag": self.flag.to_dict() if self.flag else None,
        }


class DncWebhookHandler:
    """Runs the check-and-flag sequence for one inbound event.

    Every expected failure ends in a skipped status instead of an exception,
    so the delivering webhook can always be acknowledged.
    """

    def __init__(
        self,
        orchestrator: DncOrchestrator,
        credentials: CredentialResolver,
        crm_factory: Callable[[str], CrmClient],
    ):
        """Initialize the handler.

        Args:
            orchestrator: Cache-aware DNC checker
            credentials: Resolves a bearer token per tenant location
            crm_factory: Builds a CRM client from a bearer token
        """
        self.orchestrator = orchestrator
        self.credentials = credentials
        self.crm_factory = crm_factory

    @classmethod
    def from_settings(cls, settings) -> "DncWebhookHandler":
        return cls(
            orchestrator=DncOrchestrator.from_settings(settings),
            credentials=InstallationTokenResolver.from_settings(settings),
            crm_factory=lambda token: CrmClient.from_settings(settings, token),
        )

    async def handle(self, event: ContactEvent | MessageEvent) -> EventOutcome:
        contact_id = event.contact_id
        log = logger.bind(event_type=event.type, location_id=event.location_id, contact_id=contact_id)
        if isinstance(event, MessageEvent):
            log = log.bind(message_type=event.message_type)

        token = await self.credentials.get_valid_token(event.user_id, event.location_id)
        if not token:
            log.warning("event_skipped", status=EventStatus.SKIPPED_NO_CREDENTIALS.value)
            return EventOutcome(EventStatus.SKIPPED_NO_CREDENTIALS, contact_id)
        crm = self.crm_factory(token)

        if isinstance(event, ContactEvent):
            phone, tags = event.phone, event.tags
        else:
            contact = await crm.get_contact(contact_id)
            if contact is None:
                log.warning("event_skipped", status=EventStatus.SKIPPED_CONTACT_UNAVAILABLE.value)
                return EventOutcome(EventStatus.SKIPPED_CONTACT_UNAVAILABLE, contact_id)
            phone, tags = contact.phone, contact.tags

        canonical = normalize_phone(phone) or (phone or "").strip()
        if not canonical:
            log.info("event_skipped", status=EventStatus.SKIPPED_NO_PHONE.value)
            return EventOutcome(EventStatus.SKIPPED_NO_PHONE, contact_id)

        if is_fully_tagged(tags):
            self.orchestrator.sink.record_event({
                "event": "dnc_check",
                "phone": redact_phone(canonical),
                "cache_status": CacheStatus.SKIPPED_TAGGED.value,
                "duration_ms": 0,
                "contact_id": contact_id,
                "location_id": event.location_id,
            })
            return EventOutcome(EventStatus.SKIPPED_TAGGED, contact_id)

        verdict = await self.orchestrator.check(
            canonical,
            contact_id=contact_id,
            location_id=event.location_id,
        )

        if not verdict.is_flagged:
            return EventOutcome(EventStatus.CLEAR, contact_id, verdict=verdict)

        flag = await ContactFlagger(crm).apply(contact_id, verdict)
        status = EventStatus.FLAGGED if flag.success else EventStatus.FLAG_FAILED
        log.info("event_handled", status=status.value, tags=flag.tags_applied)
        return EventOutcome(status, contact_id, verdict=verdict, flag=flag)
