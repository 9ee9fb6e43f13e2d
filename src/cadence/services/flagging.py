"""Contact flagging - additive DNC tags and DND on CRM contacts."""

from dataclasses import dataclass, field
from typing import Iterable, Protocol

import structlog

from cadence.services.crm import CrmContact

logger = structlog.get_logger()

# Downstream CRM workflows match on these exact strings.
BLACKLIST_TAG = "dnc-company-blacklist"
NATIONAL_DNC_TAG = "dnc-national"
DNC_TAGS = frozenset({BLACKLIST_TAG, NATIONAL_DNC_TAG})

DND_REASON = "Do Not Call list match (Cadence DNC check)"
DND_CHANNELS = ("SMS", "Call")


class ContactGateway(Protocol):
    async def get_contact(self, contact_id: str) -> CrmContact | None:
        ...

    async def update_contact(self, contact_id: str, payload: dict) -> bool:
        ...


@dataclass
class FlagResult:
    """Outcome of flagging one contact."""

    tags_applied: list[str] = field(default_factory=list)
    dnd_set: bool = False
    success: bool = False

    def to_dict(self) -> dict:
        return {
            "tags_applied": list(self.tags_applied),
            "dnd_set": self.dnd_set,
            "success": self.success,
        }


def tags_for(verdict) -> list[str]:
    """DNC tags a verdict calls for."""
    tags = []
    if verdict.is_blacklisted:
        tags.append(BLACKLIST_TAG)
    if verdict.is_national_dnc:
        tags.append(NATIONAL_DNC_TAG)
    return tags


def merge_tags(existing: Iterable[str], new: Iterable[str]) -> list[str]:
    """Union of two tag lists, existing order first, without duplicates."""
    merged: list[str] = []
    seen: set[str] = set()
    for tag in [*existing, *new]:
        if tag not in seen:
            seen.add(tag)
            merged.append(tag)
    return merged


def is_fully_tagged(tags: Iterable[str]) -> bool:
    """True if a contact already carries both DNC tags."""
    return DNC_TAGS.issubset(set(tags))


class ContactFlagger:
    """Adds DNC tags and sets DND on a contact without ever dropping tags.

    The current tag set is always re-read and unioned with the new tags, so
    concurrent deliveries for one contact can only add.
    """

    def __init__(self, crm: ContactGateway):
        self.crm = crm

    async def apply(self, contact_id: str, verdict) -> FlagResult:
        """Flag a contact according to a verdict.

        Args:
            contact_id: CRM contact to update
            verdict: DncVerdict with at least one list flagged

        Returns:
            FlagResult; ``success`` is False if the write failed. No retry.
        """
        log = logger.bind(contact_id=contact_id)
        new_tags = tags_for(verdict)

        existing: list[str] = []
        contact = await self.crm.get_contact(contact_id)
        if contact is None:
            log.warning("contact_tags_unavailable")
        else:
            existing = contact.tags

        payload = {
            "tags": merge_tags(existing, new_tags),
            "dnd": True,
            "dndSettings": {
                channel: {"status": "active", "message": DND_REASON}
                for channel in DND_CHANNELS
            },
        }

        if not await self.crm.update_contact(contact_id, payload):
            log.error("contact_flag_failed", tags=new_tags)
            return FlagResult(tags_applied=new_tags, dnd_set=False, success=False)

        log.info("contact_flagged", tags=new_tags, existing_tag_count=len(existing))
        return FlagResult(tags_applied=new_tags, dnd_set=True, success=True)
