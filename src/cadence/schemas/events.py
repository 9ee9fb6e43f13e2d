"""Inbound CRM webhook events.

Each supported event type is its own model so handlers only see the fields
that type guarantees. Contact events carry the phone inline; message events
only carry a contact id and need a contact fetch.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class _Event(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    location_id: str = Field(alias="locationId", min_length=1)
    user_id: str | None = Field(default=None, alias="userId")


class ContactEvent(_Event):
    """ContactCreate / ContactUpdate: phone and tags arrive inline."""

    type: Literal["ContactCreate", "ContactUpdate"]
    contact_id: str = Field(alias="id", min_length=1)
    phone: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value):
        # The CRM sends "tags": null for untagged contacts
        return [] if value is None else value


class MessageEvent(_Event):
    """InboundMessage / OutboundMessage: the contact must be fetched."""

    type: Literal["InboundMessage", "OutboundMessage"]
    contact_id: str = Field(alias="contactId", min_length=1)
    message_type: str | None = Field(default=None, alias="messageType")


InboundEvent = Annotated[
    Union[ContactEvent, MessageEvent],
    Field(discriminator="type"),
]

SUPPORTED_EVENT_TYPES = frozenset(
    {"ContactCreate", "ContactUpdate", "InboundMessage", "OutboundMessage"}
)

inbound_event_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_event(payload: dict) -> ContactEvent | MessageEvent:
    """Validate a raw webhook body into its event variant.

    Raises:
        pydantic.ValidationError: if the body does not match its variant
    """
    return inbound_event_adapter.validate_python(payload)
