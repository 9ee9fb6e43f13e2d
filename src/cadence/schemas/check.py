"""Check schemas for DNC verification."""

from datetime import datetime

from pydantic import BaseModel, Field


class CheckRequest(BaseModel):
    """Schema for a DNC check request."""

    phone: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="Phone number to check",
        examples=["+15551234567"],
    )


class VerdictResponse(BaseModel):
    """Schema for a DNC check verdict."""

    phone: str = Field(..., description="Canonical phone that was checked")
    is_blacklisted: bool
    is_national_dnc: bool
    national_reason: str | None = None
    national_expiry: datetime | None = None
    blacklist_from_cache: bool
    national_from_cache: bool
    errors: dict[str, str] = Field(
        default_factory=dict,
        description="Lists whose live check failed open this round",
    )
