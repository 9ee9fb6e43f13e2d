"""Cache entry and maintenance schemas."""

from datetime import datetime

from pydantic import BaseModel


class CacheEntryResponse(BaseModel):
    """Schema for a cached DNC row."""

    phone: str
    is_company_blacklisted: bool
    blacklist_checked_at: datetime | None
    is_national_dnc: bool
    national_dnc_reason: str | None
    national_dnc_expiry: datetime | None
    national_checked_at: datetime | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CacheStatsResponse(BaseModel):
    total_entries: int
    company_blacklisted: int
    national_dnc: int


class CacheConfigResponse(BaseModel):
    blacklist_ttl_hours: float
    national_ttl_hours: float
    retention_days: int
