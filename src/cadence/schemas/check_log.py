"""Check log schemas."""

from datetime import datetime

from pydantic import BaseModel

from cadence.models.check_log import CacheStatus


class CheckLogResponse(BaseModel):
    """Schema for check log entry response."""

    id: int
    event: str
    phone_redacted: str
    cache_status: CacheStatus
    blacklist_cached: bool | None
    national_cached: bool | None
    is_blacklisted: bool | None
    is_national_dnc: bool | None
    duration_ms: int
    contact_id: str | None
    location_id: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class CheckLogStatsResponse(BaseModel):
    """Schema for check log statistics response."""

    total_entries: int
    by_cache_status: dict[str, int]
