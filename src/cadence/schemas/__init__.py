"""Pydantic schemas for request/response validation."""

from cadence.schemas.check import CheckRequest, VerdictResponse
from cadence.schemas.cache import CacheEntryResponse, CacheStatsResponse, CacheConfigResponse
from cadence.schemas.check_log import CheckLogResponse, CheckLogStatsResponse
from cadence.schemas.events import ContactEvent, MessageEvent, SUPPORTED_EVENT_TYPES, parse_event
from cadence.schemas.lists import BlacklistLookupResponse, NationalLookupResponse

__all__ = [
    "CheckRequest",
    "VerdictResponse",
    "CacheEntryResponse",
    "CacheStatsResponse",
    "CacheConfigResponse",
    "CheckLogResponse",
    "CheckLogStatsResponse",
    "ContactEvent",
    "MessageEvent",
    "SUPPORTED_EVENT_TYPES",
    "parse_event",
    "BlacklistLookupResponse",
    "NationalLookupResponse",
]
