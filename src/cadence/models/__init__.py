"""SQLAlchemy models for Cadence."""

from cadence.models.base import Base, db, utcnow
from cadence.models.dnc_cache import DncCacheEntry
from cadence.models.check_log import DncCheckLog, CacheStatus
from cadence.models.installation import Installation

__all__ = [
    "Base",
    "db",
    "utcnow",
    "DncCacheEntry",
    "DncCheckLog",
    "CacheStatus",
    "Installation",
]
