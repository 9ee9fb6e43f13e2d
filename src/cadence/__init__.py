"""
Cadence - CRM webhook relay with cached Do-Not-Call checks

- Per-list TTL caching of company blacklist and national DNC verdicts
- Concurrent, fail-open lookups for stale lists only
- Additive tag and DND writes back to CRM contacts
- Flask + SQLAlchemy + Celery, structured logs via structlog
"""

__version__ = "0.1.0"
