"""Scheduled maintenance tasks: cache retention and token refresh."""

import asyncio
from contextlib import contextmanager
from datetime import timedelta

import structlog

from cadence.config import get_settings
from cadence.tasks import celery_app

logger = structlog.get_logger()


@contextmanager
def _app_context():
    from flask import has_app_context

    if has_app_context():
        yield
        return

    from cadence.app import create_app

    with create_app().app_context():
        yield


@celery_app.task
def cleanup_dnc_cache(retention_days: int | None = None):
    """Delete DNC cache rows whose lists were both checked before the window.

    Args:
        retention_days: Window in days (defaults to DNC_CACHE_RETENTION_DAYS)
    """
    from cadence.services import DncCacheStore

    days = retention_days or get_settings().dnc_cache_retention_days

    with _app_context():
        store = DncCacheStore()
        deleted = store.delete_stale(timedelta(days=days))
        remaining = store.stats()

    logger.info("dnc_cache_cleanup_task_done", deleted_count=deleted, days=days)

    return {"deleted": deleted, "remaining": remaining}


@celery_app.task(bind=True, max_retries=3)
def refresh_expiring_tokens(self):
    """Refresh every tenant token that expires inside the refresh buffer."""
    from cadence.services import InstallationTokenResolver

    try:
        with _app_context():
            resolver = InstallationTokenResolver.from_settings(get_settings())
            return asyncio.run(resolver.refresh_expiring())
    except Exception as exc:
        logger.error("token_refresh_task_failed", error=str(exc), task_id=self.request.id)
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))
