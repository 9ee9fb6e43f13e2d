"""Cache API endpoints - inspection and retention sweep."""

from datetime import timedelta

import structlog
from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from cadence.config import get_settings
from cadence.models import db
from cadence.phone import normalize_phone
from cadence.schemas import CacheConfigResponse, CacheEntryResponse, CacheStatsResponse
from cadence.services import DncCacheStore
from cadence.api.auth import require_api_token, require_cron_secret

logger = structlog.get_logger()

cache_bp = Blueprint("cache", __name__)


@cache_bp.get("/config")
@require_api_token
def get_cache_config():
    """Effective TTL and retention configuration."""
    settings = get_settings()
    response = CacheConfigResponse(
        blacklist_ttl_hours=settings.dnc_cache_ttl_blacklist_hours,
        national_ttl_hours=settings.dnc_cache_ttl_national_hours,
        retention_days=settings.dnc_cache_retention_days,
    )
    return jsonify(response.model_dump())


@cache_bp.get("/stats")
@require_api_token
def get_cache_stats():
    response = CacheStatsResponse(**DncCacheStore().stats())
    return jsonify(response.model_dump())


@cache_bp.route("/cleanup", methods=["GET", "POST"])
@require_cron_secret
def cleanup_cache():
    """Delete rows whose lists were both last checked before the retention window.

    Called by the scheduler; authenticated with the cron secret.
    """
    settings = get_settings()
    store = DncCacheStore()

    try:
        deleted = store.delete_stale(timedelta(days=settings.dnc_cache_retention_days))
        remaining = store.stats()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("dnc_cache_cleanup_failed", error_type=type(e).__name__)
        return jsonify({"error": "Cleanup failed"}), 500

    return jsonify({"success": True, "deleted": deleted, "remaining": remaining})


@cache_bp.get("/<phone>")
@require_api_token
def get_cache_entry(phone: str):
    """Get the cached row for a phone number."""
    entry = DncCacheStore().get(normalize_phone(phone) or phone)
    if not entry:
        return jsonify({"error": "Cache entry not found"}), 404

    response = CacheEntryResponse.model_validate(entry)
    return jsonify(response.model_dump(mode="json"))
