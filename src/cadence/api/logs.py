"""Check log API endpoints."""

from flask import Blueprint, request, jsonify

from cadence.models import CacheStatus
from cadence.schemas import CheckLogResponse, CheckLogStatsResponse
from cadence.services import CheckLogService
from cadence.api.auth import require_api_token


logs_bp = Blueprint("logs", __name__)


@logs_bp.get("/")
@require_api_token
def list_check_logs():
    """List check log entries.
    
    Query params:
        cache_status: Filter by hit / partial / miss / skipped_tagged
        location_id: Filter by tenant location
        limit: Maximum results (default 100)
        offset: Pagination offset
    """
    service = CheckLogService()
    
    status_str = request.args.get("cache_status")
    location_id = request.args.get("location_id")
    limit = request.args.get("limit", 100, type=int)
    offset = request.args.get("offset", 0, type=int)
    
    cache_status = None
    if status_str:
        try:
            cache_status = CacheStatus(status_str.lower())
        except ValueError:
            return jsonify({"error": f"Invalid cache_status: {status_str}"}), 400
    
    logs = service.get_logs(
        cache_status=cache_status,
        location_id=location_id,
        limit=max(0, min(limit, 1000)),  # Cap at 1000
        offset=max(0, offset),
    )
    
    return jsonify({
        "logs": [CheckLogResponse.model_validate(log).model_dump(mode="json") for log in logs],
        "count": len(logs),
        "limit": limit,
        "offset": offset,
    })


@logs_bp.get("/stats")
@require_api_token
def get_check_log_stats():
    """Get aggregate check statistics."""
    service = CheckLogService()
    stats = service.get_stats()
    
    response = CheckLogStatsResponse(**stats)
    return jsonify(response.model_dump())
