"""Check API endpoint - on-demand DNC verdicts."""

from flask import Blueprint, request, jsonify
from pydantic import ValidationError

from cadence.config import get_settings
from cadence.schemas import CheckRequest, VerdictResponse
from cadence.services import DncOrchestrator
from cadence.api.auth import require_api_token


check_bp = Blueprint("check", __name__)


def build_orchestrator() -> DncOrchestrator:
    return DncOrchestrator.from_settings(get_settings())


async def _verdict_response(phone: str):
    # InvalidPhoneError is rendered as 400 by the app-level CadenceError handler
    verdict = await build_orchestrator().check(phone)
    response = VerdictResponse(**verdict.to_dict())
    return jsonify(response.model_dump(mode="json"))


@check_bp.post("/")
@require_api_token
async def check_phone():
    """Check a phone against the company blacklist and national DNC list.
    
    Cached verdicts are reused per list until their TTL runs out; only
    stale lists are queried live.
    """
    try:
        data = CheckRequest.model_validate(request.get_json())
    except ValidationError as e:
        return jsonify({"error": "Validation failed", "details": e.errors(include_url=False)}), 400

    return await _verdict_response(data.phone)


@check_bp.get("/<phone>")
@require_api_token
async def check_phone_get(phone: str):
    """Quick check endpoint (GET for convenience)."""
    return await _verdict_response(phone)
