"""Webhook endpoint - inbound CRM events."""

import structlog
from flask import Blueprint, request, jsonify
from pydantic import ValidationError

from cadence.config import get_settings
from cadence.schemas import SUPPORTED_EVENT_TYPES, parse_event
from cadence.services import DncWebhookHandler

logger = structlog.get_logger()

webhooks_bp = Blueprint("webhooks", __name__)


def build_handler() -> DncWebhookHandler:
    return DncWebhookHandler.from_settings(get_settings())


@webhooks_bp.post("/crm")
async def receive_crm_event():
    """Run the DNC check-and-flag sequence for one CRM event.

    Handled and ignored events are always acknowledged with 200 so the CRM
    does not redeliver them; only a malformed body gets a 400.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Expected a JSON object"}), 400

    event_type = payload.get("type")
    if event_type not in SUPPORTED_EVENT_TYPES:
        logger.info("webhook_ignored", event_type=event_type)
        return jsonify({"status": "ignored", "type": event_type})

    try:
        event = parse_event(payload)
    except ValidationError as e:
        return jsonify({"error": "Validation failed", "details": e.errors(include_url=False)}), 400

    outcome = await build_handler().handle(event)
    return jsonify(outcome.to_dict())
