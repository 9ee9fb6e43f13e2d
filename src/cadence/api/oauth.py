"""OAuth endpoint - marketplace install callback."""

import structlog
from flask import Blueprint, request, jsonify

from cadence.config import get_settings
from cadence.services import InstallationTokenResolver

logger = structlog.get_logger()

oauth_bp = Blueprint("oauth", __name__)


def build_resolver() -> InstallationTokenResolver:
    return InstallationTokenResolver.from_settings(get_settings())


@oauth_bp.get("/callback")
async def oauth_callback():
    """Exchange the authorization code and store the tenant installation.

    The CRM redirects here after a location installs the app; the stored
    tokens are what webhook events for that location are handled with.
    """
    error = request.args.get("error")
    if error:
        logger.warning("oauth_denied", error=error)
        return jsonify({
            "error": error,
            "description": request.args.get("error_description", "OAuth authorization failed"),
        }), 400

    code = request.args.get("code")
    if not code:
        return jsonify({"error": "Authorization code is required"}), 400

    installation = await build_resolver().exchange_code(code, redirect_uri=get_settings().crm_redirect_uri)
    if installation is None:
        return jsonify({"error": "Failed to exchange authorization code"}), 502

    return jsonify({
        "success": True,
        "location_id": installation.location_id,
        "user_id": installation.user_id,
    })
