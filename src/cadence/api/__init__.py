"""API blueprints and endpoints."""

from flask import Blueprint

from cadence.api.check import check_bp
from cadence.api.cache import cache_bp
from cadence.api.logs import logs_bp
from cadence.api.oauth import oauth_bp
from cadence.api.webhooks import webhooks_bp


# Create main API blueprint
api_bp = Blueprint("api", __name__)

api_bp.register_blueprint(check_bp, url_prefix="/check")
api_bp.register_blueprint(webhooks_bp, url_prefix="/webhooks")
api_bp.register_blueprint(cache_bp, url_prefix="/cache")
api_bp.register_blueprint(logs_bp, url_prefix="/logs")
api_bp.register_blueprint(oauth_bp, url_prefix="/oauth")

__all__ = ["api_bp"]
