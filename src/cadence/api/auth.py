"""API authentication utilities."""

import inspect
from functools import wraps
from typing import Callable

from flask import request, jsonify

from cadence.config import get_settings


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:]  # Remove "Bearer " prefix


def _guard(f: Callable, deny: Callable[[], tuple | None]) -> Callable:
    """Wrap sync or async views with the same access check."""
    if inspect.iscoroutinefunction(f):
        @wraps(f)
        async def async_decorated(*args, **kwargs):
            denied = deny()
            if denied is not None:
                return denied
            return await f(*args, **kwargs)

        return async_decorated

    @wraps(f)
    def decorated(*args, **kwargs):
        denied = deny()
        if denied is not None:
            return denied
        return f(*args, **kwargs)

    return decorated


def _deny_without_api_token() -> tuple | None:
    settings = get_settings()

    # If no token configured, allow all requests (dev mode)
    if not settings.api_token:
        return None

    # Check if request is from localhost
    if request.remote_addr in ("127.0.0.1", "::1", "localhost"):
        return None

    token = _bearer_token()
    if token is None:
        return jsonify({"error": "Missing or invalid Authorization header"}), 401
    if token != settings.api_token:
        return jsonify({"error": "Invalid API token"}), 403
    return None


def _deny_without_cron_secret() -> tuple | None:
    settings = get_settings()
    if not settings.cron_secret:
        return None

    if _bearer_token() != settings.cron_secret:
        return jsonify({"error": "Unauthorized"}), 401
    return None


def require_api_token(f: Callable) -> Callable:
    """Decorator to require API token authentication.
    
    Checks for Bearer token in Authorization header.
    Bypasses authentication for localhost requests if no token is configured.
    """
    return _guard(f, _deny_without_api_token)


def require_cron_secret(f: Callable) -> Callable:
    """Decorator for scheduler-only endpoints (Bearer <cron secret>)."""
    return _guard(f, _deny_without_cron_secret)
