"""Tenant credentials - stored OAuth tokens with refresh-before-expiry."""

from datetime import datetime, timedelta
from typing import Callable, Protocol

import httpx
import structlog
from sqlalchemy.exc import SQLAlchemyError

from cadence.models import db, Installation, utcnow
from cadence.services.freshness import as_utc

logger = structlog.get_logger()


class CredentialResolver(Protocol):
    async def get_valid_token(self, user_id: str | None, location_id: str) -> str | None:
        ...


class InstallationTokenResolver:
    """Hands out a usable bearer token for a tenant location.

    Tokens that are expired or about to expire are refreshed through the
    OAuth token endpoint first. Token values are never logged.
    """

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: str,
        refresh_buffer: timedelta = timedelta(minutes=5),
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_buffer = refresh_buffer
        self.timeout = timeout
        self.clock = clock
        self._client = client

    @classmethod
    def from_settings(cls, settings, client: httpx.AsyncClient | None = None) -> "InstallationTokenResolver":
        return cls(
            token_url=settings.crm_token_url,
            client_id=settings.crm_client_id,
            client_secret=settings.crm_client_secret,
            refresh_buffer=timedelta(minutes=settings.token_refresh_buffer_minutes),
            client=client,
        )

    async def get_valid_token(self, user_id: str | None, location_id: str) -> str | None:
        """Return a bearer token for the location, or None if there is none."""
        log = logger.bind(location_id=location_id, user_id=user_id)

        installation = self._find(user_id, location_id)
        if installation is None:
            log.warning("installation_not_found")
            return None

        now = self.clock()
        expires_at = as_utc(installation.expires_at)
        if expires_at - self.refresh_buffer > now:
            return installation.access_token

        if await self.refresh(installation):
            return installation.access_token

        if expires_at > now:
            log.info("token_refresh_failed_using_current")
            return installation.access_token

        log.warning("token_expired_refresh_failed")
        return None

    async def refresh(self, installation: Installation) -> bool:
        """Exchange the refresh token and store the new pair."""
        log = logger.bind(location_id=installation.location_id)
        body = await self._request_tokens({
            "grant_type": "refresh_token",
            "refresh_token": installation.refresh_token,
        }, log)
        if body is None:
            return False

        self._apply_tokens(installation, body)
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            log.error("token_refresh_save_failed", error_type=type(exc).__name__)
            return False

        log.info("token_refreshed", expires_in=body["expires_in"])
        return True

    async def exchange_code(self, code: str, redirect_uri: str | None = None) -> Installation | None:
        """Trade an OAuth authorization code for tokens and store the installation.

        The token response names the location and user the app was
        installed for. An existing installation for the same pair is
        updated and reactivated; otherwise a new one is created.

        Returns:
            The stored installation, or None if the exchange failed
        """
        form = {"grant_type": "authorization_code", "code": code}
        if redirect_uri:
            form["redirect_uri"] = redirect_uri
        body = await self._request_tokens(form, logger)
        if body is None:
            return None

        location_id = body.get("locationId")
        user_id = body.get("userId")
        if not location_id or not user_id:
            logger.warning("token_exchange_missing_context", has_location=bool(location_id), has_user=bool(user_id))
            return None

        log = logger.bind(location_id=location_id, user_id=user_id)
        installation = Installation.query.filter_by(user_id=user_id, location_id=location_id).first()
        created = installation is None
        if created:
            installation = Installation(user_id=user_id, location_id=location_id)
            db.session.add(installation)

        self._apply_tokens(installation, body)
        installation.company_id = body.get("companyId") or installation.company_id
        installation.scopes = body.get("scope") or installation.scopes or ""
        installation.is_active = True
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            log.error("installation_save_failed", error_type=type(exc).__name__)
            return None

        log.info("installation_stored", created=created, expires_in=body["expires_in"])
        return installation

    async def _request_tokens(self, grant: dict, log) -> dict | None:
        """POST a grant to the token endpoint and return the parsed body."""
        form = {"client_id": self.client_id, "client_secret": self.client_secret, **grant}
        grant_type = grant["grant_type"]

        try:
            if self._client is not None:
                response = await self._client.post(self.token_url, data=form, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.token_url, data=form)
        except httpx.HTTPError as exc:
            log.warning("token_endpoint_unreachable", grant_type=grant_type, error_type=type(exc).__name__)
            return None

        if not response.is_success:
            log.warning("token_request_rejected", grant_type=grant_type, status=response.status_code)
            return None

        try:
            body = response.json()
            body["expires_in"] = int(body["expires_in"])
            if not body["access_token"] or not body["refresh_token"]:
                raise ValueError("empty token")
        except (ValueError, KeyError, TypeError):
            log.warning("token_response_malformed", grant_type=grant_type)
            return None

        return body

    def _apply_tokens(self, installation: Installation, body: dict) -> None:
        installation.access_token = body["access_token"]
        installation.refresh_token = body["refresh_token"]
        installation.expires_at = self.clock() + timedelta(seconds=body["expires_in"])

    async def refresh_expiring(self) -> dict[str, int]:
        """Refresh every active installation inside the refresh window."""
        horizon = self.clock() + self.refresh_buffer
        expiring = (
            Installation.query
            .filter(Installation.is_active.is_(True), Installation.expires_at < horizon)
            .all()
        )

        outcome = {"success": 0, "failed": 0}
        for installation in expiring:
            outcome["success" if await self.refresh(installation) else "failed"] += 1

        logger.info("token_refresh_batch_done", **outcome)
        return outcome

    def _find(self, user_id: str | None, location_id: str) -> Installation | None:
        query = Installation.query.filter_by(location_id=location_id, is_active=True)
        if user_id:
            query = query.filter_by(user_id=user_id)
        return query.order_by(Installation.updated_at.desc()).first()
