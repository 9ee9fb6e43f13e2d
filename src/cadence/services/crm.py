"""CRM contacts client - the read/write collaborator of the flagging gateway."""

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

logger = structlog.get_logger()


@dataclass
class CrmContact:
    id: str
    phone: str | None = None
    tags: list[str] = field(default_factory=list)


class CrmClient:
    """Minimal contacts API client bound to one tenant's bearer token.

    Failures are logged and surfaced as None / False; nothing here raises for
    an HTTP or transport error.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://services.leadconnectorhq.com",
        api_version: str = "2021-07-28",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self._token = token
        self._client = client

    @classmethod
    def from_settings(cls, settings, token: str, client: httpx.AsyncClient | None = None) -> "CrmClient":
        return cls(
            token=token,
            base_url=settings.crm_api_base,
            api_version=settings.crm_api_version,
            client=client,
        )

    async def get_contact(self, contact_id: str) -> CrmContact | None:
        """Fetch a contact's phone and tags."""
        response = await self._request("GET", f"/contacts/{contact_id}")
        if response is None or not response.is_success:
            return None

        try:
            body = response.json()
        except ValueError:
            logger.warning("crm_contact_malformed", contact_id=contact_id)
            return None

        data = body.get("contact", body) if isinstance(body, dict) else None
        if not isinstance(data, dict):
            logger.warning("crm_contact_malformed", contact_id=contact_id)
            return None

        tags = data.get("tags") or []
        return CrmContact(
            id=str(data.get("id") or contact_id),
            phone=data.get("phone") or None,
            tags=[str(tag) for tag in tags if tag],
        )

    async def update_contact(self, contact_id: str, payload: dict[str, Any]) -> bool:
        """Write fields onto a contact. Returns True on a 2xx response."""
        response = await self._request("PUT", f"/contacts/{contact_id}", json=payload)
        return response is not None and response.is_success

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response | None:
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Version": self.api_version,
            "Accept": "application/json",
        }

        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, headers=headers, timeout=self.timeout, **kwargs
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("crm_request_failed", method=method, path=path, error_type=type(exc).__name__)
            return None

        if not response.is_success:
            logger.warning("crm_request_error_status", method=method, path=path, status=response.status_code)
        return response
