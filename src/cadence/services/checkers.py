"""Remote DNC list checkers.

Both checkers fail open: a transport error, a non-2xx status or a body that
does not match its schema comes back as ``is_on_list=False`` with ``error``
set. A checker never raises, so a list outage cannot block message flow.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

import httpx
import structlog
from pydantic import ValidationError

from cadence.phone import redact_phone
from cadence.schemas.lists import BlacklistLookupResponse, NationalLookupResponse

logger = structlog.get_logger()


@dataclass
class ListCheckResult:
    """Normalized answer from one DNC list."""

    is_on_list: bool
    reason: str | None = None
    expiry: datetime | None = None
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "ListCheckResult":
        return cls(is_on_list=False, error=error)

    @property
    def degraded(self) -> bool:
        return self.error is not None


class ListChecker(Protocol):
    name: str

    async def check(self, phone: str) -> ListCheckResult:
        ...


class RemoteListChecker:
    """GET ``{base_url}{path}?phone=...`` with an ``X-API-KEY`` header."""

    name = "remote"
    path = "/"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 8.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the checker.

        Args:
            base_url: Lookup service root URL
            api_key: Value for the X-API-KEY header
            timeout: Per-request timeout in seconds
            client: Optional shared client (tests pass one with a mock transport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings, client: httpx.AsyncClient | None = None):
        return cls(
            base_url=settings.dnc_api_base,
            api_key=settings.dnc_api_key,
            timeout=settings.dnc_request_timeout_seconds,
            client=client,
        )

    async def check(self, phone: str) -> ListCheckResult:
        log = logger.bind(dnc_list=self.name, phone=redact_phone(phone))

        try:
            response = await self._get(phone)
        except httpx.HTTPError as exc:
            log.warning("dnc_list_unreachable", error_type=type(exc).__name__)
            return ListCheckResult.failed(f"transport error: {type(exc).__name__}")

        if not response.is_success:
            log.warning("dnc_list_error_status", status=response.status_code)
            return ListCheckResult.failed(f"API returned {response.status_code}")

        try:
            result = self.parse(response.json())
        except (ValueError, ValidationError) as exc:
            log.warning("dnc_list_malformed_response", error_type=type(exc).__name__)
            return ListCheckResult.failed("malformed response body")

        log.debug("dnc_list_checked", on_list=result.is_on_list)
        return result

    def parse(self, body: Any) -> ListCheckResult:
        raise NotImplementedError

    async def _get(self, phone: str) -> httpx.Response:
        url = f"{self.base_url}{self.path}"
        params = {"phone": phone}
        headers = {"X-API-KEY": self.api_key, "Accept": "application/json"}

        if self._client is not None:
            return await self._client.get(url, params=params, headers=headers, timeout=self.timeout)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params, headers=headers)


class CompanyBlacklistChecker(RemoteListChecker):
    """Company-internal blacklist."""

    name = "blacklist"
    path = "/api/Blacklist/IsOnCompanyBlackList"

    def parse(self, body: Any) -> ListCheckResult:
        data = BlacklistLookupResponse.model_validate(body)
        return ListCheckResult(is_on_list=data.is_on_company_blacklist is True)


class NationalDncChecker(RemoteListChecker):
    """National Do-Not-Call registry."""

    name = "national"
    path = "/v2/DoNotCall/IsDoNotCall"

    def parse(self, body: Any) -> ListCheckResult:
        status = NationalLookupResponse.model_validate(body).contact_status
        return ListCheckResult(
            is_on_list=status.can_contact is False,
            reason=status.reason or None,
            expiry=status.expiry_date_utc,
        )
