"""Unit tests for the remote DNC list checkers."""

from datetime import datetime, timezone

import httpx
import pytest

from cadence.services.checkers import CompanyBlacklistChecker, NationalDncChecker

BASE = "https://dnc.example.test"


def client_for(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def json_handler(body, status: int = 200, seen: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=body)

    return handler


def failing_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


class TestCompanyBlacklistChecker:
    """Tests for the company blacklist adapter."""

    @pytest.mark.asyncio
    async def test_on_list(self):
        seen = []
        checker = CompanyBlacklistChecker(
            BASE, "key-123", client=client_for(json_handler({"isOnCompanyBlacklist": True}, seen=seen))
        )

        result = await checker.check("+15551234567")

        assert result.is_on_list is True
        assert result.error is None
        request = seen[0]
        assert request.url.path == "/api/Blacklist/IsOnCompanyBlackList"
        assert request.url.params["phone"] == "+15551234567"
        assert request.headers["X-API-KEY"] == "key-123"

    @pytest.mark.asyncio
    async def test_not_on_list(self):
        checker = CompanyBlacklistChecker(
            BASE, "k", client=client_for(json_handler({"isOnCompanyBlacklist": False}))
        )
        result = await checker.check("+15551234567")
        assert result.is_on_list is False
        assert result.error is None

    @pytest.mark.asyncio
    async def test_missing_field_fails_open(self):
        """A body without the flag is malformed, not a negative answer."""
        checker = CompanyBlacklistChecker(BASE, "k", client=client_for(json_handler({"status": "ok"})))
        result = await checker.check("+15551234567")
        assert result.is_on_list is False
        assert result.error is not None

    @pytest.mark.asyncio
    async def test_truthy_string_is_not_a_flag(self):
        checker = CompanyBlacklistChecker(
            BASE, "k", client=client_for(json_handler({"isOnCompanyBlacklist": "yes"}))
        )
        result = await checker.check("+15551234567")
        assert result.is_on_list is False
        assert result.degraded

    @pytest.mark.asyncio
    async def test_error_status_fails_open(self):
        checker = CompanyBlacklistChecker(
            BASE, "k", client=client_for(json_handler({"message": "boom"}, status=503))
        )
        result = await checker.check("+15551234567")
        assert result.is_on_list is False
        assert result.error == "API returned 503"

    @pytest.mark.asyncio
    async def test_transport_error_fails_open(self):
        checker = CompanyBlacklistChecker(BASE, "k", client=client_for(failing_handler))
        result = await checker.check("+15551234567")
        assert result.is_on_list is False
        assert "ConnectError" in result.error

    @pytest.mark.asyncio
    async def test_non_json_body_fails_open(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        checker = CompanyBlacklistChecker(BASE, "k", client=client_for(handler))
        result = await checker.check("+15551234567")
        assert result.is_on_list is False
        assert result.degraded


class TestNationalDncChecker:
    """Tests for the national registry adapter."""

    @pytest.mark.asyncio
    async def test_cannot_contact_means_on_list(self):
        seen = []
        body = {
            "contactStatus": {
                "canContact": False,
                "reason": "Registered on national DNC",
                "expiryDateUTC": "2027-03-01T00:00:00Z",
            }
        }
        checker = NationalDncChecker(BASE, "k", client=client_for(json_handler(body, seen=seen)))

        result = await checker.check("+15551234567")

        assert result.is_on_list is True
        assert result.reason == "Registered on national DNC"
        assert result.expiry == datetime(2027, 3, 1, tzinfo=timezone.utc)
        assert result.error is None
        assert seen[0].url.path == "/v2/DoNotCall/IsDoNotCall"

    @pytest.mark.asyncio
    async def test_can_contact(self):
        body = {"contactStatus": {"canContact": True}}
        checker = NationalDncChecker(BASE, "k", client=client_for(json_handler(body)))

        result = await checker.check("+15551234567")

        assert result.is_on_list is False
        assert result.reason is None
        assert result.expiry is None
        assert result.error is None

    @pytest.mark.asyncio
    async def test_missing_contact_status_fails_open(self):
        checker = NationalDncChecker(BASE, "k", client=client_for(json_handler({})))
        result = await checker.check("+15551234567")
        assert result.is_on_list is False
        assert result.degraded

    @pytest.mark.asyncio
    async def test_transport_error_fails_open(self):
        checker = NationalDncChecker(BASE, "k", client=client_for(failing_handler))
        result = await checker.check("+15551234567")
        assert result.is_on_list is False
        assert result.degraded

    @pytest.mark.asyncio
    async def test_error_does_not_leak_phone(self):
        checker = NationalDncChecker(BASE, "k", client=client_for(failing_handler))
        result = await checker.check("+15551234567")
        assert "5551234567" not in result.error
