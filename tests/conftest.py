"""Pytest fixtures and configuration."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from flask import Flask
from flask.testing import FlaskClient

from cadence.app import create_app
from cadence.models import db as _db, DncCacheEntry
from cadence.services import DncCacheStore, DncOrchestrator, ListCheckResult, CrmContact
from cadence.services.freshness import CacheTtlConfig


NOW = datetime(2026, 1, 29, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


class FakeChecker:
    """Stands in for a remote DNC list; records every phone it is asked about."""

    def __init__(
        self,
        name: str,
        result: ListCheckResult | None = None,
        exc: Exception | None = None,
        delay: float = 0.0,
    ):
        self.name = name
        self.result = result or ListCheckResult(is_on_list=False)
        self.exc = exc
        self.delay = delay
        self.calls: list[str] = []

    async def check(self, phone: str) -> ListCheckResult:
        self.calls.append(phone)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc:
            raise self.exc
        return self.result


class RecordingSink:
    """Event sink that keeps records in memory."""

    def __init__(self):
        self.events: list[dict] = []

    def record_event(self, event: dict) -> None:
        self.events.append(event)


class FakeCrm:
    """In-memory CRM contacts collaborator."""

    def __init__(
        self,
        contacts: dict[str, CrmContact] | None = None,
        fail_read: bool = False,
        fail_write: bool = False,
    ):
        self.contacts = contacts or {}
        self.fail_read = fail_read
        self.fail_write = fail_write
        self.reads: list[str] = []
        self.updates: list[tuple[str, dict]] = []

    async def get_contact(self, contact_id: str) -> CrmContact | None:
        self.reads.append(contact_id)
        if self.fail_read:
            return None
        contact = self.contacts.get(contact_id)
        if contact is None:
            return None
        return CrmContact(id=contact.id, phone=contact.phone, tags=list(contact.tags))

    async def update_contact(self, contact_id: str, payload: dict) -> bool:
        self.updates.append((contact_id, payload))
        if self.fail_write:
            return False
        contact = self.contacts.setdefault(contact_id, CrmContact(id=contact_id))
        contact.tags = list(payload["tags"])
        return True


class FakeCredentials:
    def __init__(self, token: str | None = "tenant-token"):
        self.token = token
        self.calls: list[tuple] = []

    async def get_valid_token(self, user_id, location_id):
        self.calls.append((user_id, location_id))
        return self.token


@pytest.fixture(scope="session")
def app() -> Flask:
    """Create application for testing."""
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret-key",
    })

    # Ensure app context and create tables
    with app.app_context():
        _db.create_all()

    yield app

    # Cleanup
    with app.app_context():
        _db.drop_all()


@pytest.fixture
def db(app: Flask):
    """Database fixture with transaction rollback."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app: Flask, db) -> FlaskClient:
    """Test client fixture."""
    return app.test_client()


@pytest.fixture
def blacklist_checker() -> FakeChecker:
    return FakeChecker("blacklist")


@pytest.fixture
def national_checker() -> FakeChecker:
    return FakeChecker("national")


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def store() -> DncCacheStore:
    return DncCacheStore(clock=fixed_clock)


@pytest.fixture
def orchestrator(store, blacklist_checker, national_checker, sink) -> DncOrchestrator:
    """Orchestrator wired to fake lists, a recording sink and a fixed clock."""
    return DncOrchestrator(
        cache=store,
        blacklist_checker=blacklist_checker,
        national_checker=national_checker,
        ttl_config=CacheTtlConfig(
            blacklist_ttl=timedelta(hours=12),
            national_ttl=timedelta(hours=12),
        ),
        sink=sink,
        check_timeout=1.0,
        clock=fixed_clock,
    )


@pytest.fixture
def cached_entry(db) -> DncCacheEntry:
    """A row where both lists were checked an hour ago, neither flagged."""
    entry = DncCacheEntry(
        phone="+15551234567",
        is_company_blacklisted=False,
        blacklist_checked_at=NOW - timedelta(hours=1),
        is_national_dnc=False,
        national_checked_at=NOW - timedelta(hours=1),
    )
    db.session.add(entry)
    db.session.commit()
    return entry
