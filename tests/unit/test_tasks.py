"""Unit tests for scheduled maintenance tasks."""

from datetime import timedelta
from unittest.mock import patch

from cadence.models import DncCacheEntry, utcnow
from cadence.tasks import celery_app
from cadence.tasks.maintenance import cleanup_dnc_cache, refresh_expiring_tokens


class FakeResolver:
    def __init__(self):
        self.calls = 0

    async def refresh_expiring(self):
        self.calls += 1
        return {"success": 2, "failed": 0}


class TestCleanupTask:
    def test_deletes_rows_outside_window(self, db):
        old = utcnow() - timedelta(days=60)
        recent = utcnow() - timedelta(days=1)
        db.session.add_all([
            DncCacheEntry(phone="+15550000001", blacklist_checked_at=old, national_checked_at=old),
            DncCacheEntry(phone="+15550000002", blacklist_checked_at=old, national_checked_at=recent),
        ])
        db.session.commit()

        result = cleanup_dnc_cache(retention_days=30)

        assert result["deleted"] == 1
        assert result["remaining"]["total_entries"] == 1


class TestRefreshTokensTask:
    def test_runs_resolver_batch(self, db):
        resolver = FakeResolver()

        with patch("cadence.services.InstallationTokenResolver.from_settings", return_value=resolver):
            result = refresh_expiring_tokens()

        assert result == {"success": 2, "failed": 0}
        assert resolver.calls == 1


class TestBeatSchedule:
    def test_schedule_entries(self):
        schedule = celery_app.conf.beat_schedule

        assert schedule["cleanup-dnc-cache-weekly"]["task"] == "cadence.tasks.maintenance.cleanup_dnc_cache"
        assert schedule["refresh-expiring-tokens"]["task"] == "cadence.tasks.maintenance.refresh_expiring_tokens"
