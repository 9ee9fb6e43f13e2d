"""CLI command tests for Cadence."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cadence.cli import main
from cadence.models import DncCacheEntry, utcnow
from cadence.services import ListCheckResult
from conftest import NOW


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def cli_app(app, db):
    """App configured for CLI testing with tables created."""
    return app


class TestCheckCommand:
    """Tests for the 'check' command."""

    def test_clear_number(self, runner, cli_app, orchestrator):
        with patch("cadence.app.create_app", return_value=cli_app), \
                patch("cadence.cli.DncOrchestrator.from_settings", return_value=orchestrator):
            result = runner.invoke(main, ["check", "(555) 123-4567"])

        assert result.exit_code == 0
        assert "CLEAR" in result.output
        assert "Company blacklist: no (live)" in result.output

    def test_flagged_number(self, runner, cli_app, orchestrator, national_checker):
        national_checker.result = ListCheckResult(is_on_list=True, reason="Registered on national DNC")

        with patch("cadence.app.create_app", return_value=cli_app), \
                patch("cadence.cli.DncOrchestrator.from_settings", return_value=orchestrator):
            result = runner.invoke(main, ["check", "+15551234567"])

        assert result.exit_code == 0
        assert "DO NOT CONTACT" in result.output
        assert "National DNC:      yes (live)" in result.output
        assert "Registered on national DNC" in result.output

    def test_cached_provenance(self, runner, cli_app, cached_entry, orchestrator):
        with patch("cadence.app.create_app", return_value=cli_app), \
                patch("cadence.cli.DncOrchestrator.from_settings", return_value=orchestrator):
            result = runner.invoke(main, ["check", "+15551234567"])

        assert "(cache)" in result.output
        assert "(live)" not in result.output

    def test_degraded_list_reported(self, runner, cli_app, orchestrator, blacklist_checker):
        blacklist_checker.result = ListCheckResult.failed("API returned 502")

        with patch("cadence.app.create_app", return_value=cli_app), \
                patch("cadence.cli.DncOrchestrator.from_settings", return_value=orchestrator):
            result = runner.invoke(main, ["check", "+15551234567"])

        assert result.exit_code == 0
        assert "blacklist check degraded: API returned 502" in result.output

    def test_empty_phone_fails(self, runner, cli_app, orchestrator):
        with patch("cadence.app.create_app", return_value=cli_app), \
                patch("cadence.cli.DncOrchestrator.from_settings", return_value=orchestrator):
            result = runner.invoke(main, ["check", "  "])

        assert result.exit_code == 1
        assert "phone number is required" in result.output


class TestCleanupCommand:
    def test_deletes_stale_rows(self, runner, cli_app, db):
        db.session.add(DncCacheEntry(
            phone="+15550000001",
            blacklist_checked_at=NOW - timedelta(days=400),
            national_checked_at=NOW - timedelta(days=400),
        ))
        db.session.commit()

        with patch("cadence.app.create_app", return_value=cli_app):
            result = runner.invoke(main, ["cleanup", "--days", "90"])

        assert result.exit_code == 0
        assert "Deleted 1 cache entries older than 90 days" in result.output

    def test_recent_rows_kept(self, runner, cli_app, db):
        now = utcnow()
        db.session.add(DncCacheEntry(
            phone="+15550000001",
            blacklist_checked_at=now - timedelta(days=2),
            national_checked_at=now - timedelta(days=2),
        ))
        db.session.commit()

        with patch("cadence.app.create_app", return_value=cli_app):
            result = runner.invoke(main, ["cleanup", "-d", "30"])

        assert result.exit_code == 0
        assert "Deleted 0" in result.output


class TestStatsCommand:
    def test_shows_counts(self, runner, cli_app, db):
        db.session.add_all([
            DncCacheEntry(phone="+15550000001", is_company_blacklisted=True),
            DncCacheEntry(phone="+15550000002", is_national_dnc=True),
        ])
        db.session.commit()

        with patch("cadence.app.create_app", return_value=cli_app):
            result = runner.invoke(main, ["stats"])

        assert result.exit_code == 0
        assert "Cached numbers:      2" in result.output
        assert "Company blacklisted: 1" in result.output
        assert "National DNC:        1" in result.output


class TestMainGroup:
    """Tests for the main CLI group."""

    def test_help_displays(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Cadence" in result.output
        for command in ("check", "cleanup", "stats", "serve"):
            assert command in result.output

    def test_invalid_command(self, runner):
        result = runner.invoke(main, ["invalid"])
        assert result.exit_code != 0

    def test_check_help(self, runner):
        result = runner.invoke(main, ["check", "--help"])
        assert result.exit_code == 0
        assert "phone" in result.output.lower()
