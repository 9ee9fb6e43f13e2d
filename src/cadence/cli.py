"""Cadence Command Line Interface."""

import asyncio
from datetime import timedelta

import click

from cadence.config import get_settings
from cadence.exceptions import InvalidPhoneError
from cadence.services import DncCacheStore, DncOrchestrator


@click.group()
def main():
    """Cadence - cached DNC checks for CRM contacts."""
    pass


@main.command()
@click.argument("phone")
def check(phone: str):
    """Check a phone against both DNC lists."""
    from cadence.app import create_app

    app = create_app()
    with app.app_context():
        orchestrator = DncOrchestrator.from_settings(get_settings())

        try:
            verdict = asyncio.run(orchestrator.check(phone))
        except InvalidPhoneError as e:
            click.secho(f"✗ {e.message}", fg="red")
            raise SystemExit(1)

        if verdict.is_flagged:
            click.secho("✗ DO NOT CONTACT", fg="red")
        else:
            click.secho("✓ CLEAR", fg="green")

        source = {True: "cache", False: "live"}
        click.echo(
            f"  Company blacklist: {'yes' if verdict.is_blacklisted else 'no'}"
            f" ({source[verdict.blacklist_from_cache]})"
        )
        click.echo(
            f"  National DNC:      {'yes' if verdict.is_national_dnc else 'no'}"
            f" ({source[verdict.national_from_cache]})"
        )
        if verdict.national_reason:
            click.echo(f"  Reason: {verdict.national_reason}")
        for dnc_list, error in verdict.errors.items():
            click.secho(f"  ! {dnc_list} check degraded: {error}", fg="yellow")


@main.command()
@click.option("--days", "-d", type=int, help="Retention window in days")
def cleanup(days: int | None):
    """Delete cache rows older than the retention window on both lists."""
    from cadence.app import create_app

    app = create_app()
    with app.app_context():
        days = days or get_settings().dnc_cache_retention_days
        deleted = DncCacheStore().delete_stale(timedelta(days=days))
        click.secho(f"✓ Deleted {deleted} cache entries older than {days} days", fg="green")


@main.command()
def stats():
    """Show cache row counts."""
    from cadence.app import create_app

    app = create_app()
    with app.app_context():
        counts = DncCacheStore().stats()

        click.echo(f"  Cached numbers:      {counts['total_entries']}")
        click.echo(f"  Company blacklisted: {counts['company_blacklisted']}")
        click.echo(f"  National DNC:        {counts['national_dnc']}")


@main.command()
@click.option("--host", "-h", default="0.0.0.0", help="Host to bind")
@click.option("--port", "-p", default=8000, help="Port to bind")
def serve(host: str, port: int):
    """Start the API server."""
    from cadence.app import create_app

    app = create_app()
    click.echo(f"Starting Cadence API on {host}:{port}")
    app.run(host=host, port=port)


if __name__ == "__main__":
    main()
