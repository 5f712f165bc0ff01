"""CLI commands for managing habit data.

Usage:
    flask habits reset                    # Restore preset habits, drop all logs
    flask habits summary                  # Today's completion, badges, weekly trend
    flask habits summary --range month
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from flagtracker.domains.habits.services import get_store
from flagtracker.domains.habits.services.summaries import (
    analytics_summary,
    badge_summary,
    dashboard_summary,
)


@click.group("habits")
def habits_group():
    """Manage stored habits and logs."""


@habits_group.command("reset")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@with_appcontext
def reset_command(yes: bool):
    """Restore the preset habits and delete every log."""
    if not yes:
        click.confirm("This deletes all logs and custom habits. Continue?", abort=True)
    get_store().reset()
    click.echo("✓ Habits reset to presets")


@habits_group.command("summary")
@click.option("--range", "-r", "range_name", type=click.Choice(["week", "month"]), default=None, help="Trend window")
@with_appcontext
def summary_command(range_name: str | None):
    """Print today's completion, badge status and the completion trend."""
    store = get_store()
    habits, logs = store.snapshot()
    today = store.today()
    range_name = range_name or current_app.config.get("DEFAULT_RANGE", "week")

    dashboard = dashboard_summary(habits, logs, today)
    click.echo(
        f"Today ({dashboard['date']}): {dashboard['completion']}% "
        f"({dashboard['completed_count']}/{dashboard['total']} habits complete)"
    )
    for row in dashboard["habits"]:
        mark = "✓" if row["completed"] else " "
        click.echo(f"  [{mark}] {row['icon']} {row['name']}: {row['value']}/{row['goal']} {row['unit']}")

    click.echo("Badges:")
    for badge in badge_summary(habits, logs):
        state = "unlocked" if badge["unlocked"] else "locked"
        click.echo(f"  {badge['icon']} {badge['name']} ({state})")

    analytics = analytics_summary(habits, logs, today, range_name)
    click.echo(f"Trend {analytics['start']} to {analytics['end']} (average {analytics['average']}%):")
    for point in analytics["trend"]:
        click.echo(f"  {point['label']:>3} {point['rate']:>3}%")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(habits_group)
