"""flextime CLI - hour statistics and billing rollups from time tracking exports."""

import json
import logging
import sys

import click

from .config import PROVIDERS, load_config
from .core.entries import EntryError
from .core.taxonomy import ConfigurationError
from .formatting import format_table, row_to_dict
from .workflows import (
    calc_flextime,
    generate_billing_reports,
    generate_stats,
    generate_working_hours_report,
    get_source,
    monthly_reminders,
)

_HANDLED_ERRORS = (ConfigurationError, EntryError, FileNotFoundError, json.JSONDecodeError)


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _open(ctx: click.Context):
    config = load_config()
    try:
        return config, get_source(config, ctx.obj.get("provider"))
    except ConfigurationError as e:
        _fail(e)


@click.group()
@click.version_option()
@click.option("--provider", type=click.Choice(PROVIDERS), default=None, help="Override configured provider")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, provider: str | None, debug: bool):
    """flextime - hour statistics and billing rollups."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.ensure_object(dict)
    ctx.obj["provider"] = provider


@main.command()
@click.argument("email")
@click.pass_context
def balance(ctx, email: str):
    """Calculate flex saldo for given user."""
    config, source = _open(ctx)
    try:
        message = calc_flextime(config, source, email)
    except _HANDLED_ERRORS as e:
        _fail(e)

    click.echo(message.header)
    for line in message.messages:
        click.echo(line)


@main.command()
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx, year: int, month: int, as_json: bool):
    """Monthly hours statistics and billing rollup."""
    config, source = _open(ctx)
    try:
        hours_rows, billing_rows = generate_stats(config, source, year, month)
    except _HANDLED_ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "hours": [row_to_dict(r) for r in hours_rows],
                    "billable": [row_to_dict(r) for r in billing_rows],
                },
                indent=2,
                default=str,
            )
        )
        return

    click.echo(f"### {year}-{month}-hours")
    click.echo(format_table(config.hours_stats_column_headers, hours_rows))
    click.echo()
    click.echo(f"### {year}-{month}-billable")
    click.echo(format_table(config.billable_stats_column_headers, billing_rows))


@main.command()
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.argument("months", type=click.IntRange(min=1), default=6)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def hours(ctx, year: int, month: int, months: int, as_json: bool):
    """Working hours report over MONTHS months ending at YEAR-MONTH."""
    config, source = _open(ctx)
    try:
        reports = generate_working_hours_report(config, source, year, month, months)
    except _HANDLED_ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([row_to_dict(r) for r in reports], indent=2))
        return

    if not reports:
        click.echo("No users.")
        return
    click.echo(format_table(config.working_hours_report_headers, reports))


@main.command()
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.argument("last_names", nargs=-1, required=True)
@click.pass_context
def report(ctx, year: int, month: int, last_names: tuple[str, ...]):
    """Billable hours per project and task for the listed users."""
    config, source = _open(ctx)
    try:
        reports = generate_billing_reports(config, source, year, month, list(last_names))
    except _HANDLED_ERRORS as e:
        _fail(e)

    if not reports:
        click.echo("No matching users.")
        return

    for user, projects in reports:
        for project in projects.values():
            click.echo(f"### {user.name} - {project.name} ({year}-{month:02d}): {project.total_hours:g} h")
            for task in project.tasks.values():
                click.echo(f"  {task.name}: {task.total_hours:g} h")
                for entry in task.entries:
                    notes = f"  {entry.notes}" if entry.notes else ""
                    click.echo(f"    {entry.date.isoformat()}  {entry.hours:g}{notes}")
            click.echo()


@main.command()
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.argument("email", required=False)
@click.option("--scheduled", is_flag=True, help="Only run on the last day of the month")
@click.pass_context
def remind(ctx, year: int, month: int, email: str | None, scheduled: bool):
    """List working days without logged hours."""
    config, source = _open(ctx)
    try:
        reminders = monthly_reminders(config, source, year, month, email, require_last_day=scheduled)
    except _HANDLED_ERRORS as e:
        _fail(e)

    if not reminders:
        click.echo("No missing hours.")
        return

    for message in reminders:
        click.echo(message.header)
        for line in message.messages:
            click.echo(f"  {line}")


if __name__ == "__main__":
    main()
