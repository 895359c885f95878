"""Shared workflow layer between the CLI and other front ends.

Each workflow reads users and entries through an EntrySource, runs the
functional core and returns plain results (rows or messages). Nothing here
renders files or delivers messages.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from .adapters.agileday import AgiledayExport
from .adapters.harvest import HarvestExport
from .config import Config
from .core.analyzer import (
    ProjectSummary,
    StatsRow,
    WorkingHoursReport,
    calculate_worked_hours,
    find_missing_dates,
    get_period_range,
    get_working_hours_report_data,
    group_by_project_and_task,
    monthly_hours_rows,
    round_down_to_half,
)
from .core.billing import BillingRow, get_billable_stats
from .core.calendar import month_bounds
from .core.entries import User, group_entries_by_user
from .core.taxonomy import Classifier, ConfigurationError
from .formatting import format_date
from .ports import EntrySource

logger = logging.getLogger(__name__)


@dataclass
class Message:
    """Header and body lines handed to a delivery channel."""

    header: str
    messages: list[str] = field(default_factory=list)


def get_source(config: Config, provider: str | None = None) -> EntrySource:
    """Resolve the entry source for the configured provider."""
    provider = provider or config.provider
    taxonomy = config.taxonomy(provider)
    match provider:
        case "harvest":
            return HarvestExport(config.export_path, taxonomy)
        case "agileday":
            return AgiledayExport(config.export_path, taxonomy)
    raise ConfigurationError(f"Unknown provider '{provider}'")


def get_classifier(config: Config, source: EntrySource) -> Classifier:
    return Classifier(source.resolver(), away=config.away())


def find_user(users: list[User], email: str) -> User | None:
    email = email.strip().lower()
    return next((u for u in users if u.email.lower() == email), None)


def calc_flextime(config: Config, source: EntrySource, email: str, today: date | None = None) -> Message:
    """Flex-time balance for one user over everything they have logged."""
    today = today or date.today()
    calendar = config.calendar()
    classifier = get_classifier(config, source)

    logger.info(f"Fetch data for {email}")
    user = find_user(source.fetch_users(), email)
    if not user:
        return Message(header=f"Unable to find time entries for {email}")

    entries = [e for e in source.fetch_entries(date.min, today) if e.user_id == user.id]
    if not entries:
        return Message(header=f"Unable to find time entries for {email}")

    latest_full_day = calendar.latest_full_working_day(today)
    period = get_period_range(entries, latest_full_day, today)
    if not period.entries:
        return Message(header=f"No time entries for {email} up to {format_date(period.end)}")
    logger.info(f"Received range starting from {format_date(period.start)} to {format_date(period.end)}")

    total_hours = calendar.total_work_hours_since(period.start, period.end)
    logger.info(f"Total working hours from range start {total_hours}")

    result = calculate_worked_hours(period.entries, classifier, calendar, today)
    if result.warnings:
        for warning in result.warnings:
            logger.info(warning)
    else:
        logger.info("No warnings!")

    header = f"*Your flex hours count: {round_down_to_half(result.total - total_hours)}*"
    messages = [
        f"Latest calendar working day: {format_date(period.end)}",
        f"Last time you have recorded hours: {format_date(period.entries[-1].date)}",
        *result.warnings,
        f"Current month {result.billable_percentage_current_month}% billable",
    ]
    logger.info(header)
    return Message(header=header, messages=messages)


def generate_stats(
    config: Config, source: EntrySource, year: int, month: int
) -> tuple[list[StatsRow], list[BillingRow]]:
    """Monthly hours sheet rows and billing sheet rows."""
    calendar = config.calendar()
    classifier = get_classifier(config, source)
    first, last = month_bounds(year, month)

    logger.info(f"Generating stats for {year}-{month}")
    user_entries = group_entries_by_user(
        source.fetch_users(),
        source.fetch_entries(first, last),
        keep_idle_active=source.keep_idle_active,
    )
    hours_rows = monthly_hours_rows(user_entries, classifier, calendar, year, month)
    billing_rows = get_billable_stats(user_entries, classifier, source.fetch_rates())
    return hours_rows, billing_rows


def range_start(year: int, month: int, months: int) -> date:
    """First day of the month `months - 1` months before year-month."""
    index = year * 12 + (month - 1) - (months - 1)
    return date(index // 12, index % 12 + 1, 1)


def generate_working_hours_report(
    config: Config, source: EntrySource, year: int, month: int, months: int = 6
) -> list[WorkingHoursReport]:
    """Working hours per user for the `months` months ending at year-month."""
    if months < 1:
        raise ValueError(f"Range must be at least one month, got {months}")
    calendar = config.calendar()
    classifier = get_classifier(config, source)
    start = range_start(year, month, months)
    _, end = month_bounds(year, month)

    logger.info(f"Generating working hours report, range {months} months from {year}-{month}")
    user_entries = group_entries_by_user(
        source.fetch_users(),
        source.fetch_entries(start, end),
        keep_idle_active=source.keep_idle_active,
    )
    return [
        get_working_hours_report_data(item, classifier, calendar, start, end) for item in user_entries
    ]


def generate_billing_reports(
    config: Config, source: EntrySource, year: int, month: int, last_names: list[str]
) -> list[tuple[User, dict[str, ProjectSummary]]]:
    """Billable hours per project and task for the listed users."""
    wanted = {name.lower() for name in last_names}
    users = [u for u in source.fetch_users() if u.last_name.lower() in wanted]
    first, last = month_bounds(year, month)

    logger.info(f"Generating billing reports for {year}-{month}")
    user_ids = {u.id for u in users}
    user_entries = group_entries_by_user(
        users,
        [e for e in source.fetch_entries(first, last) if e.user_id in user_ids],
        include_non_billable=False,
        keep_idle_active=source.keep_idle_active,
    )
    return [(item.user, group_by_project_and_task(item.entries)) for item in user_entries]


def monthly_reminders(
    config: Config,
    source: EntrySource,
    year: int,
    month: int,
    email: str | None = None,
    today: date | None = None,
    require_last_day: bool = False,
) -> list[Message]:
    """
    Missing working days per active user for a month.

    With require_last_day set nothing is produced unless today is the last
    day of the month.
    """
    today = today or date.today()
    calendar = config.calendar()
    if require_last_day and not calendar.is_last_day_of_month(today):
        logger.info(f"{today.isoformat()} is not the last day of the month, skipping reminders")
        return []

    users = [u for u in source.fetch_users() if u.is_active]
    if email:
        user = find_user(users, email)
        users = [user] if user else []

    logger.info(f"Sending monthly reminder for {year}-{month} to {len(users)} users")
    first, last = month_bounds(year, month)
    entries = source.fetch_entries(first, last)
    reminders = []
    for user in users:
        user_entries = [e for e in entries if e.user_id == user.id]
        missing = find_missing_dates(user_entries, calendar, year, month, until=today)
        if missing:
            reminders.append(
                Message(
                    header=f"{user.name}: {len(missing)} working days without hours in {year}-{month:02d}",
                    messages=[format_date(d) for d in missing],
                )
            )
    return reminders
