"""Pure hour statistics logic - no I/O dependencies."""

import logging
import math
from dataclasses import dataclass, field
from datetime import date

from .calendar import WorkCalendar, dates_equal, month_bounds
from .entries import TimeEntry, UserEntries
from .taxonomy import Category, Classifier

logger = logging.getLogger(__name__)

WEEKLY_MAX_HOURS = 48
WORKDAYS_IN_WEEK = 5
NON_BILLABLE_ROLE = "Non-billable"


@dataclass
class PeriodRange:
    """Date-sorted entries and the closed period they are reported against."""

    entries: list[TimeEntry]
    start: date
    end: date


def get_period_range(
    entries: list[TimeEntry],
    latest_full_day: date,
    today: date | None = None,
) -> PeriodRange:
    """
    Select the reportable period for a list of entries.

    The period ends today if something is already logged for today,
    otherwise at latest_full_day. Entries after the end are dropped.
    """
    today = today or date.today()
    if not entries:
        return PeriodRange(entries=[], start=latest_full_day, end=latest_full_day)

    sorted_entries = sorted(entries, key=lambda e: e.date)
    latest_record = sorted_entries[-1].date
    end = latest_record if dates_equal(latest_record, today) else latest_full_day
    return PeriodRange(
        entries=[e for e in sorted_entries if e.date <= end],
        start=sorted_entries[0].date,
        end=end,
    )


@dataclass
class WorkedHours:
    """Running totals for a flex-time balance."""

    total: float = 0.0
    billable: float = 0.0
    non_billable: float = 0.0
    warnings: list[str] = field(default_factory=list)

    @property
    def billable_percentage_current_month(self) -> int:
        all_hours = self.billable + self.non_billable
        if not all_hours:
            return 0
        return math.floor(self.billable / all_hours * 100)


def calculate_worked_hours(
    entries: list[TimeEntry],
    classifier: Classifier,
    calendar: WorkCalendar | None = None,
    today: date | None = None,
) -> WorkedHours:
    """
    Sum worked hours over a period.

    Public holiday and flex leave entries are left out of the total. The
    billable split only covers the current calendar month.
    """
    today = today or date.today()
    result = WorkedHours()

    for entry in entries:
        if classifier.is_public_holiday(entry) or classifier.is_flex_leave(entry):
            continue
        result.total += entry.hours

        if entry.date.year == today.year and entry.date.month == today.month:
            if entry.billable:
                result.billable += entry.hours
            else:
                result.non_billable += entry.hours

        if entry.hours == 0:
            result.warnings.append(f"Zero hours entry on {entry.date.isoformat()} ({entry.task_name})")
        elif calendar and not calendar.is_working_day(entry.date) and classifier.category_of(entry) is None:
            result.warnings.append(
                f"{entry.hours} hours on non-working day {entry.date.isoformat()} ({entry.project_name})"
            )

    return result


def round_down_to_half(value: float) -> float:
    """Round down to the nearest half hour."""
    return math.floor(value * 2) / 2


def compress_day_ranges(days: list[int]) -> str:
    """
    Compress day-of-month numbers into ranges.

    [3, 4, 5, 9] -> "3-5,9"
    """
    parts = []
    sorted_days = sorted(set(days))
    i = 0
    while i < len(sorted_days):
        start = sorted_days[i]
        end = start
        while i + 1 < len(sorted_days) and sorted_days[i + 1] == end + 1:
            i += 1
            end = sorted_days[i]
        parts.append(str(start) if start == end else f"{start}-{end}")
        i += 1
    return ",".join(parts)


@dataclass
class HoursStats:
    """Per-user statistics for one reporting period."""

    name: str
    days: int
    hours_per_calendar: float
    hours: float
    billable_hours: float
    project_names: list[str]
    billable_percentage: float
    flex_saldo: float
    internally_invoicable_hours: float
    sick_leave_hours: float
    child_sickness_hours: float
    sick_days: int
    vacation_days: int
    unpaid_leave_days: int
    parental_leave_days: int
    extra_paid_leave_days: int
    flex_leave_days: int
    vacation_dates: str
    marked_days: int
    missing_days: int

    @property
    def project_name(self) -> str:
        return ",".join(self.project_names)


_DAY_CATEGORIES = (
    Category.SICK_LEAVE,
    Category.VACATION,
    Category.UNPAID_LEAVE,
    Category.PARENTAL_LEAVE,
    Category.EXTRA_PAID_LEAVE,
    Category.FLEX_LEAVE,
)
_HOUR_CATEGORIES = (
    Category.INTERNALLY_INVOICABLE,
    Category.SICK_LEAVE,
    Category.CHILD_SICKNESS,
)


def get_hours_stats(
    user_entries: UserEntries,
    full_calendar_days: int,
    classifier: Classifier,
    calendar: WorkCalendar,
) -> HoursStats:
    """
    Compute one user's statistics for a period.

    Day counts are per distinct date and only cover calendar working days.
    Hour sums include every entry. A marked date is a working day unless
    one of its entries is a holiday or away category.
    """
    marked_dates: list[date] = []
    holiday_dates: set[date] = set()
    category_dates: dict[Category, set[date]] = {c: set() for c in _DAY_CATEGORIES}
    category_hours: dict[Category, float] = {c: 0.0 for c in _HOUR_CATEGORIES}
    hours = 0.0
    billable_hours = 0.0
    project_names: list[str] = []

    for entry in user_entries.entries:
        category = classifier.category_of(entry)
        is_working_or_sick_day = not classifier.is_away(entry)
        is_billable = is_working_or_sick_day and entry.billable

        if calendar.is_working_day(entry.date):
            if entry.date not in marked_dates:
                marked_dates.append(entry.date)
            if classifier.is_holiday(entry) or classifier.is_away(entry):
                holiday_dates.add(entry.date)
            if category in category_dates:
                category_dates[category].add(entry.date)

        if is_working_or_sick_day:
            hours += entry.hours
        if is_billable:
            billable_hours += entry.hours
            if entry.project_name not in project_names:
                project_names.append(entry.project_name)
        if category in category_hours:
            category_hours[category] += entry.hours

    working_days = len([d for d in marked_dates if d not in holiday_dates])
    hours_per_calendar = working_days * calendar.hours_in_day
    missing_days = len(marked_dates) - full_calendar_days
    if missing_days > 0:
        logger.warning(
            f"{user_entries.user.name}: {len(marked_dates)} marked days but only "
            f"{full_calendar_days} calendar working days"
        )

    return HoursStats(
        name=user_entries.user.name,
        days=working_days,
        hours_per_calendar=hours_per_calendar,
        hours=hours,
        billable_hours=billable_hours,
        project_names=project_names,
        billable_percentage=billable_hours / hours * 100 if hours else 0,
        flex_saldo=hours - hours_per_calendar,
        internally_invoicable_hours=category_hours[Category.INTERNALLY_INVOICABLE],
        sick_leave_hours=category_hours[Category.SICK_LEAVE],
        child_sickness_hours=category_hours[Category.CHILD_SICKNESS],
        sick_days=len(category_dates[Category.SICK_LEAVE]),
        vacation_days=len(category_dates[Category.VACATION]),
        unpaid_leave_days=len(category_dates[Category.UNPAID_LEAVE]),
        parental_leave_days=len(category_dates[Category.PARENTAL_LEAVE]),
        extra_paid_leave_days=len(category_dates[Category.EXTRA_PAID_LEAVE]),
        flex_leave_days=len(category_dates[Category.FLEX_LEAVE]),
        vacation_dates=compress_day_ranges([d.day for d in category_dates[Category.VACATION]]),
        marked_days=len(marked_dates),
        missing_days=missing_days,
    )


# ============== Monthly stats sheet ==============


@dataclass(frozen=True)
class SectionRow:
    """Header row naming a group of users."""

    name: str


@dataclass(frozen=True)
class CalendarDaysRow:
    """Expected working days for the month."""

    days: int
    name: str = "CALENDAR DAYS"


@dataclass(frozen=True)
class BlankRow:
    """Empty separator row."""

    pass


StatsRow = SectionRow | CalendarDaysRow | BlankRow | HoursStats


def split_by_employment(
    user_entries: list[UserEntries],
) -> tuple[list[UserEntries], list[UserEntries], list[UserEntries]]:
    """
    Split users into invoicable, non-invoicable and contractor groups.

    Returns: (invoicable, non_invoicable, contractors)
    """
    invoicable, non_invoicable, contractors = [], [], []
    for item in user_entries:
        if item.user.is_contractor:
            contractors.append(item)
        elif NON_BILLABLE_ROLE in item.user.roles:
            non_invoicable.append(item)
        else:
            invoicable.append(item)
    return invoicable, non_invoicable, contractors


def monthly_hours_rows(
    user_entries: list[UserEntries],
    classifier: Classifier,
    calendar: WorkCalendar,
    year: int,
    month: int,
) -> list[StatsRow]:
    """Build the monthly hours sheet: calendar days, then one section per user group."""
    work_days = calendar.working_days_in_month(year, month)
    invoicable, non_invoicable, contractors = split_by_employment(user_entries)

    rows: list[StatsRow] = [CalendarDaysRow(days=work_days)]
    for title, group in (
        ("INVOICABLE", invoicable),
        ("NON-INVOICABLE", non_invoicable),
        ("CONTRACTORS", contractors),
    ):
        rows.append(BlankRow())
        rows.append(SectionRow(name=title))
        rows.extend(get_hours_stats(item, work_days, classifier, calendar) for item in group)
    return rows


# ============== Working hours report ==============


@dataclass
class WorkingHoursReport:
    """Long-horizon working hours summary for one user."""

    name: str
    non_vacation_days: int
    vacation_days: int
    total_work_weeks: float
    max_work_hours: float
    total_work_hours: float
    billable_hours: float
    internally_invoicable_hours: float
    product_service_development_hours: float
    sick_leave_hours: float
    child_sickness_hours: float


def get_working_hours_report_data(
    user_entries: UserEntries,
    classifier: Classifier,
    calendar: WorkCalendar,
    start: date,
    end: date,
) -> WorkingHoursReport:
    """
    Summarize working hours between start and end, both inclusive.

    max_work_hours is a sanity ceiling of 48 hours per non-vacation week,
    not an enforced limit.
    """
    entries = [e for e in user_entries.entries if start <= e.date <= end]

    vacation_dates = {
        e.date for e in entries if classifier.is_vacation(e) and not calendar.is_weekend(e.date)
    }
    non_vacation_days = calendar.weekdays_between(start, end) - len(vacation_dates)

    def hours_for(category: Category) -> float:
        return sum(e.hours for e in entries if classifier.is_category(e, category))

    total_work_weeks = non_vacation_days / WORKDAYS_IN_WEEK
    return WorkingHoursReport(
        name=user_entries.user.name,
        non_vacation_days=non_vacation_days,
        vacation_days=len(vacation_dates),
        total_work_weeks=total_work_weeks,
        max_work_hours=total_work_weeks * WEEKLY_MAX_HOURS,
        total_work_hours=sum(e.hours for e in entries if classifier.counts_toward_work_hours(e)),
        billable_hours=sum(e.hours for e in entries if e.billable),
        internally_invoicable_hours=hours_for(Category.INTERNALLY_INVOICABLE),
        product_service_development_hours=hours_for(Category.PRODUCT_SERVICE_DEVELOPMENT),
        sick_leave_hours=hours_for(Category.SICK_LEAVE),
        child_sickness_hours=hours_for(Category.CHILD_SICKNESS),
    )


# ============== Billing report grouping ==============


@dataclass
class TaskSummary:
    name: str
    total_hours: float = 0.0
    entries: list[TimeEntry] = field(default_factory=list)


@dataclass
class ProjectSummary:
    name: str
    total_hours: float = 0.0
    tasks: dict[str, TaskSummary] = field(default_factory=dict)


def group_by_project_and_task(entries: list[TimeEntry]) -> dict[str, ProjectSummary]:
    """Group date-sorted entries by project and task, summing hours at both levels."""
    projects: dict[str, ProjectSummary] = {}
    for entry in sorted(entries, key=lambda e: e.date):
        project = projects.setdefault(entry.project_id, ProjectSummary(name=entry.project_name))
        project.total_hours += entry.hours
        task = project.tasks.setdefault(entry.task_id, TaskSummary(name=entry.task_name))
        task.total_hours += entry.hours
        task.entries.append(entry)
    return projects


# ============== Missing days ==============


def find_missing_dates(
    entries: list[TimeEntry],
    calendar: WorkCalendar,
    year: int,
    month: int,
    until: date | None = None,
) -> list[date]:
    """Working days of the month, up to until, with nothing logged."""
    _, last = month_bounds(year, month)
    until = min(until, last) if until else last
    marked = {e.date for e in entries}
    return [d for d in calendar.working_days_of_month(year, month) if d <= until and d not in marked]
