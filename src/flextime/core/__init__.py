"""Functional core - pure business logic with no I/O."""

from .calendar import CalendarDay, WorkCalendar, dates_equal
from .entries import EntryError, TimeEntry, User, UserEntries, group_entries_by_user
from .taxonomy import (
    Category,
    Classifier,
    ConfigurationError,
    TaskIdResolver,
    TaskNameResolver,
    TaskTaxonomy,
)
from .analyzer import (
    HoursStats,
    PeriodRange,
    WorkedHours,
    WorkingHoursReport,
    calculate_worked_hours,
    get_hours_stats,
    get_period_range,
    get_working_hours_report_data,
)
from .billing import EmbeddedRates, TaskRateTable, get_billable_stats

__all__ = [
    # Calendar
    "CalendarDay",
    "WorkCalendar",
    "dates_equal",
    # Entries
    "EntryError",
    "TimeEntry",
    "User",
    "UserEntries",
    "group_entries_by_user",
    # Taxonomy
    "Category",
    "Classifier",
    "ConfigurationError",
    "TaskIdResolver",
    "TaskNameResolver",
    "TaskTaxonomy",
    # Analyzer
    "HoursStats",
    "PeriodRange",
    "WorkedHours",
    "WorkingHoursReport",
    "calculate_worked_hours",
    "get_hours_stats",
    "get_period_range",
    "get_working_hours_report_data",
    # Billing
    "EmbeddedRates",
    "TaskRateTable",
    "get_billable_stats",
]
