"""Pure working-day calendar logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from functools import lru_cache

import holidays

HOURS_IN_DAY = 7.5
DEFAULT_COUNTRY = "FI"
WEEKEND_DAYS = (5, 6)  # Saturday, Sunday


@lru_cache(maxsize=None)
def _holiday_table(country: str, year: int) -> frozenset[date]:
    """Public holidays for one country and year, loaded once per process."""
    return frozenset(holidays.country_holidays(country, years=year).keys())


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def dates_equal(a: date | datetime, b: date | datetime) -> bool:
    """Calendar-day equality, ignoring any time of day."""
    return _as_date(a) == _as_date(b)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    first = date(year, month, 1)
    if month == 12:
        next_first = date(year + 1, 1, 1)
    else:
        next_first = date(year, month + 1, 1)
    return first, next_first - timedelta(days=1)


@dataclass(frozen=True)
class CalendarDay:
    """A date annotated with weekend and public holiday flags."""

    date: date
    is_weekend: bool
    is_public_holiday: bool

    @property
    def is_working_day(self) -> bool:
        return not self.is_weekend and not self.is_public_holiday


class WorkCalendar:
    """
    Working-day calculus for one jurisdiction.

    Weekends are two fixed weekdays, public holidays come from the
    `holidays` package table for the date's year.
    """

    def __init__(
        self,
        country: str = DEFAULT_COUNTRY,
        hours_in_day: float = HOURS_IN_DAY,
        weekend_days: tuple[int, ...] = WEEKEND_DAYS,
    ):
        self.country = country
        self.hours_in_day = hours_in_day
        self.weekend_days = weekend_days

    def is_weekend(self, d: date | datetime) -> bool:
        return _as_date(d).weekday() in self.weekend_days

    def is_public_holiday(self, d: date | datetime) -> bool:
        d = _as_date(d)
        return d in _holiday_table(self.country, d.year)

    def day(self, d: date | datetime) -> CalendarDay:
        d = _as_date(d)
        return CalendarDay(
            date=d,
            is_weekend=self.is_weekend(d),
            is_public_holiday=self.is_public_holiday(d),
        )

    def is_working_day(self, d: date | datetime) -> bool:
        """False on weekends and public holidays, True otherwise."""
        return self.day(d).is_working_day

    def total_work_hours_since(self, from_date: date | datetime, to_date: date | datetime) -> float:
        """
        Working hours between two dates, both inclusive.

        Walks backward one day at a time from to_date. An inverted range
        yields 0.
        """
        from_date = _as_date(from_date)
        working_date = _as_date(to_date)
        hours = 0.0
        while working_date >= from_date:
            if self.is_working_day(working_date):
                hours += self.hours_in_day
            working_date -= timedelta(days=1)
        return hours

    def latest_full_working_day(self, reference: date | datetime | None = None) -> date:
        """Most recent working day strictly before reference (default: today)."""
        working_date = _as_date(reference) if reference else date.today()
        working_date -= timedelta(days=1)
        while not self.is_working_day(working_date):
            working_date -= timedelta(days=1)
        return working_date

    def working_days_in_month(self, year: int, month: int) -> int:
        """Number of working days in a month, derived from the hour total."""
        first, last = month_bounds(year, month)
        return int(self.total_work_hours_since(first, last) / self.hours_in_day)

    def working_days_of_month(self, year: int, month: int) -> list[date]:
        """All working days of a month, ascending."""
        first, last = month_bounds(year, month)
        days = []
        current = first
        while current <= last:
            if self.is_working_day(current):
                days.append(current)
            current += timedelta(days=1)
        return days

    def weekdays_between(self, start: date, end: date) -> int:
        """Count of non-weekend days between two dates, both inclusive."""
        count = 0
        current = start
        while current <= end:
            if not self.is_weekend(current):
                count += 1
            current += timedelta(days=1)
        return count

    def is_last_day_of_month(self, d: date | datetime | None = None) -> bool:
        d = _as_date(d) if d else date.today()
        return (d + timedelta(days=1)).day == 1
