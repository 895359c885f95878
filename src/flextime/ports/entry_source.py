"""Time entry source interface."""

from datetime import date
from typing import Protocol

from flextime.core.billing import RateLookup
from flextime.core.entries import TimeEntry, User
from flextime.core.taxonomy import CategoryResolver


class EntrySource(Protocol):
    """Interface for reading users, entries and rates from any tracking provider."""

    name: str
    keep_idle_active: bool

    def fetch_users(self) -> list[User]:
        """Fetch all users."""
        ...

    def fetch_entries(self, start: date, end: date) -> list[TimeEntry]:
        """Fetch entries dated between start and end, both inclusive."""
        ...

    def fetch_rates(self) -> RateLookup:
        """Fetch the hourly rate source for billable tasks."""
        ...

    def resolver(self) -> CategoryResolver:
        """Category resolution strategy for this provider's task identifiers."""
        ...
