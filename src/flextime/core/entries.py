"""Time entry and user domain models - no I/O dependencies."""

import logging
from dataclasses import dataclass, field
from datetime import date

logger = logging.getLogger(__name__)


class EntryError(ValueError):
    """Raised when a raw time entry cannot be normalized."""

    def __init__(self, message: str, entry: dict | None = None):
        super().__init__(message)
        self.entry = entry


@dataclass(frozen=True)
class TimeEntry:
    """One logged unit of time against a project/task on a date."""

    date: date
    hours: float
    billable: bool
    project_id: str
    project_name: str
    task_id: str
    task_name: str
    notes: str = ""
    user_id: str = ""
    employee_company: str = ""
    hourly_rate: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "TimeEntry":
        """
        Create a TimeEntry from an already normalized dict.

        Raises EntryError naming the entry when a required field is missing
        or a value cannot be parsed.
        """
        try:
            raw_date = data["date"]
            entry_date = raw_date if isinstance(raw_date, date) else date.fromisoformat(raw_date[:10])
            hours = float(data["hours"])
            rate = data.get("hourly_rate")
            billable = data["billable"]
            if not isinstance(billable, bool):
                raise TypeError(f"billable must be a boolean, got {billable!r}")
            entry = cls(
                date=entry_date,
                hours=hours,
                billable=billable,
                project_id=str(data["project_id"]),
                project_name=data.get("project_name") or "",
                task_id=str(data["task_id"]),
                task_name=data.get("task_name") or "",
                notes=data.get("notes") or "",
                user_id=str(data.get("user_id") or ""),
                employee_company=data.get("employee_company") or "",
                hourly_rate=float(rate) if rate is not None else None,
            )
        except KeyError as e:
            raise EntryError(f"Time entry is missing field {e}: {data!r}", data) from e
        except (TypeError, ValueError) as e:
            raise EntryError(f"Invalid time entry {data!r}: {e}", data) from e

        if entry.hours < 0:
            raise EntryError(f"Negative hours in time entry {data!r}", data)
        return entry


@dataclass(frozen=True)
class User:
    """A person logging time."""

    id: str
    first_name: str
    last_name: str
    email: str = ""
    is_active: bool = True
    is_admin: bool = False
    is_contractor: bool = False
    roles: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.first_name, self.last_name)


@dataclass
class UserEntries:
    """All entries one user logged in a reporting run."""

    user: User
    entries: list[TimeEntry] = field(default_factory=list)


def sort_users(users: list[User]) -> list[User]:
    """Sort users by first name, ties broken by last name (ordinal)."""
    return sorted(users, key=lambda u: u.sort_key)


def group_entries_by_user(
    users: list[User],
    entries: list[TimeEntry],
    include_non_billable: bool = True,
    keep_idle_active: bool = True,
) -> list[UserEntries]:
    """
    Group entries under their owning user, users in sort order.

    A user without entries is kept only when keep_idle_active is set and the
    user is active.
    """
    by_user: dict[str, list[TimeEntry]] = {}
    for entry in entries:
        if not include_non_billable and not entry.billable:
            continue
        by_user.setdefault(entry.user_id, []).append(entry)

    known = {u.id for u in users}
    orphaned = sum(len(v) for k, v in by_user.items() if k not in known)
    if orphaned:
        logger.warning(f"{orphaned} time entries belong to no known user and were skipped")

    result = []
    for user in sort_users(users):
        user_entries = by_user.get(user.id, [])
        if user_entries or (keep_idle_active and user.is_active):
            result.append(UserEntries(user=user, entries=user_entries))
    return result
