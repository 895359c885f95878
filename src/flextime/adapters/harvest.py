"""Harvest export adapter - reads downloaded Harvest API JSON from disk."""

import json
import logging
from datetime import date
from pathlib import Path

from flextime.core.billing import TaskRateTable
from flextime.core.entries import EntryError, TimeEntry, User
from flextime.core.taxonomy import ConfigurationError, TaskIdResolver, TaskTaxonomy

logger = logging.getLogger(__name__)

USERS_FILE = "users.json"
TIME_ENTRIES_FILE = "time_entries.json"
TASK_ASSIGNMENTS_FILE = "task_assignments.json"


def entry_from_harvest(data: dict) -> TimeEntry:
    """Normalize a Harvest time entry. Raises EntryError on bad shape."""
    try:
        normalized = {
            "date": data["spent_date"],
            "hours": data["hours"],
            "billable": data["billable"],
            "project_id": data["project"]["id"],
            "project_name": data["project"].get("name", ""),
            "task_id": data["task"]["id"],
            "task_name": data["task"].get("name", ""),
            "notes": data.get("notes"),
            "user_id": data["user"]["id"],
        }
    except (KeyError, TypeError) as e:
        raise EntryError(f"Harvest time entry is missing field {e}: {data!r}", data) from e
    return TimeEntry.from_dict(normalized)


def user_from_harvest(data: dict) -> User:
    return User(
        id=str(data["id"]),
        first_name=data.get("first_name", ""),
        last_name=data.get("last_name", ""),
        email=data.get("email", ""),
        is_active=data.get("is_active", True),
        is_admin=data.get("is_admin", False),
        is_contractor=data.get("is_contractor", False),
        roles=tuple(data.get("roles") or ()),
    )


class HarvestExport:
    """
    Harvest export reader.

    Implements EntrySource protocol. Each file holds either a plain list or
    a Harvest API page ({"time_entries": [...], ...}).
    """

    name = "harvest"
    keep_idle_active = True

    def __init__(self, export_dir: Path | str, taxonomy: TaskTaxonomy):
        self.export_dir = Path(export_dir).expanduser()
        self.taxonomy = taxonomy
        logger.info(f"Using Harvest export {self.export_dir}")

    def _read(self, filename: str, key: str) -> list[dict]:
        path = self.export_dir / filename
        data = json.loads(path.read_text())
        if isinstance(data, dict):
            return data.get(key, [])
        return data

    def fetch_users(self) -> list[User]:
        return [user_from_harvest(u) for u in self._read(USERS_FILE, "users")]

    def fetch_entries(self, start: date, end: date) -> list[TimeEntry]:
        entries = [entry_from_harvest(e) for e in self._read(TIME_ENTRIES_FILE, "time_entries")]
        return [e for e in entries if start <= e.date <= end]

    def fetch_rates(self) -> TaskRateTable:
        table = TaskRateTable()
        path = self.export_dir / TASK_ASSIGNMENTS_FILE
        if not path.exists():
            logger.warning(f"No task assignments at {path}, all tasks are unrated")
            return table
        for assignment in self._read(TASK_ASSIGNMENTS_FILE, "task_assignments"):
            try:
                project_id = assignment["project"]["id"]
                task_id = assignment["task"]["id"]
            except (KeyError, TypeError) as e:
                raise ConfigurationError(f"Malformed task assignment {assignment!r}") from e
            table.add(project_id, task_id, assignment.get("hourly_rate"))
        return table

    def resolver(self) -> TaskIdResolver:
        return TaskIdResolver(self.taxonomy)
