"""AgileDay export adapter - reads downloaded AgileDay API JSON from disk."""

import json
import logging
from datetime import date
from pathlib import Path

from flextime.core.billing import EmbeddedRates
from flextime.core.entries import EntryError, TimeEntry, User
from flextime.core.taxonomy import TaskNameResolver, TaskTaxonomy

logger = logging.getLogger(__name__)

EMPLOYEES_FILE = "employee.json"
TIME_REPORTING_FILE = "time_reporting.json"


def entry_from_agileday(data: dict) -> TimeEntry:
    """
    Normalize an AgileDay time report row.

    AgileDay has no task IDs; the task name, lower-cased, is the task key.
    """
    try:
        task_name = data["projectTask"] or ""
        normalized = {
            "date": data["date"],
            "hours": data["actualHours"],
            "billable": data["billable"],
            "project_id": data["projectId"],
            "project_name": data.get("projectName", ""),
            "task_id": task_name.lower(),
            "task_name": task_name,
            "notes": data.get("note"),
            "user_id": data["employeeId"],
            "employee_company": data.get("employeeCompany"),
            "hourly_rate": data.get("hourlyPrice"),
        }
    except (KeyError, AttributeError) as e:
        raise EntryError(f"AgileDay time report is missing field {e}: {data!r}", data) from e
    return TimeEntry.from_dict(normalized)


def user_from_agileday(data: dict) -> User:
    return User(
        id=str(data["id"]),
        first_name=data.get("firstName", ""),
        last_name=data.get("lastName", ""),
        email=data.get("email", ""),
        is_active=data.get("active", True),
        is_contractor=data.get("contractor", False),
        roles=tuple(data.get("roles") or ()),
    )


class AgiledayExport:
    """
    AgileDay export reader.

    Implements EntrySource protocol. Only submitted time reports are used
    and prices come embedded on each row.
    """

    name = "agileday"
    keep_idle_active = False

    def __init__(self, export_dir: Path | str, taxonomy: TaskTaxonomy):
        self.export_dir = Path(export_dir).expanduser()
        self.taxonomy = taxonomy
        logger.info(f"Using AgileDay export {self.export_dir}")

    def _read(self, filename: str) -> list[dict]:
        return json.loads((self.export_dir / filename).read_text())

    def fetch_users(self) -> list[User]:
        return [user_from_agileday(u) for u in self._read(EMPLOYEES_FILE)]

    def fetch_entries(self, start: date, end: date) -> list[TimeEntry]:
        rows = [r for r in self._read(TIME_REPORTING_FILE) if r.get("status", "submitted") == "submitted"]
        entries = [entry_from_agileday(r) for r in rows]
        return [e for e in entries if start <= e.date <= end]

    def fetch_rates(self) -> EmbeddedRates:
        return EmbeddedRates()

    def resolver(self) -> TaskNameResolver:
        return TaskNameResolver(self.taxonomy)
