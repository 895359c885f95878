"""Shared fixtures for flextime tests."""

import json
from datetime import date

import pytest

from flextime.config import Config
from flextime.core.calendar import WorkCalendar
from flextime.core.entries import TimeEntry, User, UserEntries
from flextime.core.taxonomy import Category, Classifier, TaskIdResolver, TaskTaxonomy

TASK_IDS = {
    Category.PUBLIC_HOLIDAY: "PH",
    Category.VACATION: "VAC",
    Category.UNPAID_LEAVE: "UL",
    Category.PARENTAL_LEAVE: "PL",
    Category.EXTRA_PAID_LEAVE: "EPL",
    Category.SICK_LEAVE: "SL",
    Category.CHILD_SICKNESS: "CS",
    Category.FLEX_LEAVE: "FL",
    Category.INTERNALLY_INVOICABLE: "II",
    Category.PRODUCT_SERVICE_DEVELOPMENT: "PSD",
}
WORK = "DEV"


@pytest.fixture
def today():
    return date(2024, 1, 15)


@pytest.fixture
def calendar():
    return WorkCalendar()


@pytest.fixture
def taxonomy():
    return TaskTaxonomy(TASK_IDS)


@pytest.fixture
def classifier(taxonomy):
    return Classifier(TaskIdResolver(taxonomy))


@pytest.fixture
def make_entry():
    """Factory for time entries; task defaults to ordinary billable work."""

    def _make(
        day: date,
        hours: float = 7.5,
        task_id: str = WORK,
        billable: bool | None = None,
        project_id: str = "p1",
        project_name: str = "Acme",
        task_name: str | None = None,
        user_id: str = "u1",
        **kwargs,
    ) -> TimeEntry:
        if billable is None:
            billable = task_id == WORK
        return TimeEntry(
            date=day,
            hours=hours,
            billable=billable,
            project_id=project_id,
            project_name=project_name,
            task_id=task_id,
            task_name=task_name or task_id.title(),
            user_id=user_id,
            **kwargs,
        )

    return _make


@pytest.fixture
def ada():
    return User(id="u1", first_name="Ada", last_name="Lovelace", email="ada@example.com")


@pytest.fixture
def grace():
    return User(id="u2", first_name="Grace", last_name="Hopper", email="grace@example.com")


@pytest.fixture
def user_entries(ada):
    def _make(entries, user=None):
        return UserEntries(user=user or ada, entries=list(entries))

    return _make


HARVEST_USERS = [
    {"id": 1, "first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com", "is_active": True},
    {"id": 2, "first_name": "Grace", "last_name": "Hopper", "email": "grace@example.com", "is_contractor": True},
    {"id": 3, "first_name": "Olli", "last_name": "Office", "email": "olli@example.com", "roles": ["Non-billable"]},
    {"id": 4, "first_name": "Gone", "last_name": "Away", "email": "gone@example.com", "is_active": False},
]

ACME = {"id": 10, "name": "Acme"}
OFFICE = {"id": 11, "name": "Office"}
DEVELOPMENT = {"id": 100, "name": "Development"}
INTERNAL = {"id": 101, "name": "Internal"}
VACATION = {"id": 900, "name": "Vacation"}


def harvest_entry(spent_date, hours, billable, project, task, user_id, notes=None):
    return {
        "spent_date": spent_date,
        "hours": hours,
        "billable": billable,
        "project": project,
        "task": task,
        "user": {"id": user_id},
        "notes": notes,
    }


HARVEST_ENTRIES = [
    harvest_entry("2024-01-02", 7.5, True, ACME, DEVELOPMENT, 1, "API work"),
    harvest_entry("2024-01-03", 8, True, ACME, DEVELOPMENT, 1),
    harvest_entry("2024-01-04", 7, False, OFFICE, INTERNAL, 1),
    harvest_entry("2024-01-08", 7.5, False, OFFICE, VACATION, 1),
    harvest_entry("2024-01-02", 4, True, ACME, DEVELOPMENT, 2),
]

HARVEST_TASK_ASSIGNMENTS = [
    {"project": {"id": 10}, "task": {"id": 100}, "hourly_rate": 100},
    {"project": {"id": 11}, "task": {"id": 101}, "hourly_rate": None},
]

HARVEST_TASK_IDS = {"vacation": "900", "sickLeave": "901", "publicHoliday": "902"}


@pytest.fixture
def harvest_dir(tmp_path):
    """Harvest export directory, entries stored as an API page."""
    export = tmp_path / "harvest"
    export.mkdir()
    (export / "users.json").write_text(json.dumps({"users": HARVEST_USERS}))
    (export / "time_entries.json").write_text(json.dumps({"time_entries": HARVEST_ENTRIES, "per_page": 100}))
    (export / "task_assignments.json").write_text(json.dumps(HARVEST_TASK_ASSIGNMENTS))
    return export


AGILEDAY_EMPLOYEES = [
    {"id": "e1", "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "active": True},
    {"id": "e2", "firstName": "Idle", "lastName": "Person", "email": "idle@example.com", "active": True},
]


def agileday_row(day, hours, billable, project_id, project_name, task, status="submitted", price=None):
    return {
        "date": day,
        "actualHours": hours,
        "billable": billable,
        "projectId": project_id,
        "projectName": project_name,
        "projectTask": task,
        "employeeId": "e1",
        "employeeCompany": "Example Oy",
        "hourlyPrice": price,
        "status": status,
    }


AGILEDAY_TIME_REPORTING = [
    agileday_row("2024-01-02", 7.5, True, "pa", "Acme", "Development", price=90),
    agileday_row("2024-01-03", 7.5, False, "pi", "Internal", "Annual Holiday"),
    agileday_row("2024-01-04", 7.5, True, "pa", "Acme", "Development", status="draft", price=90),
]


@pytest.fixture
def agileday_dir(tmp_path):
    export = tmp_path / "agileday"
    export.mkdir()
    (export / "employee.json").write_text(json.dumps(AGILEDAY_EMPLOYEES))
    (export / "time_reporting.json").write_text(json.dumps(AGILEDAY_TIME_REPORTING))
    return export


@pytest.fixture
def harvest_config(harvest_dir):
    return Config(provider="harvest", export_dir=str(harvest_dir), harvest_task_ids=dict(HARVEST_TASK_IDS))


@pytest.fixture
def agileday_config(agileday_dir):
    return Config(provider="agileday", export_dir=str(agileday_dir))
