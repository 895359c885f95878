"""Configuration management for flextime."""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from .core.calendar import DEFAULT_COUNTRY, HOURS_IN_DAY, WorkCalendar
from .core.taxonomy import Category, ConfigurationError, TaskTaxonomy, parse_categories

logger = logging.getLogger(__name__)

FLEXTIME_HOME = Path(os.environ.get("FLEXTIME_HOME", Path.home() / "flextime"))
CONFIG_FILE = FLEXTIME_HOME / "config" / "flextime.conf"
EXPORT_DIR = FLEXTIME_HOME / "exports"

PROVIDERS = ("harvest", "agileday")

DEFAULT_HARVEST_TASK_IDS = {
    "vacation": "11369141",
    "unpaidLeave": "1369142",
    "parentalLeave": "18450208",
    "sickLeave": "11369140",
    "sickLeaveChildsSickness": "18406328",
    "extraPaidLeave": "13538291",
    "internallyInvoicable": "14655092",
}

DEFAULT_AGILEDAY_TASK_NAMES = {
    "vacation": "annual holiday",
    "unpaidLeave": "unpaid leave",
    "parentalLeave": "parental leave",
    "sickLeave": "sick leave",
    "sickLeaveChildsSickness": "child sick",
    "extraPaidLeave": "extra paid leave",
    "internallyInvoicable": "internally invoicable",
}

DEFAULT_HOURS_STATS_COLUMN_HEADERS = [
    "Name",
    "Working days",
    "Full hours",
    "Done hours",
    "Billable",
    "Project",
    "Billable%",
    "Plus / minus",
    "Internally invoicable, hours",
    "Sick leave, hours",
    "Sick leave - child's sickness, hours",
    "Paid vacation, days",
    "Unpaid vacation, days",
    "Parental leave, days",
    "Extra paid leave, days",
    "Paid vacation dates",
    "Marked days",
    "Missing days",
]

DEFAULT_BILLABLE_STATS_COLUMN_HEADERS = [
    "Project",
    "Task",
    "Hour rate",
    "Consultant",
    "Hours",
    "EUR",
    "Avg hour rate",
]

DEFAULT_WORKING_HOURS_REPORT_HEADERS = [
    "Name",
    "Non-vacation days",
    "Vacation days",
    "Working weeks",
    "Max working hours",
    "Total working hours",
]


def _config_key(category: Category) -> str:
    """Config file suffix for a category, e.g. sickLeaveChildsSickness -> sick_leave_childs_sickness."""
    return re.sub(r"([A-Z])", r"_\1", category.value).lower()


CATEGORY_KEYS = {_config_key(c): c.value for c in Category}


@dataclass
class Config:
    """flextime configuration."""

    provider: str = "harvest"
    export_dir: str = ""
    holiday_country: str = DEFAULT_COUNTRY
    hours_in_day: float = HOURS_IN_DAY
    harvest_task_ids: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HARVEST_TASK_IDS))
    agileday_task_names: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_AGILEDAY_TASK_NAMES))
    away_categories: list[str] = field(default_factory=lambda: ["vacation", "unpaidLeave"])
    hours_stats_column_headers: list[str] = field(
        default_factory=lambda: list(DEFAULT_HOURS_STATS_COLUMN_HEADERS)
    )
    billable_stats_column_headers: list[str] = field(
        default_factory=lambda: list(DEFAULT_BILLABLE_STATS_COLUMN_HEADERS)
    )
    working_hours_report_headers: list[str] = field(
        default_factory=lambda: list(DEFAULT_WORKING_HOURS_REPORT_HEADERS)
    )

    @property
    def export_path(self) -> Path:
        if self.export_dir:
            return Path(self.export_dir).expanduser()
        return EXPORT_DIR / self.provider

    def calendar(self) -> WorkCalendar:
        return WorkCalendar(country=self.holiday_country, hours_in_day=self.hours_in_day)

    def taxonomy(self, provider: str | None = None) -> TaskTaxonomy:
        """Task taxonomy for a provider. Raises ConfigurationError on duplicate identifiers."""
        match provider or self.provider:
            case "harvest":
                return TaskTaxonomy(self.harvest_task_ids)
            case "agileday":
                return TaskTaxonomy(self.agileday_task_names, case_insensitive=True)
            case other:
                raise ConfigurationError(f"Unknown provider '{other}', expected one of {', '.join(PROVIDERS)}")

    def away(self) -> frozenset[Category]:
        return parse_categories(",".join(self.away_categories))


def _split_list(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def load_config() -> Config:
    """Load configuration from flextime.conf file."""
    config = Config()

    if not CONFIG_FILE.exists():
        return config

    for line in CONFIG_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "provider":
                config.provider = value.lower()
            case "export_dir":
                config.export_dir = value
            case "holiday_country":
                config.holiday_country = value.upper()
            case "hours_in_day":
                try:
                    config.hours_in_day = float(value)
                except ValueError:
                    logger.warning(f"Invalid HOURS_IN_DAY '{value}', using {config.hours_in_day}")
            case "away_categories":
                config.away_categories = _split_list(value)
            case "hours_stats_column_headers":
                config.hours_stats_column_headers = _split_list(value)
            case "billable_stats_column_headers":
                config.billable_stats_column_headers = _split_list(value)
            case "working_hours_report_headers":
                config.working_hours_report_headers = _split_list(value)
            case _ if key.startswith("task_id_"):
                category = CATEGORY_KEYS.get(key.removeprefix("task_id_"))
                if category:
                    config.harvest_task_ids[category] = value
                else:
                    logger.warning(f"Unknown task category in {key.upper()}")
            case _ if key.startswith("agileday_task_"):
                category = CATEGORY_KEYS.get(key.removeprefix("agileday_task_"))
                if category:
                    config.agileday_task_names[category] = value.lower()
                else:
                    logger.warning(f"Unknown task category in {key.upper()}")

    return config
