"""Leave/task taxonomy and entry classification - no I/O dependencies."""

from enum import Enum
from typing import Mapping, Protocol

from .entries import TimeEntry


class ConfigurationError(ValueError):
    """Raised when taxonomy or rate configuration is inconsistent."""

    pass


class Category(Enum):
    """Semantic leave/work category of a tracked task."""

    PUBLIC_HOLIDAY = "publicHoliday"
    VACATION = "vacation"
    UNPAID_LEAVE = "unpaidLeave"
    PARENTAL_LEAVE = "parentalLeave"
    EXTRA_PAID_LEAVE = "extraPaidLeave"
    SICK_LEAVE = "sickLeave"
    CHILD_SICKNESS = "sickLeaveChildsSickness"
    FLEX_LEAVE = "flexLeave"
    INTERNALLY_INVOICABLE = "internallyInvoicable"
    PRODUCT_SERVICE_DEVELOPMENT = "productServiceDevelopment"


HOLIDAY_CATEGORIES = frozenset(
    {Category.PUBLIC_HOLIDAY, Category.VACATION, Category.UNPAID_LEAVE}
)
DEFAULT_AWAY_CATEGORIES = frozenset({Category.VACATION, Category.UNPAID_LEAVE})
# Hours that count as work even when not billable
WORK_HOUR_CATEGORIES = frozenset(
    {
        Category.SICK_LEAVE,
        Category.CHILD_SICKNESS,
        Category.INTERNALLY_INVOICABLE,
        Category.PRODUCT_SERVICE_DEVELOPMENT,
    }
)


def parse_one(name: str) -> Category:
    try:
        return Category(name)
    except ValueError as e:
        raise ConfigurationError(f"Unknown task category '{name}'") from e


def parse_categories(value: str) -> frozenset[Category]:
    """Parse a comma-separated list of category values, e.g. 'vacation,unpaidLeave'."""
    return frozenset(parse_one(name.strip()) for name in value.split(",") if name.strip())


class TaskTaxonomy:
    """
    Mapping from category to a provider's task identifier.

    Identifiers are compared as strings; with case_insensitive set they are
    lower-cased first. Empty identifiers mean the category is not in use.
    """

    def __init__(self, task_ids: Mapping[Category | str, str | int | None], case_insensitive: bool = False):
        self.case_insensitive = case_insensitive
        self._by_key: dict[str, Category] = {}
        self.task_ids: dict[Category, str] = {}

        for raw_category, raw_id in task_ids.items():
            category = raw_category if isinstance(raw_category, Category) else parse_one(raw_category)
            if raw_id is None or str(raw_id).strip() == "":
                continue
            key = self.normalize(raw_id)
            existing = self._by_key.get(key)
            if existing is not None and existing != category:
                raise ConfigurationError(
                    f"Task identifier '{raw_id}' is assigned to both "
                    f"'{existing.value}' and '{category.value}'"
                )
            self._by_key[key] = category
            self.task_ids[category] = str(raw_id)

    def normalize(self, task_id: str | int) -> str:
        key = str(task_id).strip()
        return key.lower() if self.case_insensitive else key

    def category_for(self, task_id: str | int) -> Category | None:
        return self._by_key.get(self.normalize(task_id))

    def has(self, category: Category) -> bool:
        return category in self.task_ids


class CategoryResolver(Protocol):
    """Strategy that maps an entry to its semantic category."""

    def category_of(self, entry: TimeEntry) -> Category | None:
        """Return the entry's category, or None for ordinary work."""
        ...


class TaskIdResolver:
    """Resolves by exact task identifier (numeric IDs)."""

    def __init__(self, taxonomy: TaskTaxonomy):
        self.taxonomy = taxonomy

    def category_of(self, entry: TimeEntry) -> Category | None:
        return self.taxonomy.category_for(entry.task_id)


class TaskNameResolver:
    """Resolves by free-text task name, case-insensitively."""

    def __init__(self, taxonomy: TaskTaxonomy):
        if not taxonomy.case_insensitive:
            taxonomy = TaskTaxonomy(taxonomy.task_ids, case_insensitive=True)
        self.taxonomy = taxonomy

    def category_of(self, entry: TimeEntry) -> Category | None:
        return self.taxonomy.category_for(entry.task_id or entry.task_name)


class Classifier:
    """
    Classification predicates over entries.

    The away set is the taxonomy capability deciding which categories take
    the person out of work for the day; it defaults to vacation and unpaid
    leave.
    """

    def __init__(
        self,
        resolver: CategoryResolver,
        away: frozenset[Category] = DEFAULT_AWAY_CATEGORIES,
    ):
        self.resolver = resolver
        self.away = frozenset(away)

    def category_of(self, entry: TimeEntry) -> Category | None:
        return self.resolver.category_of(entry)

    def is_category(self, entry: TimeEntry, category: Category) -> bool:
        return self.category_of(entry) == category

    def is_public_holiday(self, entry: TimeEntry) -> bool:
        return self.is_category(entry, Category.PUBLIC_HOLIDAY)

    def is_vacation(self, entry: TimeEntry) -> bool:
        return self.is_category(entry, Category.VACATION)

    def is_flex_leave(self, entry: TimeEntry) -> bool:
        return self.is_category(entry, Category.FLEX_LEAVE)

    def is_holiday(self, entry: TimeEntry) -> bool:
        """Public holiday, paid vacation or unpaid leave."""
        return self.category_of(entry) in HOLIDAY_CATEGORIES

    def is_away(self, entry: TimeEntry) -> bool:
        return self.category_of(entry) in self.away

    def counts_toward_work_hours(self, entry: TimeEntry) -> bool:
        """Billable, or a non-billable category that still counts as work."""
        return entry.billable or self.category_of(entry) in WORK_HOUR_CATEGORIES
