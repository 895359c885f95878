"""Pure billing rollup logic - no I/O dependencies."""

from dataclasses import dataclass, field
from typing import Iterable, Protocol

from .analyzer import BlankRow
from .entries import TimeEntry, User, UserEntries
from .taxonomy import Classifier, ConfigurationError


# ============== Rates ==============


class RateLookup(Protocol):
    """Hourly rate source for billable entries."""

    def rate_for(self, entry: TimeEntry) -> float | None:
        """Hourly rate for the entry's project and task, None if unrated."""
        ...


class TaskRateTable:
    """Rates configured out-of-band, keyed by (project_id, task_id)."""

    def __init__(self, rates: dict[tuple[str, str], float] | None = None):
        self._rates: dict[tuple[str, str], float] = {}
        for (project_id, task_id), rate in (rates or {}).items():
            self.add(project_id, task_id, rate)

    def add(self, project_id: str | int, task_id: str | int, rate) -> None:
        """Register a rate. Conflicting or invalid rates raise ConfigurationError."""
        if rate is None:
            return
        key = (str(project_id), str(task_id))
        try:
            value = float(rate)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid hourly rate {rate!r} for project/task {key}") from e
        if value < 0:
            raise ConfigurationError(f"Negative hourly rate {value} for project/task {key}")
        existing = self._rates.get(key)
        if existing is not None and existing != value:
            raise ConfigurationError(f"Conflicting hourly rates {existing} and {value} for project/task {key}")
        self._rates[key] = value

    def rate_for(self, entry: TimeEntry) -> float | None:
        return self._rates.get((entry.project_id, entry.task_id))

    def __len__(self) -> int:
        return len(self._rates)


class EmbeddedRates:
    """Rates carried on each entry by providers that price per entry."""

    def rate_for(self, entry: TimeEntry) -> float | None:
        return entry.hourly_rate


# ============== Tree ==============


@dataclass
class UserNode:
    name: str
    hours: float = 0.0


@dataclass
class TaskNode:
    name: str
    rate: float | None = None
    users: dict[str, UserNode] = field(default_factory=dict)


@dataclass
class ProjectNode:
    name: str
    tasks: dict[str, TaskNode] = field(default_factory=dict)


@dataclass(frozen=True)
class BillableEntry:
    """A billable entry tagged with its owner."""

    entry: TimeEntry
    user: User


class BillingTree:
    """
    Project -> task -> user hour accumulators.

    Nodes are created on first sight and hours are only ever added.
    """

    def __init__(self, rates: RateLookup):
        self.rates = rates
        self.projects: dict[str, ProjectNode] = {}

    def add(self, item: BillableEntry) -> None:
        entry = item.entry
        project = self.projects.setdefault(entry.project_id, ProjectNode(name=entry.project_name))
        task = project.tasks.get(entry.task_id)
        if task is None:
            task = project.tasks[entry.task_id] = TaskNode(name=entry.task_name)
        if task.rate is None:
            task.rate = self.rates.rate_for(entry)
        user = task.users.setdefault(item.user.id, UserNode(name=item.user.name))
        user.hours += entry.hours

    @property
    def total_hours(self) -> float:
        return sum(
            user.hours
            for project in self.projects.values()
            for task in project.tasks.values()
            for user in task.users.values()
        )


# ============== Rows ==============


@dataclass(frozen=True)
class ProjectHeaderRow:
    project_name: str
    hours: float
    total: float


@dataclass(frozen=True)
class TaskRow:
    task_name: str
    rate: float | None
    hours: float
    total: float


@dataclass(frozen=True)
class UserRow:
    name: str
    hours: float
    total: float


@dataclass(frozen=True)
class TotalRow:
    hours: float
    total: float

    @property
    def average(self) -> float:
        """Average hourly rate, 0 when nothing was billed."""
        return self.total / self.hours if self.hours else 0


BillingRow = ProjectHeaderRow | TaskRow | UserRow | BlankRow | TotalRow


def flatten_billable_entries(user_entries: list[UserEntries], classifier: Classifier) -> list[BillableEntry]:
    """Keep billable, non-away entries and tag each with its user."""
    return [
        BillableEntry(entry=entry, user=item.user)
        for item in user_entries
        for entry in item.entries
        if entry.billable and not classifier.is_away(entry)
    ]


def build_billing_tree(items: Iterable[BillableEntry], rates: RateLookup) -> BillingTree:
    tree = BillingTree(rates)
    for item in items:
        tree.add(item)
    return tree


def render_billing_rows(tree: BillingTree) -> list[BillingRow]:
    """
    Flatten the tree into sheet rows.

    Per project: header, then per task a subtotal row followed by its user
    rows, then a blank separator. A grand total row closes the sheet.
    Unrated tasks keep rate None and total 0.
    """
    rows: list[BillingRow] = []
    grand_hours = 0.0
    grand_total = 0.0

    for project in tree.projects.values():
        task_rows: list[BillingRow] = []
        project_hours = 0.0
        project_total = 0.0
        for task in project.tasks.values():
            rate = task.rate or 0
            user_rows = [
                UserRow(name=user.name, hours=user.hours, total=user.hours * rate)
                for user in task.users.values()
            ]
            task_hours = sum(r.hours for r in user_rows)
            task_total = sum(r.total for r in user_rows)
            task_rows.append(TaskRow(task_name=task.name, rate=task.rate, hours=task_hours, total=task_total))
            task_rows.extend(user_rows)
            project_hours += task_hours
            project_total += task_total

        rows.append(ProjectHeaderRow(project_name=project.name, hours=project_hours, total=project_total))
        rows.extend(task_rows)
        rows.append(BlankRow())
        grand_hours += project_hours
        grand_total += project_total

    rows.append(TotalRow(hours=grand_hours, total=grand_total))
    return rows


def get_billable_stats(
    user_entries: list[UserEntries],
    classifier: Classifier,
    rates: RateLookup,
) -> list[BillingRow]:
    """Billing rollup rows for all users' billable entries."""
    tree = build_billing_tree(flatten_billable_entries(user_entries, classifier), rates)
    return render_billing_rows(tree)
