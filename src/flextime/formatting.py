"""Row rendering for terminal tables and JSON output."""

from dataclasses import asdict
from datetime import date

from .core.analyzer import BlankRow, CalendarDaysRow, HoursStats, SectionRow, WorkingHoursReport
from .core.billing import ProjectHeaderRow, TaskRow, TotalRow, UserRow


def format_date(d: date) -> str:
    """Format date as 'Tuesday, January 2, 2024'."""
    return f"{d.strftime('%A, %B')} {d.day}, {d.year}"


def _num(value: float | None) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def row_cells(row) -> list[str]:
    """Cells for one row, in sheet column order. Each row kind fills only its own columns."""
    match row:
        case BlankRow():
            return []
        case SectionRow(name=name):
            return [name]
        case CalendarDaysRow(days=days, name=name):
            return [name, _num(days)]
        case HoursStats():
            return [
                row.name,
                _num(row.days),
                _num(row.hours_per_calendar),
                _num(row.hours),
                _num(row.billable_hours),
                row.project_name,
                _num(row.billable_percentage),
                _num(row.flex_saldo),
                _num(row.internally_invoicable_hours),
                _num(row.sick_leave_hours),
                _num(row.child_sickness_hours),
                _num(row.vacation_days),
                _num(row.unpaid_leave_days),
                _num(row.parental_leave_days),
                _num(row.extra_paid_leave_days),
                row.vacation_dates,
                _num(row.marked_days),
                _num(row.missing_days),
            ]
        case ProjectHeaderRow():
            return [row.project_name, "", "", "", _num(row.hours), _num(row.total)]
        case TaskRow():
            return ["", row.task_name, _num(row.rate), "", _num(row.hours), _num(row.total)]
        case UserRow():
            return ["", "", "", row.name, _num(row.hours), _num(row.total)]
        case TotalRow():
            return ["", "", "", "", _num(row.hours), _num(row.total), _num(row.average)]
        case WorkingHoursReport():
            return [
                row.name,
                _num(row.non_vacation_days),
                _num(row.vacation_days),
                _num(row.total_work_weeks),
                _num(row.max_work_hours),
                _num(row.total_work_hours),
            ]
    raise TypeError(f"Unknown row type {type(row).__name__}")


_ROW_KINDS = {
    BlankRow: "blank",
    SectionRow: "section",
    CalendarDaysRow: "calendar_days",
    HoursStats: "user_stats",
    ProjectHeaderRow: "project",
    TaskRow: "task",
    UserRow: "user",
    TotalRow: "total",
    WorkingHoursReport: "working_hours",
}


def row_to_dict(row) -> dict:
    """JSON-ready dict carrying only the keys this row kind has."""
    data = {"kind": _ROW_KINDS[type(row)], **asdict(row)}
    if isinstance(row, TotalRow):
        data["average"] = row.average
    return data


def format_table(headers: list[str], rows: list) -> str:
    """Render rows as a left-aligned text table under the given headers."""
    lines = [[str(h) for h in headers]] + [row_cells(r) for r in rows]
    widths: dict[int, int] = {}
    for cells in lines:
        for i, cell in enumerate(cells):
            widths[i] = max(widths.get(i, 0), len(cell))
    return "\n".join(
        "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip() for cells in lines
    )
