"""
Client-side task view: filtering and ordering.

    view(tasks, FilterCriteria(status="pending", due_date="week"))

``view`` is a pure function of the task list, the criteria and "today".
It keeps tasks matching every active criterion and orders them by status
(pending, in_progress, completed) and then by due date, earliest first.
Python's sort is stable, so tasks tied on both keys keep their input order.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from core.models.task import PRIORITY_ORDER, STATUS_ORDER, TaskStatus

ALL = "all"

DUE_TODAY = "today"
DUE_THIS_WEEK = "week"
DUE_OVERDUE = "overdue"
DUE_DATE_PRESETS = (ALL, DUE_TODAY, DUE_THIS_WEEK, DUE_OVERDUE)

PRIORITY_CHOICES = (ALL,) + tuple(p.value for p in PRIORITY_ORDER)
STATUS_CHOICES = (ALL,) + tuple(s.value for s in STATUS_ORDER)


def _value(field) -> Optional[str]:
    """Enum members and plain strings compare the same way."""
    if field is None:
        return None
    return getattr(field, "value", field)


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class FilterCriteria:
    """
    User-selected filter. Every field defaults to ``"all"``.

    ``due_date`` is one of all/today/week/overdue or an ISO date
    (``YYYY-MM-DD``) to match a single day.
    """

    priority: str = ALL
    status: str = ALL
    category: str = ALL
    due_date: str = ALL

    def __post_init__(self):
        if self.priority not in PRIORITY_CHOICES:
            raise ValueError(f"Unknown priority filter: {self.priority!r}")
        if self.status not in STATUS_CHOICES:
            raise ValueError(f"Unknown status filter: {self.status!r}")
        if not self.category:
            raise ValueError("Category filter cannot be empty")
        if self.due_date not in DUE_DATE_PRESETS:
            try:
                day = date.fromisoformat(self.due_date)
            except (TypeError, ValueError):
                raise ValueError(f"Unknown due date filter: {self.due_date!r}") from None
            object.__setattr__(self, "due_date", day.isoformat())

    @property
    def is_empty(self) -> bool:
        return (self.priority, self.status, self.category, self.due_date) == (ALL, ALL, ALL, ALL)


def week_bounds(today: date) -> tuple:
    """First and last day of the Sunday-to-Saturday week containing ``today``."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def matches_due_date(due, due_filter: str, today: date) -> bool:
    if due_filter == ALL:
        return True

    due = _as_date(due)
    if due_filter == DUE_TODAY:
        return due == today
    if due_filter == DUE_THIS_WEEK:
        start, end = week_bounds(today)
        return start <= due <= end
    if due_filter == DUE_OVERDUE:
        return due < today
    return due.isoformat() == due_filter


def matches(task, criteria: FilterCriteria, today: date) -> bool:
    """True if the task satisfies every active criterion."""
    if criteria.priority != ALL and _value(task.priority) != criteria.priority:
        return False
    if criteria.status != ALL and _value(task.status) != criteria.status:
        return False
    if criteria.category != ALL and task.category != criteria.category:
        return False
    return matches_due_date(task.due_date, criteria.due_date, today)


def sort_key(task):
    return (TaskStatus(_value(task.status)).rank, _as_date(task.due_date))


def view(
    tasks: Iterable,
    criteria: Optional[FilterCriteria] = None,
    today: Optional[date] = None,
) -> List:
    """
    Filter then order ``tasks`` for display.

    Args:
        tasks: Objects with priority, status, category and due_date attributes.
        criteria: Filter to apply; no filtering when omitted.
        today: Reference day for today/week/overdue; defaults to the local date.

    Returns:
        A new list. The input is not modified.
    """
    criteria = criteria or FilterCriteria()
    today = today or date.today()

    selected = [task for task in tasks if matches(task, criteria, today)]
    return sorted(selected, key=sort_key)


def categories(tasks: Sequence) -> List[str]:
    """Distinct non-empty categories, sorted; the options for the category filter."""
    return sorted({task.category for task in tasks if task.category})
