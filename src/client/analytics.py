"""Task distribution counts for the analytics charts."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable

from core.models.task import PRIORITY_ORDER, STATUS_ORDER


@dataclass
class TaskSummary:
    total: int = 0
    # Always contain every status / priority, zero-filled, in display order
    by_status: Dict[str, int] = field(default_factory=dict)
    by_priority: Dict[str, int] = field(default_factory=dict)

    @property
    def completion_rate(self) -> float:
        if not self.total:
            return 0.0
        return self.by_status.get("completed", 0) / self.total


def summarize(tasks: Iterable) -> TaskSummary:
    """Count tasks by status and by priority."""
    tasks = list(tasks)
    statuses = Counter(getattr(t.status, "value", t.status) for t in tasks)
    priorities = Counter(getattr(t.priority, "value", t.priority) for t in tasks)

    return TaskSummary(
        total=len(tasks),
        by_status={s.value: statuses.get(s.value, 0) for s in STATUS_ORDER},
        by_priority={p.value: priorities.get(p.value, 0) for p in PRIORITY_ORDER},
    )
