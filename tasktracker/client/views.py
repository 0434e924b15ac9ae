"""Local, display-only transformations of the fetched task list."""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..schemas.task import Priority, Task


def filter_tasks(tasks: Sequence[Task], term: str) -> List[Task]:
    """Case-insensitive substring match on the text or any tag."""
    needle = term.lower()
    if not needle:
        return list(tasks)
    return [
        task for task in tasks
        if needle in task.text.lower() or any(needle in tag.lower() for tag in task.tags)
    ]


@dataclass
class Analytics:
    total: int = 0
    completed: int = 0
    priority_counts: Dict[str, int] = field(
        default_factory=lambda: {p.value: 0 for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)}
    )

    @property
    def pending(self) -> int:
        return self.total - self.completed

    @property
    def percentage(self) -> int:
        if not self.total:
            return 0
        # Halves round up.
        return int(self.completed * 100 / self.total + 0.5)

    def share(self, priority: str) -> float:
        """Fraction of all tasks carrying ``priority`` (0.0 when empty)."""
        return self.priority_counts.get(priority, 0) / self.total if self.total else 0.0


def compute_analytics(tasks: Sequence[Task]) -> Analytics:
    stats = Analytics(total=len(tasks))
    for task in tasks:
        if task.completed:
            stats.completed += 1
        key = task.priority.value
        stats.priority_counts[key] = stats.priority_counts.get(key, 0) + 1
    return stats


def reorder_tasks(tasks: Sequence[Task], dragged_id: int, target_id: int) -> List[Task]:
    """Move the dragged task into the target's slot.

    Returns an unchanged copy when the ids are equal or either is missing.
    """
    result = list(tasks)
    ids = [task.id for task in result]
    if dragged_id == target_id or dragged_id not in ids or target_id not in ids:
        return result
    target_index = ids.index(target_id)
    result.insert(target_index, result.pop(ids.index(dragged_id)))
    return result
