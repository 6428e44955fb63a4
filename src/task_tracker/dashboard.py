from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from .models import Priority, Task


# PUBLIC_INTERFACE
class Summary(BaseModel):
    """
    Dashboard aggregates over the whole task collection.
    Percentages are 0 when there are no tasks.
    """

    model_config = ConfigDict(frozen=True)

    total: int = Field(0, description="Number of tasks")
    completed: int = Field(0, description="Completed tasks")
    active: int = Field(0, description="Tasks not yet completed")
    high: int = Field(0, description="High priority tasks")
    medium: int = Field(0, description="Medium priority tasks")
    low: int = Field(0, description="Low priority tasks")
    completed_pct: float = 0.0
    active_pct: float = 0.0
    high_pct: float = 0.0
    medium_pct: float = 0.0
    low_pct: float = 0.0


def percentage(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return count / total * 100


# PUBLIC_INTERFACE
def summarize(tasks: Iterable[Task]) -> Summary:
    """Count tasks by completion and priority."""
    total = completed = high = medium = low = 0
    for task in tasks:
        total += 1
        if task.completed:
            completed += 1
        if task.priority == Priority.HIGH:
            high += 1
        elif task.priority == Priority.MEDIUM:
            medium += 1
        elif task.priority == Priority.LOW:
            low += 1
    active = total - completed
    return Summary(
        total=total,
        completed=completed,
        active=active,
        high=high,
        medium=medium,
        low=low,
        completed_pct=percentage(completed, total),
        active_pct=percentage(active, total),
        high_pct=percentage(high, total),
        medium_pct=percentage(medium, total),
        low_pct=percentage(low, total),
    )
