from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .models import DueDateInput, Priority, Task
from .schemas import TaskPatch

logger = logging.getLogger(__name__)

ChangeListener = Callable[[Tuple[Task, ...]], None]


def now_ms() -> int:
    return int(time.time() * 1000)


class TaskStore:
    """
    Owns the canonical, insertion-ordered task collection.

    Mutations never raise for unknown ids or invalid input; they simply change
    nothing. After every operation that does change the collection the
    listener is called once, synchronously, with the new collection.
    """

    def __init__(
        self,
        tasks: Optional[Iterable[Task]] = None,
        *,
        on_change: Optional[ChangeListener] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._tasks: List[Task] = list(tasks or [])
        self._on_change = on_change
        self._clock = clock
        self._last_id: int = max((t.id for t in self._tasks), default=0)

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        # Timestamp-like ids that still increase strictly within one millisecond
        nid = max(self._clock(), self._last_id + 1)
        self._last_id = nid
        return nid

    # -------------------- queries --------------------
    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    @property
    def has_completed(self) -> bool:
        return any(t.completed for t in self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def _index_of(self, task_id: int) -> Optional[int]:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.tasks)

    # -------------------- task operations --------------------
    def create(
        self,
        text: str,
        priority: Union[Priority, str] = Priority.MEDIUM,
        due_date: Optional[DueDateInput] = None,
    ) -> Optional[Task]:
        if not isinstance(text, str) or not text.strip():
            logger.debug("Ignoring create with blank text")
            return None
        try:
            task = Task(
                id=self._allocate_id(),
                text=text,
                priority=priority,
                due_date=due_date,
            )
        except ValidationError as e:
            logger.debug("Ignoring invalid create: %s", e.errors(include_url=False))
            return None
        self._tasks.append(task)
        logger.debug("Task created id=%s priority=%s", task.id, task.priority.value)
        self._changed()
        return task

    def update(self, task_id: int, patch: Union[TaskPatch, Mapping[str, Any]]) -> Optional[Task]:
        idx = self._index_of(task_id)
        if idx is None:
            return None
        if not isinstance(patch, TaskPatch):
            try:
                patch = TaskPatch.model_validate(patch)
            except ValidationError as e:
                logger.debug("Ignoring invalid update for id=%s: %s", task_id, e.errors(include_url=False))
                return None

        changes: dict = {}
        if patch.text:
            changes["text"] = patch.text
        if patch.priority is not None:
            changes["priority"] = patch.priority
        if patch.due_date is not None or patch.clears_due_date:
            changes["due_date"] = patch.due_date
        if not changes:
            return self._tasks[idx]

        updated = self._tasks[idx].model_copy(update=changes)
        self._tasks[idx] = updated
        self._changed()
        return updated

    def toggle_completion(self, task_id: int) -> Optional[Task]:
        idx = self._index_of(task_id)
        if idx is None:
            return None
        current = self._tasks[idx]
        updated = current.model_copy(update={"completed": not current.completed})
        self._tasks[idx] = updated
        self._changed()
        return updated

    def remove(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False
        del self._tasks[idx]
        logger.debug("Task removed id=%s", task_id)
        self._changed()
        return True

    def clear_completed(self) -> int:
        remaining = [t for t in self._tasks if not t.completed]
        removed = len(self._tasks) - len(remaining)
        if removed:
            self._tasks = remaining
            logger.debug("Cleared %d completed task(s)", removed)
            self._changed()
        return removed
