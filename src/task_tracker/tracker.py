from __future__ import annotations

import logging
from dataclasses import replace
from functools import lru_cache
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from . import state as ui
from . import workflows
from .dashboard import Summary, summarize
from .models import DueDateInput, Filter, Page, Priority, SortKey, Task, Theme
from .persistence import PersistenceAdapter
from .schemas import TaskPatch
from .state import UiState
from .storage import get_storage
from .store import TaskStore, now_ms
from .view import build_view

logger = logging.getLogger(__name__)


class TaskTracker:
    """
    Wires the task store, persistence and UI state together.

    State is hydrated from storage on construction. Every store mutation and
    every theme change is followed by a synchronous save of both keys. The
    view and summary are recomputed from the store on each call.
    """

    def __init__(self, persistence: PersistenceAdapter, *, clock: Callable[[], int] = now_ms) -> None:
        self._persistence = persistence
        tasks, theme = persistence.load()
        self._ui = UiState(theme=theme)
        self._store = TaskStore(tasks, on_change=self._persist, clock=clock)
        logger.info(
            "Tracker ready backend=%s tasks=%d theme=%s",
            persistence.storage.name,
            len(tasks),
            theme.value,
        )

    def _persist(self, tasks: Tuple[Task, ...]) -> None:
        self._persistence.save(tasks, self._ui.theme)

    # -------------------- read-only accessors --------------------
    @property
    def ui(self) -> UiState:
        return self._ui

    @property
    def storage_name(self) -> str:
        return self._persistence.storage.name

    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._store.tasks

    def view(self) -> List[Task]:
        return build_view(self._store.tasks, self._ui.filter, self._ui.search, self._ui.sort)

    def summary(self) -> Summary:
        return summarize(self._store.tasks)

    # -------------------- task operations --------------------
    def create_task(
        self,
        text: str,
        priority: Union[Priority, str] = Priority.MEDIUM,
        due_date: Optional[DueDateInput] = None,
    ) -> Optional[Task]:
        return self._store.create(text, priority, due_date)

    def update_task(self, task_id: int, patch: Union[TaskPatch, Mapping[str, Any]]) -> Optional[Task]:
        return self._store.update(task_id, patch)

    def toggle_task(self, task_id: int) -> Optional[Task]:
        return self._store.toggle_completion(task_id)

    def clear_completed(self) -> int:
        return self._store.clear_completed()

    # -------------------- deletion confirmation --------------------
    def request_delete(self, task_id: int) -> UiState:
        self._ui = replace(self._ui, deletion=workflows.request_delete(self._ui.deletion, task_id))
        return self._ui

    def confirm_delete(self) -> UiState:
        self._ui = replace(self._ui, deletion=workflows.confirm_delete(self._ui.deletion, self._store))
        return self._ui

    def cancel_delete(self) -> UiState:
        self._ui = replace(self._ui, deletion=workflows.cancel_delete(self._ui.deletion))
        return self._ui

    # -------------------- edit in place --------------------
    def begin_edit(self, task_id: int) -> UiState:
        self._ui = replace(self._ui, editing=workflows.begin_edit(self._ui.editing, self._store, task_id))
        return self._ui

    def change_edit_buffer(self, text: str) -> UiState:
        self._ui = replace(self._ui, editing=workflows.change_edit_buffer(self._ui.editing, text))
        return self._ui

    def commit_edit(self, task_id: int) -> UiState:
        editing, _ = workflows.commit_edit(self._ui.editing, self._store, task_id)
        self._ui = replace(self._ui, editing=editing)
        return self._ui

    def cancel_edit(self) -> UiState:
        self._ui = replace(self._ui, editing=workflows.cancel_edit(self._ui.editing))
        return self._ui

    # -------------------- view controls --------------------
    def set_filter(self, value: Union[Filter, str]) -> UiState:
        self._ui = ui.set_filter(self._ui, value)
        return self._ui

    def set_search(self, query: str) -> UiState:
        self._ui = ui.set_search(self._ui, query)
        return self._ui

    def set_sort(self, value: Union[SortKey, str]) -> UiState:
        self._ui = ui.set_sort(self._ui, value)
        return self._ui

    def set_page(self, value: Union[Page, str]) -> UiState:
        self._ui = ui.set_page(self._ui, value)
        return self._ui

    # -------------------- theme --------------------
    def set_theme(self, value: Union[Theme, str]) -> UiState:
        self._ui = ui.set_theme(self._ui, value)
        self._persistence.save(self._store.tasks, self._ui.theme)
        return self._ui

    def toggle_theme(self) -> UiState:
        return self.set_theme(ui.toggle_theme(self._ui).theme)


@lru_cache(maxsize=1)
def get_tracker() -> TaskTracker:
    """Process-wide tracker backed by the storage provider chosen in settings."""
    return TaskTracker(PersistenceAdapter(get_storage()))
