"""
Load and save the task collection and theme preference.

Two independent keys are used:
- 'todos': JSON array of {id, text, completed, priority, dueDate}
- 'theme': plain string, 'light' or 'dark'

Reads never raise: missing or corrupt content falls back to defaults.
Writes never raise: failures are logged and the in-memory state stays
authoritative for the rest of the session.
"""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Sequence, Set, Tuple

from pydantic import ValidationError

from .models import Task, Theme
from .storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

TASKS_KEY = "todos"
THEME_KEY = "theme"


class PersistenceAdapter:
    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    # -------------------- load --------------------
    def load(self) -> Tuple[List[Task], Theme]:
        return self.load_tasks(), self.load_theme()

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._storage.get(key)
        except StorageError:
            logger.exception("Failed to read %r from storage; using default", key)
            return None

    def load_tasks(self) -> List[Task]:
        raw = self._read(TASKS_KEY)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored %r is not valid JSON; starting with no tasks", TASKS_KEY)
            return []
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(
                "Stored %r is a %s, expected a list; starting with no tasks",
                TASKS_KEY,
                type(data).__name__,
            )
            return []
        return _coerce_tasks(data)

    def load_theme(self) -> Theme:
        raw = self._read(THEME_KEY)
        if raw is None:
            return Theme.LIGHT
        value = raw.strip()
        # Accept a JSON-quoted string as well as the plain form
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        try:
            return Theme(value)
        except ValueError:
            logger.warning("Stored theme %r is not recognized; using light", raw)
            return Theme.LIGHT

    # -------------------- save --------------------
    def save(self, tasks: Sequence[Task], theme: Theme) -> bool:
        """Write both keys. Return True only if every write succeeded."""
        payload = json.dumps([t.to_record() for t in tasks], ensure_ascii=False)
        ok = self._write(TASKS_KEY, payload)
        ok = self._write(THEME_KEY, Theme(theme).value) and ok
        return ok

    def _write(self, key: str, value: str) -> bool:
        try:
            self._storage.set(key, value)
        except StorageError:
            logger.exception("Failed to write %r to storage; keeping in-memory state", key)
            return False
        return True


def _coerce_tasks(items: List[Any]) -> List[Task]:
    """Validate stored entries into Tasks, dropping invalid ones and duplicate ids."""
    tasks: List[Task] = []
    seen: Set[int] = set()
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning("Dropping stored task #%d: not an object", index)
            continue
        try:
            task = Task.model_validate(item)
        except ValidationError as e:
            logger.warning("Dropping stored task #%d: %s", index, e.errors(include_url=False))
            continue
        if task.id in seen:
            logger.warning("Dropping stored task #%d: duplicate id %s", index, task.id)
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks
