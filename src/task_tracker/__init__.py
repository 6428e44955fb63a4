"""
Task Tracker package.

The core (store, view pipeline, dashboard, workflows, persistence) has no
web dependency; the FastAPI presentation adapter lives in ``task_tracker.main``.
"""

from .dashboard import Summary, summarize  # noqa: F401
from .models import Filter, Page, Priority, SortKey, Task, Theme  # noqa: F401
from .persistence import PersistenceAdapter  # noqa: F401
from .storage import InMemoryStorage, KeyValueStorage, StorageError  # noqa: F401
from .store import TaskStore  # noqa: F401
from .tracker import TaskTracker  # noqa: F401
from .view import build_view  # noqa: F401
