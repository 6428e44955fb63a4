"""
View pipeline: filter -> search -> sort.

Every stage takes a sequence of tasks and returns a new list; the input is
never modified. Sorting relies on ``sorted`` being stable, so tasks that
compare equal keep their relative input order.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Tuple, Union

from .models import Filter, SortKey, Task, priority_weight


def filter_tasks(tasks: Iterable[Task], flt: Union[Filter, str] = Filter.ALL) -> List[Task]:
    flt = Filter(flt)
    if flt is Filter.ACTIVE:
        return [t for t in tasks if not t.completed]
    if flt is Filter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def search_tasks(tasks: Iterable[Task], query: Optional[str] = "") -> List[Task]:
    if not query:
        return list(tasks)
    q = query.lower()
    return [t for t in tasks if q in t.text.lower()]


def _due_date_key(task: Task) -> Tuple[int, date]:
    # Tasks without a deadline sort after every dated task
    if task.due_date is None:
        return (1, date.max)
    return (0, task.due_date)


def sort_tasks(tasks: Iterable[Task], sort_key: Union[SortKey, str] = SortKey.DUE_DATE) -> List[Task]:
    sort_key = SortKey(sort_key)
    if sort_key is SortKey.PRIORITY:
        return sorted(tasks, key=lambda t: -priority_weight(t.priority))
    return sorted(tasks, key=_due_date_key)


# PUBLIC_INTERFACE
def build_view(
    tasks: Iterable[Task],
    flt: Union[Filter, str] = Filter.ALL,
    search_query: Optional[str] = "",
    sort_key: Union[SortKey, str] = SortKey.DUE_DATE,
) -> List[Task]:
    """Return the tasks to display, in display order."""
    return sort_tasks(search_tasks(filter_tasks(tasks, flt), search_query), sort_key)
