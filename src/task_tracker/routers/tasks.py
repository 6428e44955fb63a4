from __future__ import annotations

from threading import RLock
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..auth import get_basic_auth_dependency
from ..dashboard import Summary
from ..models import Filter, SortKey, Task
from ..schemas import EditBufferIn, EditingOut, Snapshot, TaskCreateIn, TaskPatch, UiStateOut, UiUpdateIn
from ..tracker import TaskTracker, get_tracker
from ..view import build_view
from ..workflows import Editing, PendingConfirmation

router = APIRouter(
    prefix="/api/v1",
    tags=["tasks"],
    dependencies=[Depends(get_basic_auth_dependency())],
)

# Handlers run one at a time, in arrival order, even though FastAPI
# dispatches sync endpoints on a thread pool.
_lock = RLock()


def _get_tracker(tracker: TaskTracker = Depends(get_tracker)) -> TaskTracker:
    """
    Dependency wrapper for the tracker to keep signatures clean.
    """
    return tracker


def _snapshot(tracker: TaskTracker) -> Snapshot:
    state = tracker.ui
    pending = state.deletion.task_id if isinstance(state.deletion, PendingConfirmation) else None
    editing = (
        EditingOut(id=state.editing.task_id, buffer=state.editing.buffer)
        if isinstance(state.editing, Editing)
        else None
    )
    return Snapshot(
        view=tracker.view(),
        summary=tracker.summary(),
        ui=UiStateOut(
            filter=state.filter,
            search=state.search,
            sort=state.sort,
            page=state.page,
            theme=state.theme,
            pending_delete_id=pending,
            editing=editing,
        ),
        has_completed=tracker.store.has_completed,
    )


# PUBLIC_INTERFACE
@router.get(
    "/state",
    response_model=Snapshot,
    summary="Current snapshot",
    description="View, summary and UI state as the client should render them now.",
)
def get_state(tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.get(
    "/tasks",
    response_model=List[Task],
    summary="List Tasks",
    description=(
        "Stateless view over all tasks.\n\n"
        "Query parameters:\n"
        "- filter: All, Active or Completed\n"
        "- q: case-insensitive substring of the task text\n"
        "- sort: dueDate (undated last) or priority (High first)"
    ),
)
def list_tasks(
    filter: Filter = Query(Filter.ALL, description="Completion filter"),
    q: Optional[str] = Query(None, description="Search text"),
    sort: SortKey = Query(SortKey.DUE_DATE, description="Sort key"),
    tracker: TaskTracker = Depends(_get_tracker),
) -> List[Task]:
    with _lock:
        return build_view(tracker.tasks, filter, q or "", sort)


# PUBLIC_INTERFACE
@router.get("/summary", response_model=Summary, summary="Dashboard summary")
def get_summary(tracker: TaskTracker = Depends(_get_tracker)) -> Summary:
    with _lock:
        return tracker.summary()


# PUBLIC_INTERFACE
@router.post(
    "/tasks",
    response_model=Snapshot,
    summary="Create Task",
    description="Append a task. Blank text creates nothing and returns the unchanged snapshot.",
)
def create_task(payload: TaskCreateIn, tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.create_task(payload.text, payload.priority, payload.due_date)
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.post("/tasks/clear-completed", response_model=Snapshot, summary="Clear completed tasks")
def clear_completed(tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.clear_completed()
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.patch(
    "/tasks/{task_id}",
    response_model=Snapshot,
    summary="Update Task",
    description="Partially update text, priority or dueDate. Unknown ids change nothing.",
)
def update_task(task_id: int, payload: TaskPatch, tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.update_task(task_id, payload)
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.post("/tasks/{task_id}/toggle", response_model=Snapshot, summary="Toggle completion")
def toggle_task(task_id: int, tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.toggle_task(task_id)
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.post(
    "/tasks/{task_id}/delete-request",
    response_model=Snapshot,
    summary="Request deletion",
    description="Start the confirmation step. A newer request replaces a pending one.",
)
def request_delete(task_id: int, tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.request_delete(task_id)
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.post("/delete/confirm", response_model=Snapshot, summary="Confirm pending deletion")
def confirm_delete(tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.confirm_delete()
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.post("/delete/cancel", response_model=Snapshot, summary="Cancel pending deletion")
def cancel_delete(tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.cancel_delete()
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.post("/tasks/{task_id}/edit", response_model=Snapshot, summary="Begin editing a task")
def begin_edit(task_id: int, tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.begin_edit(task_id)
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.put("/edit/buffer", response_model=Snapshot, summary="Change the edit buffer")
def change_edit_buffer(payload: EditBufferIn, tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.change_edit_buffer(payload.text)
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.post(
    "/edit/commit",
    response_model=Snapshot,
    summary="Commit the edit",
    description="Save the buffer into the task being edited. Blank buffers are discarded.",
)
def commit_edit(tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        editing = tracker.ui.editing
        if isinstance(editing, Editing):
            tracker.commit_edit(editing.task_id)
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.post("/edit/cancel", response_model=Snapshot, summary="Leave edit mode without saving")
def cancel_edit(tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.cancel_edit()
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.patch(
    "/ui",
    response_model=Snapshot,
    summary="Change view controls",
    description="Set any of filter, search, sort and page. Omitted fields keep their value.",
)
def update_ui(payload: UiUpdateIn, tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        if payload.filter is not None:
            tracker.set_filter(payload.filter)
        if payload.search is not None:
            tracker.set_search(payload.search)
        if payload.sort is not None:
            tracker.set_sort(payload.sort)
        if payload.page is not None:
            tracker.set_page(payload.page)
        return _snapshot(tracker)


# PUBLIC_INTERFACE
@router.post("/theme/toggle", response_model=Snapshot, summary="Switch between light and dark")
def toggle_theme(tracker: TaskTracker = Depends(_get_tracker)) -> Snapshot:
    with _lock:
        tracker.toggle_theme()
        return _snapshot(tracker)
