import json

import pytest

from task_tracker.models import Filter, Page, Priority, SortKey, Theme
from task_tracker.persistence import TASKS_KEY, THEME_KEY, PersistenceAdapter
from task_tracker.state import UiState, set_filter, toggle_theme
from task_tracker.tracker import TaskTracker
from task_tracker.workflows import (
    IDLE,
    NOT_EDITING,
    Editing,
    PendingConfirmation,
    begin_edit,
    cancel_delete,
    change_edit_buffer,
    commit_edit,
    confirm_delete,
    request_delete,
)

from fakes import FailingStorage


def stored_texts(storage):
    return [t["text"] for t in json.loads(storage.get(TASKS_KEY))]


class TestDeleteConfirmation:
    def test_request_then_confirm_removes(self, store):
        task = store.create("A")
        state = request_delete(IDLE, task.id)
        assert state == PendingConfirmation(task.id)
        assert len(store) == 1
        assert confirm_delete(state, store) == IDLE
        assert len(store) == 0

    def test_cancel_leaves_collection_untouched(self, store):
        task = store.create("A")
        state = request_delete(IDLE, task.id)
        assert cancel_delete(state) == IDLE
        assert store.get(task.id) == task

    def test_last_request_wins(self, store):
        a = store.create("A")
        b = store.create("B")
        state = request_delete(request_delete(IDLE, a.id), b.id)
        confirm_delete(state, store)
        assert store.tasks == (a,)

    def test_confirm_while_idle_is_noop(self, store):
        store.create("A")
        assert confirm_delete(IDLE, store) == IDLE
        assert len(store) == 1

    def test_confirm_for_vanished_task(self, store):
        task = store.create("A")
        state = request_delete(IDLE, task.id)
        store.remove(task.id)
        assert confirm_delete(state, store) == IDLE


class TestEditInPlace:
    def test_begin_captures_text(self, store):
        task = store.create("Original")
        assert begin_edit(NOT_EDITING, store, task.id) == Editing(task.id, "Original")

    def test_begin_unknown_id_keeps_state(self, store):
        assert begin_edit(NOT_EDITING, store, 404) == NOT_EDITING

    def test_buffer_changes_do_not_touch_store(self, store):
        task = store.create("Original")
        state = change_edit_buffer(begin_edit(NOT_EDITING, store, task.id), "Changed")
        assert state.buffer == "Changed"
        assert store.get(task.id).text == "Original"

    def test_change_without_edit_is_noop(self):
        assert change_edit_buffer(NOT_EDITING, "x") == NOT_EDITING

    def test_commit_saves_trimmed_text(self, store):
        task = store.create("Original")
        state = change_edit_buffer(begin_edit(NOT_EDITING, store, task.id), "  Changed ")
        state, saved = commit_edit(state, store, task.id)
        assert (state, saved) == (NOT_EDITING, True)
        assert store.get(task.id).text == "Changed"

    def test_blank_commit_is_discarded(self, store):
        task = store.create("Original")
        state = change_edit_buffer(begin_edit(NOT_EDITING, store, task.id), "   ")
        state, saved = commit_edit(state, store, task.id)
        assert (state, saved) == (NOT_EDITING, False)
        assert store.get(task.id).text == "Original"

    def test_second_begin_replaces_first(self, store):
        a = store.create("A")
        b = store.create("B")
        state = begin_edit(begin_edit(NOT_EDITING, store, a.id), store, b.id)
        assert state == Editing(b.id, "B")

    def test_commit_for_other_id_ends_session_without_saving(self, store):
        a = store.create("A")
        b = store.create("B")
        state = change_edit_buffer(begin_edit(NOT_EDITING, store, a.id), "A2")
        new_state, saved = commit_edit(state, store, b.id)
        assert new_state == NOT_EDITING
        assert saved is False
        assert [t.text for t in store.tasks] == ["A", "B"]


class TestUiReducers:
    def test_reducers_return_new_state(self):
        state = UiState()
        filtered = set_filter(state, "Active")
        assert filtered.filter is Filter.ACTIVE
        assert state.filter is Filter.ALL

    def test_unknown_values_raise(self):
        with pytest.raises(ValueError):
            set_filter(UiState(), "Later")

    def test_toggle_theme(self):
        assert toggle_theme(UiState()).theme is Theme.DARK
        assert toggle_theme(toggle_theme(UiState())).theme is Theme.LIGHT


class TestTracker:
    def test_every_mutation_is_saved_immediately(self, tracker, storage, clock):
        a = tracker.create_task("A", Priority.HIGH)
        assert stored_texts(storage) == ["A"]
        clock.advance()
        b = tracker.create_task("B")
        tracker.update_task(a.id, {"text": "A1"})
        assert stored_texts(storage) == ["A1", "B"]
        tracker.toggle_task(b.id)
        assert json.loads(storage.get(TASKS_KEY))[1]["completed"] is True
        tracker.clear_completed()
        assert stored_texts(storage) == ["A1"]

    def test_delete_flow_persists(self, tracker, storage):
        task = tracker.create_task("A")
        tracker.request_delete(task.id)
        assert stored_texts(storage) == ["A"]
        assert tracker.confirm_delete().deletion == IDLE
        assert stored_texts(storage) == []

    def test_edit_flow_persists(self, tracker, storage):
        task = tracker.create_task("A")
        tracker.begin_edit(task.id)
        tracker.change_edit_buffer("Edited")
        assert stored_texts(storage) == ["A"]
        assert tracker.commit_edit(task.id).editing == NOT_EDITING
        assert stored_texts(storage) == ["Edited"]

    def test_commit_for_other_id_leaves_edit_mode(self, tracker, storage, clock):
        a = tracker.create_task("A")
        clock.advance()
        b = tracker.create_task("B")
        tracker.begin_edit(a.id)
        tracker.change_edit_buffer("A2")
        assert tracker.commit_edit(b.id).editing == NOT_EDITING
        assert stored_texts(storage) == ["A", "B"]

    def test_cancel_edit(self, tracker):
        task = tracker.create_task("A")
        tracker.begin_edit(task.id)
        tracker.change_edit_buffer("nope")
        assert tracker.cancel_edit().editing == NOT_EDITING
        assert tracker.tasks[0].text == "A"

    def test_theme_change_is_saved(self, tracker, storage):
        assert tracker.toggle_theme().theme is Theme.DARK
        assert storage.get(THEME_KEY) == "dark"
        tracker.set_theme("light")
        assert storage.get(THEME_KEY) == "light"

    def test_theme_survives_task_saves(self, tracker, storage):
        tracker.toggle_theme()
        tracker.create_task("A")
        assert storage.get(THEME_KEY) == "dark"

    def test_view_and_summary_follow_ui_state(self, tracker, clock):
        low = tracker.create_task("buy milk", Priority.LOW)
        clock.advance()
        high = tracker.create_task("Ship release", Priority.HIGH, "2030-01-01")
        clock.advance()
        tracker.create_task("Buy stamps", Priority.MEDIUM)
        tracker.toggle_task(high.id)

        tracker.set_sort(SortKey.PRIORITY)
        assert [t.id for t in tracker.view()][:2] == [high.id, tracker.tasks[2].id]

        tracker.set_filter(Filter.ACTIVE)
        tracker.set_search("BUY")
        assert [t.text for t in tracker.view()] == ["Buy stamps", "buy milk"]
        assert tracker.view()[-1].id == low.id

        summary = tracker.summary()
        assert (summary.total, summary.completed, summary.active) == (3, 1, 2)

    def test_page_is_not_persisted(self, tracker, persistence, clock):
        tracker.set_page(Page.DASHBOARD)
        tracker.set_filter("Completed")
        tracker.create_task("A")
        reloaded = TaskTracker(persistence, clock=clock)
        assert reloaded.ui == UiState()
        assert [t.text for t in reloaded.tasks] == ["A"]

    def test_reload_restores_tasks_and_theme(self, tracker, persistence, clock):
        task = tracker.create_task("A", "Low", "2031-05-05")
        tracker.toggle_theme()
        reloaded = TaskTracker(persistence, clock=clock)
        assert reloaded.tasks == (task,)
        assert reloaded.ui.theme is Theme.DARK

    def test_write_failures_keep_session_state(self, clock):
        tracker = TaskTracker(PersistenceAdapter(FailingStorage()), clock=clock)
        task = tracker.create_task("A")
        tracker.toggle_theme()
        assert tracker.tasks == (task,)
        assert tracker.ui.theme is Theme.DARK
