from datetime import date

import pytest

from task_tracker.models import Filter, Priority, SortKey, Task, priority_label, priority_weight
from task_tracker.view import build_view, filter_tasks, search_tasks, sort_tasks


def make_task(id, text="Task", completed=False, priority=Priority.MEDIUM, due=None):
    return Task(id=id, text=text, completed=completed, priority=priority, due_date=due)


@pytest.fixture()
def tasks():
    return [
        make_task(1, "Pay rent", completed=True, priority=Priority.HIGH, due=date(2030, 3, 1)),
        make_task(2, "Buy milk", priority=Priority.LOW),
        make_task(3, "Call mom", priority=Priority.MEDIUM, due=date(2030, 1, 10)),
        make_task(4, "buy bread", completed=True, priority=Priority.LOW, due=date(2030, 2, 1)),
        make_task(5, "Plan trip", priority=Priority.HIGH),
    ]


class TestFilter:
    def test_all_keeps_everything(self, tasks):
        assert filter_tasks(tasks, Filter.ALL) == tasks

    def test_active_and_completed(self, tasks):
        assert all(not t.completed for t in filter_tasks(tasks, Filter.ACTIVE))
        assert [t.id for t in filter_tasks(tasks, "Completed")] == [1, 4]

    def test_unknown_filter_raises(self, tasks):
        with pytest.raises(ValueError):
            filter_tasks(tasks, "Someday")


class TestSearch:
    def test_case_insensitive_substring(self, tasks):
        assert [t.id for t in search_tasks(tasks, "BUY")] == [2, 4]

    @pytest.mark.parametrize("query", ["", None])
    def test_empty_query_matches_all(self, tasks, query):
        assert search_tasks(tasks, query) == tasks

    def test_no_match(self, tasks):
        assert search_tasks(tasks, "zebra") == []


class TestSort:
    def test_due_date_ascending_with_undated_last(self, tasks):
        ordered = sort_tasks(tasks, SortKey.DUE_DATE)
        assert [t.id for t in ordered] == [3, 4, 1, 2, 5]

    def test_undated_last_regardless_of_input_order(self):
        undated = make_task(1)
        dated = make_task(2, due=date(2099, 12, 31))
        assert sort_tasks([undated, dated], "dueDate") == [dated, undated]

    def test_equal_due_dates_keep_input_order(self):
        same = date(2030, 5, 5)
        items = [make_task(i, due=same) for i in (9, 3, 7)]
        assert [t.id for t in sort_tasks(items, SortKey.DUE_DATE)] == [9, 3, 7]

    def test_priority_descending_and_stable(self, tasks):
        ordered = sort_tasks(tasks, SortKey.PRIORITY)
        assert [t.id for t in ordered] == [1, 5, 3, 2, 4]

    def test_input_is_not_mutated(self, tasks):
        before = list(tasks)
        sort_tasks(tasks, SortKey.PRIORITY)
        build_view(tasks, Filter.ACTIVE, "b", SortKey.DUE_DATE)
        assert tasks == before


class TestBuildView:
    def test_stages_compose(self, tasks):
        view = build_view(tasks, Filter.ACTIVE, "L", SortKey.PRIORITY)
        # active tasks containing "l": Buy milk(Low), Call mom(Medium), Plan trip(High)
        assert [t.id for t in view] == [5, 3, 2]

    def test_empty_collection(self):
        assert build_view([], Filter.COMPLETED, "x", SortKey.PRIORITY) == []

    def test_returns_new_list(self, tasks):
        view = build_view(tasks)
        assert view == sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or date.max))
        assert view is not tasks

    def test_two_task_scenario(self):
        t1 = make_task(1, "A", priority=Priority.HIGH)
        t2 = make_task(2, "B", completed=True, priority=Priority.LOW)
        assert build_view([t1, t2], Filter.ALL, "", SortKey.PRIORITY) == [t1, t2]
        assert build_view([t2, t1], Filter.ALL, "", SortKey.PRIORITY) == [t1, t2]


class TestPriorityDisplay:
    def test_weights(self):
        assert priority_weight(Priority.HIGH) == 3
        assert priority_weight("Medium") == 2
        assert priority_weight("Low") == 1

    def test_unrecognized_values_are_tolerated(self):
        assert priority_weight("Urgent") == 0
        assert priority_weight(None) == 0
        assert priority_label("Urgent") == "Uncategorized"
        assert priority_label(Priority.LOW) == "Low"
