"""Unit tests for the board store and its derived view."""

from __future__ import annotations

import pytest

from taskboard_cli.models import (
    BoardLocation,
    BoardStore,
    EditingDraft,
    Task,
    filter_tasks,
    group_by_status,
)
from taskboard_cli.models.board_state import matches_query


def _task(task_id: str, title: str = "Task", status: str = "To Do", **kwargs) -> Task:
    return Task(id=task_id, title=title, status=status, owner_id="u1", **kwargs)


@pytest.fixture
def tasks() -> list[Task]:
    return [
        _task("1", "Write report", description="Quarterly numbers"),
        _task("2", "Review PR", status="In Progress"),
        _task("3", "Ship release", status="Done", description="v1.2 REPORT attached"),
        _task("4", "Book flights"),
    ]


class TestTaskModel:
    def test_accepts_backend_aliases(self):
        task = Task.model_validate(
            {
                "_id": "abc",
                "title": "From server",
                "user": "owner-1",
                "status": "Done",
                "createdAt": "2024-01-01T10:00:00Z",
                "updatedAt": "2024-01-02T10:00:00Z",
            }
        )
        assert task.id == "abc"
        assert task.owner_id == "owner-1"
        assert task.created_at.year == 2024

    def test_defaults(self):
        task = Task(id="x", title="Plain")
        assert task.status == "To Do"
        assert task.description == ""

    def test_rejects_unknown_status(self):
        with pytest.raises(ValueError):
            Task(id="x", title="Bad", status="Blocked")

    def test_rejects_empty_title(self):
        with pytest.raises(ValueError):
            Task(id="x", title="")


class TestFiltering:
    def test_empty_query_matches_everything(self, tasks):
        assert filter_tasks(tasks) == tasks

    def test_query_is_case_insensitive_over_title_and_description(self, tasks):
        result = filter_tasks(tasks, "report")
        assert [t.id for t in result] == ["1", "3"]

    def test_query_is_trimmed(self, tasks):
        assert [t.id for t in filter_tasks(tasks, "  review  ")] == ["2"]

    def test_whitespace_query_matches_everything(self, tasks):
        assert filter_tasks(tasks, "   ") == tasks

    def test_status_filter(self, tasks):
        assert [t.id for t in filter_tasks(tasks, status_filter="To Do")] == ["1", "4"]

    def test_query_and_status_combine(self, tasks):
        assert [t.id for t in filter_tasks(tasks, "report", "Done")] == ["3"]

    def test_no_match(self, tasks):
        assert filter_tasks(tasks, "nothing like this") == []

    def test_matches_query_without_description(self):
        assert matches_query(_task("9", "Alpha"), "alp")
        assert not matches_query(_task("9", "Alpha"), "beta")


class TestGrouping:
    def test_all_columns_present_in_order(self, tasks):
        columns = group_by_status(tasks)
        assert list(columns) == ["To Do", "In Progress", "Done"]
        assert [t.id for t in columns["To Do"]] == ["1", "4"]
        assert [t.id for t in columns["In Progress"]] == ["2"]

    def test_empty(self):
        assert group_by_status([]) == {"To Do": [], "In Progress": [], "Done": []}


class TestBoardStore:
    def test_insert_refuses_duplicates(self, tasks):
        store = BoardStore(tasks)
        assert store.insert(_task("1", "Other")) is False
        assert store.get("1").title == "Write report"
        assert len(store) == 4

    def test_upsert_keeps_position(self, tasks):
        store = BoardStore(tasks)
        store.upsert(_task("2", "Renamed", status="In Progress"))
        assert [t.id for t in store.tasks] == ["1", "2", "3", "4"]
        assert store.get("2").title == "Renamed"

    def test_replace_ignores_unknown(self, tasks):
        store = BoardStore(tasks)
        assert store.replace(_task("99", "Ghost")) is False
        assert "99" not in store

    def test_remove(self, tasks):
        store = BoardStore(tasks)
        assert store.remove("1") is True
        assert store.remove("1") is False
        assert "1" not in store

    def test_remove_clears_draft_for_that_task(self, tasks):
        store = BoardStore(tasks)
        store.set_editing(EditingDraft.from_task(tasks[0]))
        store.remove("1")
        assert store.editing is None

    def test_set_status_returns_new_snapshot(self, tasks):
        store = BoardStore(tasks)
        moved = store.set_status("1", "Done")
        assert moved.status == "Done"
        assert tasks[0].status == "To Do"
        assert store.set_status("missing", "Done") is None

    def test_visible_tasks_follow_query_and_filter(self, tasks):
        store = BoardStore(tasks)
        store.set_query("report")
        store.set_status_filter("To Do")
        assert [t.id for t in store.visible_tasks] == ["1"]
        assert [t.id for t in store.columns["To Do"]] == ["1"]
        assert store.columns["Done"] == []

    def test_invalid_status_filter(self, tasks):
        store = BoardStore(tasks)
        with pytest.raises(ValueError):
            store.set_status_filter("Someday")
        assert store.status_filter == "All"

    def test_listeners_notified_and_unsubscribed(self, tasks):
        store = BoardStore()
        calls = []
        unsubscribe = store.subscribe(lambda s: calls.append(len(s)))

        store.replace_all(tasks)
        store.set_loading(True)
        unsubscribe()
        store.remove("1")

        assert calls == [4, 4]

    def test_snapshot_is_a_copy(self, tasks):
        store = BoardStore(tasks)
        snapshot = store.snapshot()
        store.remove("1")
        assert "1" in snapshot


class TestEditingDraft:
    def test_changes_cover_all_mutable_fields(self):
        draft = EditingDraft.from_task(_task("1", "Title", description="Body"))
        assert draft.changes() == {
            "title": "Title",
            "description": "Body",
            "status": "To Do",
        }


class TestBoardLocation:
    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            BoardLocation(status="To Do", index=-1)
