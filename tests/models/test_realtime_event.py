"""Tests for realtime event wire names and payloads."""

import pytest

from taskboard_cli.models import RealtimeEvent, Task


def _task_payload(**kwargs) -> dict:
    data = {"_id": "t1", "title": "Task", "status": "To Do", "user": "u1"}
    data.update(kwargs)
    return data


class TestFromWire:
    def test_created_carries_full_task(self):
        event = RealtimeEvent.from_wire("task:created", _task_payload())
        assert event.type == "created"
        assert event.task.id == "t1"
        assert event.target_id == "t1"

    def test_updated(self):
        event = RealtimeEvent.from_wire("task:updated", _task_payload(status="Done"))
        assert event.type == "updated"
        assert event.task.status == "Done"

    def test_deleted_with_bare_id(self):
        event = RealtimeEvent.from_wire("task:deleted", "t1")
        assert event.type == "deleted"
        assert event.target_id == "t1"

    def test_deleted_with_object(self):
        event = RealtimeEvent.from_wire("task:deleted", {"_id": "t1"})
        assert event.task_id == "t1"

    def test_moved(self):
        event = RealtimeEvent.from_wire("task:moved", {"id": "t1", "status": "Done"})
        assert event.type == "moved"
        assert event.status == "Done"

    @pytest.mark.parametrize("payload", ["abc", None, 42, [], {"status": "Done"}])
    def test_moved_requires_object_with_id_and_status(self, payload):
        with pytest.raises(ValueError):
            RealtimeEvent.from_wire("task:moved", payload)

    @pytest.mark.parametrize("payload", [{}, None, "", True, {"title": "no id"}])
    def test_deleted_requires_id(self, payload):
        with pytest.raises(ValueError):
            RealtimeEvent.from_wire("task:deleted", payload)

    def test_deleted_with_numeric_id(self):
        assert RealtimeEvent.from_wire("task:deleted", 7).task_id == "7"

    @pytest.mark.parametrize("name", ["task:archived", "project:created", "hello"])
    def test_unknown_names_rejected(self, name):
        with pytest.raises(ValueError):
            RealtimeEvent.from_wire(name, {})


class TestToWire:
    def test_moved_advisory_shape(self):
        assert RealtimeEvent.moved("t1", "In Progress").to_wire() == {
            "event": "task:moved",
            "data": {"id": "t1", "status": "In Progress"},
        }

    def test_deleted_sends_identifier(self):
        assert RealtimeEvent.deleted("t1").to_wire() == {
            "event": "task:deleted",
            "data": "t1",
        }

    def test_created_serializes_task(self):
        wire = RealtimeEvent.created(Task(id="t1", title="Task")).to_wire()
        assert wire["event"] == "task:created"
        assert wire["data"]["id"] == "t1"
        assert wire["data"]["title"] == "Task"

    def test_task_event_without_task_cannot_be_serialized(self):
        with pytest.raises(ValueError, match="has no task"):
            RealtimeEvent(type="updated", task_id="t1").to_wire()
