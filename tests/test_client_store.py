"""Tests for the client-side task store."""

import threading
from unittest.mock import Mock

import pytest

from tasktracker.client.api import TaskAPI, TaskAPIError
from tasktracker.client.notifications import Severity
from tasktracker.client.store import Draft, TaskStore
from tasktracker.schemas.task import Priority, Task

from conftest import make_task


def _severities(store):
    return [n.severity for n in store.notifier.history]


class TestAdd:
    @pytest.mark.parametrize("text", ["", "   ", "\t\n"])
    def test_blank_text_makes_no_call(self, text):
        api = Mock(spec=TaskAPI)
        store = TaskStore(api)

        assert store.add(Draft(text)) is None

        assert api.method_calls == []
        assert _severities(store) == [Severity.ERROR]
        assert store.notifier.last.message == "Task cannot be empty."

    def test_unknown_tag_makes_no_call(self):
        api = Mock(spec=TaskAPI)
        store = TaskStore(api)

        store.add(Draft("Read", tags=["hobby"]))

        assert api.method_calls == []
        assert _severities(store) == [Severity.ERROR]

    def test_add_appends_and_refetches(self, task_store, api):
        task_store.refresh()
        before = len(api.list_tasks())

        task = task_store.add(Draft("Buy milk", Priority.HIGH, "2026-10-20", ["shopping"]))

        assert task is not None
        listed = api.list_tasks()
        assert len(listed) == before + 1
        assert listed[-1].text == "Buy milk"
        assert listed[-1].priority is Priority.HIGH
        assert listed[-1].due_date == "2026-10-20"
        assert listed[-1].tags == ["shopping"]
        assert task_store.list() == listed
        assert _severities(task_store) == [Severity.SUCCESS]
        assert task_store.state.loading is False

    def test_ids_come_from_clock_and_never_repeat(self, api):
        store = TaskStore(api, clock=lambda: 1_700_000_000.0)

        first = store.add(Draft("One"))
        second = store.add(Draft("Two"))

        assert first.id == 1_700_000_000_000
        assert second.id == first.id + 1

    def test_unknown_priority_makes_no_call(self):
        api = Mock(spec=TaskAPI)
        store = TaskStore(api)

        assert store.add(Draft("Read", priority="urgent")) is None

        assert api.method_calls == []
        assert _severities(store) == [Severity.ERROR]
        assert store.notifier.last.message == "Unknown priority: urgent."

    def test_duplicate_tags_are_stored_once(self, task_store, api):
        task = task_store.add(Draft("Plan week", tags=["work", "study", "work"]))

        assert task.tags == ["work", "study"]
        assert api.list_tasks()[-1].tags == ["work", "study"]

    def test_failure_keeps_state_and_notifies_once(self):
        api = Mock(spec=TaskAPI)
        api.create_task.side_effect = TaskAPIError("boom")
        store = TaskStore(api)
        store.state.tasks = [Task.model_validate(make_task(1, "Existing"))]

        assert store.add(Draft("New")) is None

        assert [t.text for t in store.list()] == ["Existing"]
        api.list_tasks.assert_not_called()
        assert _severities(store) == [Severity.ERROR]
        assert store.notifier.last.message == "Failed to add task."
        assert store.state.loading is False

    def test_refetch_failure_is_single_warning(self):
        api = Mock(spec=TaskAPI)
        api.create_task.side_effect = lambda task: task
        api.list_tasks.side_effect = TaskAPIError("down")
        store = TaskStore(api)

        assert store.add(Draft("Saved")) is not None
        assert _severities(store) == [Severity.WARNING]


class TestUpdateToggleRemove:
    @pytest.fixture
    def seeded(self, client, task_store):
        client.post("/api/tasks", json=make_task(1, "Buy milk", tags=["shopping"]))
        client.post("/api/tasks", json=make_task(2, "Call mom", tags=["personal"]))
        task_store.refresh()
        return task_store

    def test_update_replaces_fields(self, seeded, client):
        other_before = client.get("/api/tasks").json()[1]

        seeded.update(1, text="Buy oat milk", priority=Priority.LOW)

        stored = client.get("/api/tasks").json()
        assert stored[0]["text"] == "Buy oat milk"
        assert stored[0]["priority"] == "low"
        assert stored[0]["tags"] == ["shopping"]
        assert stored[1] == other_before
        assert seeded.get(1).text == "Buy oat milk"
        assert _severities(seeded) == [Severity.SUCCESS]

    def test_update_rejects_blank_text(self, seeded, client):
        seeded.update(1, text=" ")

        assert client.get("/api/tasks").json()[0]["text"] == "Buy milk"
        assert _severities(seeded) == [Severity.ERROR]

    def test_update_unknown_id_is_local_error(self, seeded):
        assert seeded.update(99, text="x") is None
        assert seeded.notifier.last.message == "Task 99 not found."

    def test_toggle_flips_completion(self, seeded, client):
        seeded.toggle(2)

        assert client.get("/api/tasks").json()[1]["completed"] is True
        assert seeded.notifier.last.severity is Severity.INFO
        assert seeded.notifier.last.message == 'Task "Call mom" marked as completed.'

        seeded.toggle(2)
        assert seeded.get(2).completed is False
        assert seeded.notifier.last.message == 'Task "Call mom" marked as pending.'

    def test_remove(self, seeded, client):
        assert seeded.remove(1) is True

        assert [t["id"] for t in client.get("/api/tasks").json()] == [2]
        assert [t.id for t in seeded.list()] == [2]
        assert _severities(seeded) == [Severity.SUCCESS]

    def test_remove_failure(self, seeded):
        api = Mock(spec=TaskAPI)
        api.delete_task.side_effect = TaskAPIError("offline")
        store = TaskStore(api, state=seeded.state)

        assert store.remove(1) is False
        assert [t.id for t in store.list()] == [1, 2]
        assert store.notifier.last.message == "Failed to delete task."

    def test_every_mutation_notifies_once(self, seeded):
        seeded.update(1, text="A")
        seeded.toggle(1)
        seeded.remove(2)

        assert len(seeded.notifier.history) == 3


class TestSearchAndMove:
    @pytest.fixture
    def seeded(self, client, task_store):
        client.post("/api/tasks", json=make_task(1, "Buy milk", tags=["shopping"]))
        client.post("/api/tasks", json=make_task(2, "Call mom", tags=["personal"]))
        client.post("/api/tasks", json=make_task(3, "Write report", tags=["work"]))
        task_store.refresh()
        return task_store

    def test_search_is_local(self, seeded):
        assert [t.id for t in seeded.search("MILK")] == [1]
        assert [t.id for t in seeded.search("personal")] == [2]
        assert len(seeded.list()) == 3
        assert [t.id for t in seeded.search("")] == [1, 2, 3]

    def test_move_is_persisted(self, seeded, client):
        assert seeded.move(3, 1) is True

        assert [t.id for t in seeded.list()] == [3, 1, 2]
        seeded.refresh()
        assert [t.id for t in seeded.list()] == [3, 1, 2]
        assert [t["id"] for t in client.get("/api/tasks").json()] == [3, 1, 2]

    def test_move_failure_rolls_back(self, seeded):
        api = Mock(spec=TaskAPI)
        api.reorder.side_effect = TaskAPIError("offline")
        store = TaskStore(api, state=seeded.state)

        assert store.move(3, 1) is False
        assert [t.id for t in store.list()] == [1, 2, 3]
        assert store.notifier.last.severity is Severity.ERROR


class TestEditForm:
    def test_submit_without_edit_adds(self, task_store):
        task_store.submit(Draft("Fresh"))

        assert [t.text for t in task_store.list()] == ["Fresh"]

    def test_submit_while_editing_updates(self, client, task_store):
        client.post("/api/tasks", json=make_task(1, "Draft text", tags=["study"]))
        task_store.refresh()

        draft = task_store.begin_edit(1)
        assert draft == Draft("Draft text", Priority.MEDIUM, "", ["study"])
        assert task_store.state.editing.id == 1

        draft.text = "Final text"
        draft.tags = ["study", "urgent"]
        task_store.submit(draft)

        assert task_store.state.editing is None
        assert [t.text for t in task_store.list()] == ["Final text"]
        assert task_store.get(1).tags == ["study", "urgent"]

    def test_cancel_edit(self, client, task_store):
        client.post("/api/tasks", json=make_task(1))
        task_store.refresh()
        task_store.begin_edit(1)

        task_store.cancel_edit()

        assert task_store.state.editing is None


def test_refresh_failure_notifies_error():
    api = Mock(spec=TaskAPI)
    api.list_tasks.side_effect = TaskAPIError("refused")
    store = TaskStore(api)

    assert store.refresh() is False
    assert store.notifier.last.message == "Failed to fetch tasks."
    assert store.state.loading is False


def test_loading_flag_set_during_call():
    seen = []
    api = Mock(spec=TaskAPI)
    store = TaskStore(api)
    api.list_tasks.side_effect = lambda: seen.append(store.state.loading) or []

    store.refresh()

    assert seen == [True]
    assert store.state.loading is False


def test_toggle_dark_mode(task_store):
    assert task_store.toggle_dark_mode() is True
    assert task_store.state.dark_mode is True
    assert task_store.toggle_dark_mode() is False


class TestUpdateValidation:
    @pytest.fixture
    def store(self):
        api = Mock(spec=TaskAPI)
        store = TaskStore(api)
        store.state.tasks = [Task.model_validate(make_task(1, "Read"))]
        return store

    @pytest.mark.parametrize("fields, message", [
        ({"priority": "urgent"}, "Unknown priority: urgent."),
        ({"title": "x"}, "Unknown field(s): title."),
        ({"completed": "yes"}, "Completed must be true or false."),
        ({"tags": "work"}, "Tags must be a list."),
    ])
    def test_invalid_fields_make_no_call(self, store, fields, message):
        assert store.update(1, **fields) is None

        assert store._api.method_calls == []
        assert _severities(store) == [Severity.ERROR]
        assert store.notifier.last.message == message
        assert store.get(1).text == "Read"

    def test_due_date_wire_name_accepted(self, store):
        store._api.update_task.side_effect = lambda task_id, task: task
        store._api.list_tasks.return_value = []

        updated = store.update(1, dueDate="2026-11-01", tags=["work", "work"])

        assert updated.due_date == "2026-11-01"
        assert updated.tags == ["work"]
        assert _severities(store) == [Severity.SUCCESS]


def test_refresh_from_another_thread_waits_for_mutation():
    api = Mock(spec=TaskAPI)
    api.list_tasks.return_value = []
    store = TaskStore(api)

    with store._lock:
        worker = threading.Thread(target=store.refresh)
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        api.list_tasks.assert_not_called()

    worker.join(timeout=5)
    assert not worker.is_alive()
    api.list_tasks.assert_called_once()
