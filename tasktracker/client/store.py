"""Client task store.

Holds the last-fetched list in an ``AppState`` and drives every change
through the API: submit, refetch the whole list, then report the outcome as
exactly one notification.
"""

import functools
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from ..schemas.task import TAG_VOCABULARY, Priority, Task
from .api import TaskAPI, TaskAPIError
from .notifications import Notifier, Severity
from .state import AppState
from .views import filter_tasks, reorder_tasks

logger = logging.getLogger(__name__)

TASK_FIELDS = frozenset(Task.model_fields) | {"dueDate"}


def _is_priority(value) -> bool:
    try:
        Priority(value)
    except ValueError:
        return False
    return True


def _unique(tags) -> List[str]:
    return list(dict.fromkeys(tags))


@dataclass
class Draft:
    """Contents of the task form before submission."""
    text: str
    priority: Priority = Priority.MEDIUM
    due_date: str = ""
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_task(cls, task: Task) -> "Draft":
        return cls(task.text, task.priority, task.due_date or "", list(task.tags))

    def fields(self) -> dict:
        return {
            "text": self.text,
            "priority": self.priority,
            "due_date": self.due_date,
            "tags": _unique(self.tags),
        }


def validate_fields(fields: dict) -> Optional[str]:
    """Return the error message for invalid form input, or None."""
    unknown_fields = sorted(set(fields) - TASK_FIELDS)
    if unknown_fields:
        return f"Unknown field(s): {', '.join(unknown_fields)}."
    if "text" in fields and not str(fields["text"]).strip():
        return "Task cannot be empty."
    if "priority" in fields and not _is_priority(fields["priority"]):
        return f"Unknown priority: {fields['priority']}."
    if "completed" in fields and not isinstance(fields["completed"], bool):
        return "Completed must be true or false."
    tags = fields.get("tags", [])
    if not isinstance(tags, (list, tuple)):
        return "Tags must be a list."
    unknown = [tag for tag in tags if tag not in TAG_VOCABULARY]
    if unknown:
        return f"Unknown tag(s): {', '.join(map(str, unknown))}."
    return None


def _normalized(fields: dict) -> dict:
    fields = dict(fields)
    if "dueDate" in fields:
        fields["due_date"] = fields.pop("dueDate")
    if "tags" in fields:
        fields["tags"] = _unique(fields["tags"])
    return fields


def _locked(method):
    """Run ``method`` holding the store lock, so state has one writer at a time."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class TaskStore:
    def __init__(
        self,
        api: TaskAPI,
        notifier: Optional[Notifier] = None,
        state: Optional[AppState] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._api = api
        self._notifier = notifier or Notifier()
        self._state = state or AppState()
        self._clock = clock
        self._last_id = 0
        # The reminder scheduler refreshes from its own thread.
        self._lock = threading.RLock()

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    # -- reads ---------------------------------------------------------------

    @_locked
    def list(self) -> List[Task]:
        return list(self._state.tasks)

    def visible(self) -> List[Task]:
        """Tasks matching the current search term."""
        return filter_tasks(self._state.tasks, self._state.search_term)

    @_locked
    def search(self, term: str) -> List[Task]:
        self._state.search_term = term
        return self.visible()

    def get(self, task_id: int) -> Optional[Task]:
        return next((task for task in self._state.tasks if task.id == task_id), None)

    @_locked
    def refresh(self) -> bool:
        with self._state.busy():
            try:
                self._state.tasks = self._api.list_tasks()
            except TaskAPIError as exc:
                logger.error("Error fetching tasks: %s", exc)
                self._notifier.push("Failed to fetch tasks.", Severity.ERROR)
                return False
        return True

    # -- mutations -----------------------------------------------------------

    def _new_id(self) -> int:
        self._last_id = max(int(self._clock() * 1000), self._last_id + 1)
        return self._last_id

    def _mutate(self, call: Callable[[], Any], success: str, failure: str,
                severity: Severity = Severity.SUCCESS) -> Any:
        with self._state.busy():
            try:
                result = call()
            except TaskAPIError as exc:
                logger.error("%s %s", failure, exc)
                self._notifier.push(failure, Severity.ERROR)
                return None
            try:
                self._state.tasks = self._api.list_tasks()
            except TaskAPIError as exc:
                logger.error("Error fetching tasks: %s", exc)
                self._notifier.push(f"{success} The task list could not be refreshed.", Severity.WARNING)
                return result
        self._notifier.push(success, severity)
        return result

    def _reject(self, message: str) -> None:
        self._notifier.push(message, Severity.ERROR)

    def _missing(self, task_id: int) -> None:
        self._reject(f"Task {task_id} not found.")

    @_locked
    def add(self, draft: Draft) -> Optional[Task]:
        fields = draft.fields()
        error = validate_fields(fields)
        if error:
            self._reject(error)
            return None
        try:
            task = Task(id=self._new_id(), completed=False, **fields)
        except ValueError as exc:
            logger.error("Invalid task: %s", exc)
            self._reject("Task is invalid.")
            return None
        return self._mutate(
            lambda: self._api.create_task(task),
            "Task added successfully!",
            "Failed to add task.",
        )

    def _replace(self, base: Task, fields: dict, success: str = "Task updated successfully!",
                 severity: Severity = Severity.SUCCESS) -> Optional[Task]:
        error = validate_fields(fields)
        if error:
            self._reject(error)
            return None
        try:
            updated = Task.model_validate({**base.model_dump(), **_normalized(fields)})
        except ValueError as exc:
            logger.error("Invalid task: %s", exc)
            self._reject("Task is invalid.")
            return None
        return self._mutate(
            lambda: self._api.update_task(base.id, updated),
            success,
            "Failed to update task.",
            severity,
        )

    @_locked
    def update(self, task_id: int, **fields) -> Optional[Task]:
        """Submit the cached task with ``fields`` replaced, as a whole."""
        task = self.get(task_id)
        if task is None:
            self._missing(task_id)
            return None
        return self._replace(task, fields)

    @_locked
    def toggle(self, task_id: int) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            self._missing(task_id)
            return None
        status = "pending" if task.completed else "completed"
        return self._replace(
            task,
            {"completed": not task.completed},
            f'Task "{task.text}" marked as {status}.',
            Severity.INFO,
        )

    @_locked
    def remove(self, task_id: int) -> bool:
        if self.get(task_id) is None:
            self._missing(task_id)
            return False
        result = self._mutate(
            lambda: self._api.delete_task(task_id),
            "Task deleted successfully!",
            "Failed to delete task.",
        )
        return bool(result)

    @_locked
    def move(self, dragged_id: int, target_id: int) -> bool:
        """Drag ``dragged_id`` onto ``target_id`` and persist the new order."""
        if dragged_id == target_id:
            return False
        for task_id in (dragged_id, target_id):
            if self.get(task_id) is None:
                self._missing(task_id)
                return False
        previous = self._state.tasks
        self._state.tasks = reorder_tasks(previous, dragged_id, target_id)
        with self._state.busy():
            try:
                self._state.tasks = self._api.reorder(dragged_id, target_id)
            except TaskAPIError as exc:
                logger.error("Error saving order: %s", exc)
                self._state.tasks = previous
                self._notifier.push("Failed to save the new order.", Severity.ERROR)
                return False
        self._notifier.push("Task order saved.", Severity.INFO)
        return True

    # -- edit form -----------------------------------------------------------

    @_locked
    def begin_edit(self, task_id: int) -> Optional[Draft]:
        task = self.get(task_id)
        if task is None:
            self._missing(task_id)
            return None
        self._state.editing = task
        return Draft.from_task(task)

    @_locked
    def cancel_edit(self) -> None:
        self._state.editing = None

    @_locked
    def submit(self, draft: Draft) -> Optional[Task]:
        """Save the form: update the task being edited, or add a new one."""
        editing = self._state.editing
        if editing is None:
            return self.add(draft)
        result = self._replace(editing, draft.fields())
        if result is not None:
            self._state.editing = None
        return result

    @_locked
    def toggle_dark_mode(self) -> bool:
        self._state.dark_mode = not self._state.dark_mode
        return self._state.dark_mode
