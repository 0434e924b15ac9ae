"""HTTP client for the task API."""

import logging
from typing import Any, List, Optional

import httpx

from ..config import API_URL, HTTP_TIMEOUT
from ..schemas.task import Task

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/tasks"


class TaskAPIError(Exception):
    """A call to the task API did not complete successfully."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TaskAPI:
    """Thin wrapper over the four CRUD endpoints plus reorder.

    Pass ``http`` to reuse an existing ``httpx.Client`` (for instance a
    FastAPI ``TestClient``); otherwise one is created for ``base_url``.
    No call is ever retried.
    """

    def __init__(
        self,
        base_url: str = API_URL,
        http: Optional[httpx.Client] = None,
        timeout: float = HTTP_TIMEOUT,
    ):
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            logger.error("%s %s returned %s", method, path, code)
            raise TaskAPIError(f"{method} {path} failed with status {code}", code) from exc
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise TaskAPIError(f"{method} {path} failed: {exc}") from exc
        return response.json()

    def list_tasks(self) -> List[Task]:
        return [Task.model_validate(item) for item in self._request("GET", TASKS_PATH)]

    def create_task(self, task: Task) -> Task:
        return Task.model_validate(self._request("POST", TASKS_PATH, json=task.to_wire()))

    def update_task(self, task_id: int, task: Task) -> Task:
        data = self._request("PUT", f"{TASKS_PATH}/{task_id}", json=task.to_wire())
        return Task.model_validate(data)

    def delete_task(self, task_id: int) -> bool:
        return bool(self._request("DELETE", f"{TASKS_PATH}/{task_id}").get("success"))

    def reorder(self, dragged_id: int, target_id: int) -> List[Task]:
        data = self._request(
            "POST",
            f"{TASKS_PATH}/reorder",
            json={"draggedId": dragged_id, "targetId": target_id},
        )
        return [Task.model_validate(item) for item in data]

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "TaskAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
