"""Thread-safe registry of task statuses."""

from __future__ import annotations

import copy
import threading
import uuid

from .models import GetStatusResponse, TaskStatusEnum, utc_now


class TaskStatus:
    """Holds the status of every task known to the server."""

    def __init__(self) -> None:
        self._statuses: dict[str, GetStatusResponse] = {}
        self._lock = threading.Lock()

    def __contains__(self, task_id: object) -> bool:
        with self._lock:
            return task_id in self._statuses

    def get_status_by_id(self, task_id: str) -> GetStatusResponse:
        """Return a copy of the task's status, or a NOTEXIST status if unknown."""
        with self._lock:
            status = self._statuses.get(task_id)
            if status is not None:
                return copy.deepcopy(status)
        return GetStatusResponse.not_found()

    def add_new_task(self) -> str:
        """Register a waiting task under a fresh UUID and return the id."""
        task_id = str(uuid.uuid4())
        with self._lock:
            self._statuses[task_id] = GetStatusResponse.waiting()
        return task_id

    def _get(self, task_id: str) -> GetStatusResponse:
        try:
            return self._statuses[task_id]
        except KeyError:
            raise KeyError(f"unknown task id {task_id!r}") from None

    def start_running_task(self, task_id: str) -> None:
        with self._lock:
            status = self._get(task_id)
            status.status = TaskStatusEnum.RUNNING
            status.meta.started_at = utc_now()

    def finish_running_task(
        self,
        task_id: str,
        stdout: str,
        stderr: str | None,
        execution_result: TaskStatusEnum,
    ) -> None:
        with self._lock:
            status = self._get(task_id)
            status.result.stdout = stdout
            status.result.stderr = stderr
            status.status = execution_result
            status.meta.finished_at = utc_now()