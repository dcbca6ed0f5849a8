"""Endpoint handlers of the task server."""

from __future__ import annotations

from .models import (
    CreateTaskRequest,
    CreateTaskResponse,
    GetStatusRequest,
    GetStatusResponse,
    GetTaskCountResponse,
)
from .status import TaskStatus
from .worker_pool import TaskInfo, WorkerPool


async def create_task(
    request: CreateTaskRequest, worker_pool: WorkerPool, task_status: TaskStatus
) -> CreateTaskResponse:
    """Register a waiting task, queue it for the workers and return its id."""
    task_id = task_status.add_new_task()
    await worker_pool.do_task(TaskInfo(task_id, request, task_status))
    return CreateTaskResponse(id=task_id)


async def get_status(request: GetStatusRequest, task_status: TaskStatus) -> GetStatusResponse:
    """Return the status of the requested task, NOTEXIST if the id is unknown."""
    return task_status.get_status_by_id(request.id)


async def get_task_count(worker_pool: WorkerPool) -> GetTaskCountResponse:
    """Return the number of tasks waiting in the queue."""
    return GetTaskCountResponse(tasks=worker_pool.task_count())