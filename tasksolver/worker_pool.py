"""Pool of asyncio workers that take queued tasks and run them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from types import TracebackType

from .executor import execute_file
from .models import CreateTaskRequest, TaskStatusEnum
from .status import TaskStatus

logger = logging.getLogger(__name__)


@dataclass
class TaskInfo:
    """Everything a worker needs to run one task and record its status."""

    id: str
    task_request: CreateTaskRequest
    task_status: TaskStatus


class WorkerPool:
    """A fixed number of workers consuming tasks from a shared queue.

    Workers are asyncio tasks, so ``start`` must be called from inside a
    running event loop. Tasks may be queued before the pool is started.
    """

    def __init__(self, workers_count: int) -> None:
        if workers_count < 0:
            raise ValueError("workers_count must not be negative")
        self.workers_count = workers_count
        self._queue: asyncio.Queue[TaskInfo] = asyncio.Queue()
        self._workers: list[asyncio.Task[None]] = []

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def start(self) -> None:
        """Spawn the workers on the running event loop."""
        if self._workers:
            raise RuntimeError("worker pool is already running")
        self._workers = [
            asyncio.create_task(self._work(), name=f"tasksolver-worker-{number}")
            for number in range(self.workers_count)
        ]

    async def stop(self) -> None:
        """Cancel every worker and wait until they have finished."""
        workers, self._workers = self._workers, []
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

    async def do_task(self, task_info: TaskInfo) -> None:
        """Queue a task for the next free worker."""
        await self._queue.put(task_info)

    async def join(self) -> None:
        """Wait until every queued task has been processed."""
        await self._queue.join()

    def task_count(self) -> int:
        """Number of tasks waiting in the queue, not yet taken by a worker."""
        return self._queue.qsize()

    async def __aenter__(self) -> WorkerPool:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.stop()

    async def _work(self) -> None:
        while True:
            task_info = await self._queue.get()
            try:
                await self._run(task_info)
            finally:
                self._queue.task_done()

    @staticmethod
    async def _run(task_info: TaskInfo) -> None:
        status = task_info.task_status
        try:
            status.start_running_task(task_info.id)
            outcome = await execute_file(task_info.task_request, task_info.id)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("task %s failed to run", task_info.id)
            try:
                status.finish_running_task(task_info.id, "", str(exc), TaskStatusEnum.ERROR)
            except KeyError:
                pass
            return
        status.finish_running_task(task_info.id, outcome.stdout, outcome.stderr, outcome.status)