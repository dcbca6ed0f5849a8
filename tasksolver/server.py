"""HTTP front end of the task server: routes, shared state and lifecycle."""

from __future__ import annotations

import asyncio
import ipaddress
from dataclasses import dataclass, field
from typing import Any

from aiohttp import web

from . import handlers
from .models import CreateTaskRequest, GetStatusRequest
from .status import TaskStatus
from .worker_pool import WorkerPool


@dataclass
class ServerInfo:
    """State shared by every request: the worker pool and the task statuses."""

    worker_pool: WorkerPool
    task_status: TaskStatus = field(default_factory=TaskStatus)


async def _read_json(request: web.Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise web.HTTPBadRequest(text=f"Request body deserialize error: {exc}") from None


def build_app(server_info: ServerInfo) -> web.Application:
    """Create the web application serving the task endpoints.

    The worker pool is started with the application and stopped on cleanup.
    """
    worker_pool = server_info.worker_pool
    task_status = server_info.task_status

    async def create_task_route(request: web.Request) -> web.Response:
        data = await _read_json(request)
        try:
            task_request = CreateTaskRequest.from_dict(data)
        except ValueError as exc:
            raise web.HTTPBadRequest(text=f"Request body deserialize error: {exc}") from None
        response = await handlers.create_task(task_request, worker_pool, task_status)
        return web.json_response(response.to_dict())

    async def get_status_route(request: web.Request) -> web.Response:
        data = await _read_json(request)
        try:
            status_request = GetStatusRequest.from_dict(data)
        except ValueError as exc:
            raise web.HTTPBadRequest(text=f"Request body deserialize error: {exc}") from None
        response = await handlers.get_status(status_request, task_status)
        return web.json_response(response.to_dict())

    async def get_task_count_route(request: web.Request) -> web.Response:
        response = await handlers.get_task_count(worker_pool)
        return web.json_response(response.to_dict())

    async def start_workers(app: web.Application) -> None:
        if not worker_pool.running:
            worker_pool.start()

    async def stop_workers(app: web.Application) -> None:
        await worker_pool.stop()

    app = web.Application()
    app.router.add_post("/create_task", create_task_route)
    app.router.add_get("/get_status", get_status_route, allow_head=False)
    app.router.add_get("/get_task_count", get_task_count_route, allow_head=False)
    app.on_startup.append(start_workers)
    app.on_cleanup.append(stop_workers)
    return app


class TaskSolverServer:
    """Task server listening on the given address with a pool of workers."""

    def __init__(self, workers_count: int, ip: str, port: int) -> None:
        self.address = str(ipaddress.ip_address(ip))
        if not 0 <= port <= 65535:
            raise ValueError(f"port {port} is out of range")
        self.port = port
        self.server_info = ServerInfo(WorkerPool(workers_count))
        self._runner: web.AppRunner | None = None

    @property
    def bound_port(self) -> int:
        """Port actually listened on, useful when started with port 0."""
        if self._runner is None or not self._runner.addresses:
            raise RuntimeError("server is not running")
        return self._runner.addresses[0][1]

    async def start(self) -> None:
        """Start the workers and begin accepting connections."""
        if self._runner is not None:
            raise RuntimeError("server is already running")
        runner = web.AppRunner(build_app(self.server_info))
        await runner.setup()
        site = web.TCPSite(runner, self.address, self.port)
        try:
            await site.start()
        except BaseException:
            await runner.cleanup()
            raise
        self._runner = runner

    async def stop(self) -> None:
        """Stop accepting connections and shut the workers down."""
        runner, self._runner = self._runner, None
        if runner is not None:
            await runner.cleanup()

    async def serve_forever(self) -> None:
        """Run the server until the surrounding task is cancelled."""
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()

    async def __aenter__(self) -> TaskSolverServer:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()