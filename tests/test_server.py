import base64
from contextlib import asynccontextmanager

import aiohttp
import pytest

from tasksolver.server import TaskSolverServer


@asynccontextmanager
async def _running_server(workers_count):
    server = TaskSolverServer(workers_count, "127.0.0.1", 0)
    await server.start()
    try:
        base_url = f"http://127.0.0.1:{server.bound_port}"
        async with aiohttp.ClientSession() as session:
            yield server, session, base_url
    finally:
        await server.stop()


@pytest.mark.asyncio
async def test_it_works(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    async with _running_server(4) as (server, session, base_url):
        request = {
            "type": "bin",
            "file": base64.b64encode(b"echo Hello, world!").decode(),
            "args": "",
        }
        async with session.post(f"{base_url}/create_task", json=request) as response:
            assert response.status == 200
            task_id = (await response.json())["id"]

        await server.server_info.worker_pool.join()

        async with session.get(f"{base_url}/get_status", json={"id": task_id}) as response:
            assert response.status == 200
            data = await response.json()
        assert data["status"] == "SUCCESS"
        assert data["result"]["stdout"] == "Hello, world!\n"
        assert "stderr" not in data["result"]
        assert "started_at" in data["meta"]
        assert "finished_at" in data["meta"]


@pytest.mark.asyncio
async def test_python_task_error_reports_stderr():
    async with _running_server(2) as (server, session, base_url):
        request = {"type": "python", "file": "print(1 / 0)", "args": ""}
        async with session.post(f"{base_url}/create_task", json=request) as response:
            task_id = (await response.json())["id"]
        await server.server_info.worker_pool.join()
        async with session.get(f"{base_url}/get_status", json={"id": task_id}) as response:
            data = await response.json()
        assert data["status"] == "ERROR"
        assert data["result"]["stderr"].endswith("ZeroDivisionError: division by zero\n")


@pytest.mark.asyncio
async def test_created_task_waits_without_workers():
    async with _running_server(0) as (_, session, base_url):
        request = {"type": "python", "file": "print('Hello, world!')", "args": ""}
        async with session.post(f"{base_url}/create_task", json=request) as response:
            task_id = (await response.json())["id"]
        async with session.get(f"{base_url}/get_status", json={"id": task_id}) as response:
            data = await response.json()
        assert data["status"] == "WAIT"
        assert data["result"] == {"stdout": ""}
        assert set(data["meta"]) == {"created_at"}


@pytest.mark.asyncio
async def test_task_count_counts_queued_tasks():
    async with _running_server(0) as (_, session, base_url):
        async with session.get(f"{base_url}/get_task_count") as response:
            assert await response.json() == {"tasks": 0}
        for _ in range(3):
            request = {"type": "python", "file": "print('Hello, world!')", "args": ""}
            async with session.post(f"{base_url}/create_task", json=request) as response:
                assert response.status == 200
        async with session.get(f"{base_url}/get_task_count") as response:
            assert await response.json() == {"tasks": 3}


@pytest.mark.asyncio
async def test_unknown_task_id_is_notexist():
    async with _running_server(1) as (_, session, base_url):
        async with session.get(f"{base_url}/get_status", json={"id": "random-UUID"}) as response:
            data = await response.json()
        assert data["status"] == "NOTEXIST"


@pytest.mark.asyncio
async def test_malformed_body_is_rejected():
    async with _running_server(1) as (_, session, base_url):
        async with session.post(f"{base_url}/create_task", data=b"not json") as response:
            assert response.status == 400
        bad_type = {"type": "ruby", "file": "", "args": ""}
        async with session.post(f"{base_url}/create_task", json=bad_type) as response:
            assert response.status == 400
        async with session.get(f"{base_url}/get_status", json={"uuid": "x"}) as response:
            assert response.status == 400


@pytest.mark.asyncio
async def test_wrong_method_and_path():
    async with _running_server(1) as (_, session, base_url):
        async with session.get(f"{base_url}/create_task") as response:
            assert response.status == 405
        async with session.get(f"{base_url}/missing") as response:
            assert response.status == 404


@pytest.mark.asyncio
async def test_start_twice_is_an_error():
    async with _running_server(1) as (server, _, _):
        with pytest.raises(RuntimeError):
            await server.start()


def test_invalid_address_is_rejected():
    with pytest.raises(ValueError):
        TaskSolverServer(1, "not-an-address", 8080)


def test_bound_port_requires_running_server():
    server = TaskSolverServer(1, "127.0.0.1", 0)
    assert server.server_info.worker_pool.task_count() == 0
    with pytest.raises(RuntimeError):
        server.bound_port