"""Running Python scripts and uploaded binaries in subprocesses."""

from __future__ import annotations

import asyncio
import base64
import errno
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .models import CreateTaskRequest, TaskStatusEnum, TaskType

PYTHON_INTERPRETER = "python3"
_FALLBACK_SHELL = "/bin/sh"


@dataclass(frozen=True)
class ExecutionOutcome:
    """Output of a finished task; stderr is kept only when the task failed."""

    stdout: str
    stderr: str | None
    status: TaskStatusEnum


async def _run(program: str, *args: str) -> subprocess.CompletedProcess:
    process = await asyncio.create_subprocess_exec(
        program,
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()
    return subprocess.CompletedProcess([program, *args], process.returncode, stdout, stderr)


async def binary_execute(
    task_id: str, base64_encoded_file: str, arguments: str
) -> subprocess.CompletedProcess:
    """Decode the file into ``<task_id>.bin`` in the working directory and run it.

    Files the kernel cannot execute directly are run as shell scripts.
    The temporary file is removed afterwards.
    """
    decoded = base64.b64decode(base64_encoded_file, validate=True)
    path = Path(f"{task_id}.bin")
    execute_path = f"./{task_id}.bin"
    path.write_bytes(decoded)
    path.chmod(0o777)
    try:
        try:
            return await _run(execute_path, arguments)
        except OSError as exc:
            if exc.errno != errno.ENOEXEC:
                raise
            return await _run(_FALLBACK_SHELL, execute_path, arguments)
    finally:
        path.unlink(missing_ok=True)


async def python_execute(python_code: str, arguments: str) -> subprocess.CompletedProcess:
    """Run a Python script passed on the command line."""
    return await _run(PYTHON_INTERPRETER, "-c", python_code, arguments)


async def execute_file(task: CreateTaskRequest, task_id: str) -> ExecutionOutcome:
    """Run the task and report its output and resulting status."""
    if task.task_type is TaskType.PYTHON:
        output = await python_execute(task.file, task.args)
    else:
        output = await binary_execute(task_id, task.file, task.args)

    stdout = output.stdout.decode("utf-8")
    stderr = output.stderr.decode("utf-8")
    if output.returncode != 0:
        return ExecutionOutcome(stdout, stderr, TaskStatusEnum.ERROR)
    return ExecutionOutcome(stdout, None, TaskStatusEnum.SUCCESS)