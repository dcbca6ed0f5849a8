"""Request and response models exchanged with the task server."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

_UTC_FORMAT = "%Y-%m-%d %H:%M:%S.%f UTC"


def utc_now() -> str:
    """Return the current UTC time as a human-readable timestamp."""
    return datetime.now(timezone.utc).strftime(_UTC_FORMAT)


class TaskType(str, Enum):
    """Kind of file a task carries."""

    PYTHON = "python"
    BIN = "bin"


class TaskStatusEnum(str, Enum):
    """Lifecycle state of a task."""

    WAIT = "WAIT"
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    NOTEXIST = "NOTEXIST"


def _require_str(data: Any, key: str) -> str:
    if not isinstance(data, Mapping):
        raise ValueError("request body must be a JSON object")
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


@dataclass
class CreateTaskRequest:
    """A request to run a Python script or a base64 encoded binary."""

    task_type: TaskType
    file: str
    args: str

    @classmethod
    def from_dict(cls, data: Any) -> CreateTaskRequest:
        raw_type = _require_str(data, "type")
        try:
            task_type = TaskType(raw_type)
        except ValueError:
            raise ValueError(f"unknown task type {raw_type!r}") from None
        return cls(task_type, _require_str(data, "file"), _require_str(data, "args"))

    def to_dict(self) -> dict[str, str]:
        return {"type": self.task_type.value, "file": self.file, "args": self.args}


@dataclass
class GetStatusRequest:
    """A request for the status of the task with the given id."""

    id: str

    @classmethod
    def from_dict(cls, data: Any) -> GetStatusRequest:
        return cls(_require_str(data, "id"))


@dataclass
class CreateTaskResponse:
    """The id assigned to a newly created task."""

    id: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id}


@dataclass
class MetaInformation:
    """Timestamps of a task's creation, start and finish."""

    created_at: str
    started_at: str | None = None
    finished_at: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"created_at": self.created_at}
        if self.started_at is not None:
            data["started_at"] = self.started_at
        if self.finished_at is not None:
            data["finished_at"] = self.finished_at
        return data


@dataclass
class GetStatusResult:
    """Captured output of a finished task."""

    stdout: str = ""
    stderr: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"stdout": self.stdout}
        if self.stderr is not None:
            data["stderr"] = self.stderr
        return data


@dataclass
class GetStatusResponse:
    """Full status of a task: state, timestamps and result."""

    status: TaskStatusEnum
    meta: MetaInformation
    result: GetStatusResult = field(default_factory=GetStatusResult)

    @classmethod
    def waiting(cls) -> GetStatusResponse:
        """Status of a freshly queued task."""
        return cls(TaskStatusEnum.WAIT, MetaInformation(created_at=utc_now()))

    @classmethod
    def not_found(cls) -> GetStatusResponse:
        """Status reported for an unknown task id."""
        return cls(TaskStatusEnum.NOTEXIST, MetaInformation(created_at=utc_now()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "meta": self.meta.to_dict(),
            "result": self.result.to_dict(),
        }


@dataclass
class GetTaskCountResponse:
    """Number of tasks waiting in the queue."""

    tasks: int

    def to_dict(self) -> dict[str, int]:
        return {"tasks": self.tasks}