"""Command line entry point of the task server."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence

from .server import TaskSolverServer

_DESCRIPTION = (
    "Task Solver creates a server with the given amount of workers. "
    "Send a POST request to /create_task with JSON "
    '{"type": "python/bin", "file": "...", "args": "..."} holding a Python '
    "script or a base64 encoded binary; a free worker runs it in a subprocess. "
    "GET /get_task_count returns the number of queued tasks, and GET /get_status "
    "with the task id in a JSON body returns the status of a task."
)


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"{value} must not be negative")
    return value


def _port(text: str) -> int:
    value = _non_negative_int(text)
    if value > 65535:
        raise argparse.ArgumentTypeError(f"port {value} is out of range")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tasksolver", description=_DESCRIPTION)
    parser.add_argument(
        "-w",
        "--workers",
        dest="workers_count",
        type=_non_negative_int,
        default=1,
        help="number of workers running the tasks",
    )
    parser.add_argument("-a", "--address", default="127.0.0.1", help="server address")
    parser.add_argument("-p", "--port", type=_port, default=8080, help="server port")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the server start arguments."""
    return _build_parser().parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Start the task server and run it until interrupted."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        server = TaskSolverServer(args.workers_count, args.address, args.port)
    except ValueError as exc:
        parser.error(str(exc))
    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())