# tasksolver

`tasksolver` is an HTTP server that accepts jobs, puts them in a queue and
hands each one to a fixed number of workers. A job is either a Python script
or a base64-encoded executable file. A worker runs the job as a subprocess and
records its stdout, its stderr and its final status.

## Installation

```
pip install .
```

To install the test dependencies as well, use `pip install .[test]`.

`bin` tasks need a POSIX system. `python` tasks need a `python3` interpreter
on `PATH`.

## Starting the server

```
tasksolver --workers 4 --address 127.0.0.1 --port 8080
```

`python -m tasksolver.cli` does the same thing.

| Option | Short | Default | Meaning |
|---|---|---|---|
| `--workers` | `-w` | `1` | number of workers that run tasks (must not be negative) |
| `--address` | `-a` | `127.0.0.1` | IP address to listen on |
| `--port` | `-p` | `8080` | port to listen on (0 to 65535) |

The command exits with a usage error if the address is not a valid IP
address. The server runs until Ctrl+C interrupts it.

## Endpoints

Each endpoint takes JSON and returns JSON. A body that is not valid JSON, or
that lacks a required string field, gets a `400 Bad Request` response whose
text begins with `Request body deserialize error:`.

### `POST /create_task`

The body gives the task type, the file and the argument string:

```json
{"type": "python", "file": "print('Hello, world!')", "args": ""}
```

`type` must be `python` or `bin`.

- A `python` task runs `python3 -c <file> <args>`.
- A `bin` task decodes `file` from base64 and writes it to `<id>.bin` in the
  server's working directory. It sets the file's mode to `0777`, runs it as
  `./<id>.bin <args>` and then deletes the file. If the system cannot execute
  the file directly, the server runs it with `/bin/sh`, so a plain shell
  script works as well.

The program receives the whole `args` string as one argument.

The response holds the new task's id, which is a random UUID:

```json
{"id": "0b6f1e9c-2c1e-4d7b-9f43-2d8a7a5c1e10"}
```

### `GET /get_status`

This is a GET request, and the id goes in its JSON body: `{"id": "..."}`. The
response looks like this:

```json
{
  "status": "SUCCESS",
  "meta": {
    "created_at": "2024-01-01 12:00:00.000000 UTC",
    "started_at": "2024-01-01 12:00:00.010000 UTC",
    "finished_at": "2024-01-01 12:00:00.050000 UTC"
  },
  "result": {"stdout": "Hello, world!\n"}
}
```

`status` takes one of these values:

- `WAIT`: the task is queued.
- `RUNNING`: a worker has taken the task.
- `SUCCESS`: the program exited with status 0.
- `ERROR`: the program exited with a non-zero status, or it could not be run.
- `NOTEXIST`: no task has this id.

`started_at` and `finished_at` are absent until they are set. `result.stderr`
appears only when the task ended in `ERROR`. If a task could not be run at
all, for example because its base64 was invalid, `stderr` holds the error
message.

### `GET /get_task_count`

This endpoint returns how many tasks are queued and not yet taken by a worker:

```json
{"tasks": 0}
```

## Using it from Python

```python
import asyncio

from tasksolver.server import TaskSolverServer


async def run() -> None:
    server = TaskSolverServer(4, "127.0.0.1", 8080)
    await server.serve_forever()


asyncio.run(run())
```

`TaskSolverServer` provides `start()` and `stop()`, and it also works as an
async context manager. If you start it with port `0`, `bound_port` gives the
port the server actually listens on. `tasksolver.server.build_app(ServerInfo(...))`
returns the `aiohttp` application on its own. The application starts the
worker pool on startup and stops it on cleanup.

You can call the request handlers without a server. `tasksolver.handlers`
provides `create_task`, `get_status` and `get_task_count`. They work with a
`tasksolver.worker_pool.WorkerPool` and a `tasksolver.status.TaskStatus`, and
they take and return the dataclasses in `tasksolver.models`. A `WorkerPool`
accepts tasks before it is started. Call its `start()` from inside a running
event loop, or use it as an async context manager. `join()` waits until every
queued task has been processed.

To run a single job directly, use `tasksolver.executor.execute_file`. It
returns an `ExecutionOutcome` with `stdout`, `stderr` and `status`.

## Limitations

- Task statuses live only in memory. They are lost when the server stops, and
  finished tasks are never removed.
- A queued or running task cannot be cancelled, and a task has no time limit.
- The server has no authentication. Any client that can reach it can run
  arbitrary code on the host.