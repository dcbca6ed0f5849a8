import pytest

from tasksolver.cli import main, parse_args


def test_defaults():
    args = parse_args([])
    assert args.workers_count == 1
    assert args.address == "127.0.0.1"
    assert args.port == 8080


def test_short_options():
    args = parse_args(["-w", "4", "-a", "0.0.0.0", "-p", "9000"])
    assert (args.workers_count, args.address, args.port) == (4, "0.0.0.0", 9000)


def test_long_options():
    args = parse_args(["--workers", "2", "--address", "::1", "--port", "0"])
    assert (args.workers_count, args.address, args.port) == (2, "::1", 0)


@pytest.mark.parametrize(
    "argv",
    [
        ["-p", "70000"],
        ["-p", "-1"],
        ["-p", "http"],
        ["-w", "-3"],
        ["-w", "many"],
        ["--unknown"],
    ],
)
def test_invalid_arguments_exit(argv):
    with pytest.raises(SystemExit) as excinfo:
        parse_args(argv)
    assert excinfo.value.code == 2


def test_main_rejects_invalid_address():
    with pytest.raises(SystemExit) as excinfo:
        main(["-a", "not-an-address"])
    assert excinfo.value.code == 2


def test_main_rejects_invalid_port():
    with pytest.raises(SystemExit) as excinfo:
        main(["--port", "65536"])
    assert excinfo.value.code == 2