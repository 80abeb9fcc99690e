from __future__ import annotations

import io
import signal
import threading
from unittest.mock import MagicMock

import pytest
from conftest import FakeExecutor, default_outputs
from rich.console import Console

from remote_stats import cli
from remote_stats.collector import SampleCollector
from remote_stats.reporter import Reporter
from remote_stats.ssh_executor import ConnectError


@pytest.fixture
def fake_ssh(monkeypatch) -> FakeExecutor:
    executor = FakeExecutor(default_outputs())
    factory = MagicMock(return_value=executor)
    monkeypatch.setattr(cli, "SSHCommandExecutor", factory)
    return executor


@pytest.fixture
def buffer(monkeypatch) -> io.StringIO:
    output = io.StringIO()
    monkeypatch.setattr(cli, "Reporter", lambda: Reporter(Console(file=output, width=120)))
    return output


def test_once_prints_single_frame(fake_ssh, buffer) -> None:
    assert cli.main(["--hostname", "root@10.0.0.5:22", "--interval", "1", "--once", "--no-clear"]) == 0

    assert fake_ssh.connected
    assert fake_ssh.closed
    assert "web01.example.com up" in buffer.getvalue()
    assert "Goodbye!" not in buffer.getvalue()


class _FailingExecutor(FakeExecutor):
    def connect(self) -> None:
        raise ConnectError("Failed to connect to 10.0.0.5:22: refused")


class _InterruptedExecutor(FakeExecutor):
    """Receives SIGINT while the SSH handshake is still running."""

    def connect(self) -> None:
        handler = signal.getsignal(signal.SIGINT)
        handler(signal.SIGINT, None)
        super().connect()


def test_connection_failure_exits_one(monkeypatch, buffer, capsys) -> None:
    executor = _FailingExecutor(default_outputs())
    monkeypatch.setattr(cli, "SSHCommandExecutor", MagicMock(return_value=executor))

    assert cli.main(["--hostname", "root@10.0.0.5:22", "--interval", "1"]) == 1
    assert "refused" in capsys.readouterr().err
    assert executor.calls == []


def test_interrupt_during_connect_exits_cleanly(monkeypatch, buffer) -> None:
    executor = _InterruptedExecutor(default_outputs())
    monkeypatch.setattr(cli, "SSHCommandExecutor", MagicMock(return_value=executor))
    original = signal.getsignal(signal.SIGINT)

    assert cli.main(["--hostname", "root@10.0.0.5:22", "--interval", "1"]) == 0

    assert executor.calls == []
    assert executor.closed
    assert "Goodbye!" in buffer.getvalue()
    assert signal.getsignal(signal.SIGINT) is original


@pytest.mark.parametrize(
    "argv",
    [
        ["--hostname", "10.0.0.5:22", "--interval", "1"],
        ["--hostname", "root@10.0.0.5:22", "--interval", "0"],
        ["--hostname", "root@10.0.0.5:22"],
        ["--hostname", "root@10.0.0.5:22", "--interval", "1", "--password", "x", "-p", "/k"],
    ],
)
def test_invalid_arguments_exit_two(argv, fake_ssh) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    assert excinfo.value.code == 2
    assert not fake_ssh.connected


def test_log_level_is_case_insensitive() -> None:
    args = cli.build_parser().parse_args(
        ["--hostname", "root@h:22", "--interval", "2", "--log-level", "debug"]
    )
    assert args.log_level == "DEBUG"


def test_run_loop_stops_on_event() -> None:
    collector = SampleCollector(FakeExecutor(default_outputs()))
    reporter = MagicMock()
    stop_event = threading.Event()
    calls = []

    def show(snapshot, clear=True):
        calls.append(clear)
        if len(calls) == 3:
            stop_event.set()

    reporter.show.side_effect = show
    cli.run_loop(collector, reporter, 0.01, stop_event, clear=False)

    assert calls == [False, False, False]


def test_run_loop_once() -> None:
    collector = SampleCollector(FakeExecutor(default_outputs()))
    reporter = MagicMock()
    cli.run_loop(collector, reporter, 60, threading.Event(), once=True)
    reporter.show.assert_called_once()


def test_run_loop_not_started_when_stopped() -> None:
    reporter = MagicMock()
    stop_event = threading.Event()
    stop_event.set()
    cli.run_loop(MagicMock(), reporter, 1, stop_event)
    reporter.show.assert_not_called()
