"""Command line entry point for remote-stats."""
from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from typing import Any, List, Optional

import voluptuous as vol

from . import __version__
from .collector import SampleCollector
from .config import LOG_LEVELS, build_connection_settings, load_settings, redact
from .reporter import Reporter
from .ssh_executor import ConnectError, SSHCommandExecutor

_LOGGER = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    """Configure module wide logging."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remote-stats",
        description="Live resource statistics of a remote Linux host over SSH",
    )
    parser.add_argument(
        "--hostname",
        required=True,
        metavar="USER@HOST:PORT",
        help="SSH server to connect to",
    )
    parser.add_argument(
        "--interval",
        "-i",
        type=int,
        required=True,
        help="Seconds between two samples",
    )
    credentials = parser.add_mutually_exclusive_group()
    credentials.add_argument(
        "--private-key-file",
        "-p",
        metavar="PATH",
        help="Private key file to authenticate with",
    )
    credentials.add_argument(
        "--password",
        help="Password to authenticate with (default: use the SSH agent)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Collect and print a single sample, then exit",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Do not clear the terminal between samples",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: $REMOTE_STATS_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def run_loop(
    collector: SampleCollector,
    reporter: Reporter,
    interval: float,
    stop_event: threading.Event,
    *,
    clear: bool = True,
    once: bool = False,
) -> None:
    """Sample and render until *stop_event* is set.

    The wait between ticks returns early when the event fires, so an
    interrupt ends the loop without waiting out the interval.
    """
    while not stop_event.is_set():
        reporter.show(collector.collect_once(), clear=clear)
        if once:
            return
        stop_event.wait(timeout=interval)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        connection = build_connection_settings(
            args.hostname,
            args.interval,
            password=args.password,
            key=args.private_key_file,
        )
    except vol.Invalid as err:
        parser.error(str(err))

    _setup_logging(args.log_level or settings.log_level)
    _LOGGER.info("Monitoring %s", redact(connection.as_dict()))

    stop_event = threading.Event()

    def _signal_handler(signum: int, frame: Any) -> None:
        _LOGGER.debug("Received signal %s, stopping", signum)
        stop_event.set()

    # handlers go in before connecting; an interrupt during the handshake
    # only sets the event
    previous_handlers = {
        signum: signal.signal(signum, _signal_handler)
        for signum in (signal.SIGINT, signal.SIGTERM)
    }

    reporter = Reporter()
    try:
        with SSHCommandExecutor(connection, settings) as executor:
            run_loop(
                SampleCollector(executor),
                reporter,
                connection.interval,
                stop_event,
                clear=not args.no_clear,
                once=args.once,
            )
    except ConnectError as err:
        sys.stderr.write(f"{err}\n")
        return 1
    finally:
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    if not args.once:
        reporter.console.print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
