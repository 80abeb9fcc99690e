"""One sampling pass over the remote host."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from . import remote_commands
from .extractors import (
    parse_addresses,
    parse_cpu,
    parse_filesystems,
    parse_hostname,
    parse_loadavg,
    parse_meminfo,
    parse_net_dev,
    parse_uptime,
)
from .models import Snapshot
from .ssh_executor import CommandExecutor, ExecError

_LOGGER = logging.getLogger(__name__)


def _collect_uptime(executor: CommandExecutor, snapshot: Snapshot) -> bool:
    uptime = parse_uptime(executor.run(remote_commands.UPTIME))
    if uptime is None:
        return False
    snapshot.uptime = uptime
    return True


def _collect_hostname(executor: CommandExecutor, snapshot: Snapshot) -> bool:
    hostname = parse_hostname(executor.run(remote_commands.HOSTNAME))
    if hostname is None:
        return False
    snapshot.hostname = hostname
    return True


def _collect_load(executor: CommandExecutor, snapshot: Snapshot) -> bool:
    load = parse_loadavg(executor.run(remote_commands.LOADAVG))
    if load is None:
        return False
    snapshot.apply_load(load)
    return True


def _collect_memory(executor: CommandExecutor, snapshot: Snapshot) -> bool:
    return snapshot.apply_memory(parse_meminfo(executor.run(remote_commands.MEMINFO)))


def _collect_filesystems(executor: CommandExecutor, snapshot: Snapshot) -> bool:
    filesystems = parse_filesystems(executor.run(remote_commands.DISK_FREE))
    if not filesystems:
        return False
    snapshot.filesystems = filesystems
    return True


def _run_ip_addr(executor: CommandExecutor) -> str:
    *candidates, last = remote_commands.IP_ADDR
    for command in candidates:
        try:
            return executor.run(command)
        except ExecError as err:
            _LOGGER.debug("%s failed, trying fallback: %s", command, err)
    return executor.run(last)


def _collect_addresses(executor: CommandExecutor, snapshot: Snapshot) -> bool:
    records = parse_addresses(_run_ip_addr(executor))
    for name, family, address in records:
        snapshot.interfaces.set_address(name, family, address)
    return bool(records)


def _collect_counters(executor: CommandExecutor, snapshot: Snapshot) -> bool:
    if not snapshot.interfaces:
        return False
    counters = parse_net_dev(executor.run(remote_commands.NET_DEV))
    updated = False
    for name, (rx, tx) in counters.items():
        if snapshot.interfaces.update_counters(name, rx, tx):
            updated = True
    return updated


def _collect_cpu(executor: CommandExecutor, snapshot: Snapshot) -> bool:
    sample = parse_cpu(executor.run(remote_commands.CPU_STAT))
    if sample is None:
        return False
    info = snapshot.cpu_tracker.compute(sample)
    if info is not None:
        snapshot.cpu = info
    return True


Step = Callable[[CommandExecutor, Snapshot], bool]

STEPS: List[Tuple[str, Step]] = [
    ("uptime", _collect_uptime),
    ("hostname", _collect_hostname),
    ("load", _collect_load),
    ("memory", _collect_memory),
    ("filesystems", _collect_filesystems),
    ("addresses", _collect_addresses),
    ("counters", _collect_counters),
    ("cpu", _collect_cpu),
]


def collect_once(executor: CommandExecutor, snapshot: Snapshot) -> Snapshot:
    """Run every metric step against *snapshot* and return it.

    A failing step is logged and skipped; the fields it owns keep the values
    of the previous tick.
    """
    for name, step in STEPS:
        try:
            updated = step(executor, snapshot)
        except ExecError as err:
            _LOGGER.warning("Failed to collect %s: %s", name, err)
            continue
        if not updated:
            _LOGGER.debug("No update for %s this tick", name)
    return snapshot


class SampleCollector:
    """Bind one executor to the snapshot it keeps up to date."""

    def __init__(self, executor: CommandExecutor, snapshot: Optional[Snapshot] = None) -> None:
        self.executor = executor
        self.snapshot = snapshot if snapshot is not None else Snapshot()

    def collect_once(self) -> Snapshot:
        return collect_once(self.executor, self.snapshot)
