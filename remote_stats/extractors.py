"""Parsers turning raw command output into metric updates.

Every parser is tolerant: output that does not have the expected shape
produces "no update" (``None`` or an empty collection) instead of an
exception, so one odd distribution never breaks a whole sampling pass.
"""
from __future__ import annotations

import enum
import logging
import math
from typing import Dict, List, Optional, Tuple

from .cpu_tracker import CPU_FIELDS, CpuRawSample
from .interfaces import INET, INET6
from .models import FilesystemInfo, LoadAverage, MemoryInfo
from .util import safe_float, safe_int

_LOGGER = logging.getLogger(__name__)

MEMINFO_KEYS = {
    "MemTotal:": "mem_total",
    "MemFree:": "mem_free",
    "Buffers:": "mem_buffers",
    "Cached:": "mem_cached",
    "SwapTotal:": "swap_total",
    "SwapFree:": "swap_free",
}

DEVICE_PREFIXES: Tuple[str, ...] = ("/dev/",)

NET_DEV_COLUMNS = 17
NET_DEV_RX_COLUMN = 1
NET_DEV_TX_COLUMN = 9


def parse_uptime(output: str) -> Optional[float]:
    """Return uptime seconds from ``/proc/uptime`` output."""
    parts = output.split()
    if len(parts) != 2:
        _LOGGER.debug("Unexpected uptime output: %r", output[:200])
        return None
    value = safe_float(parts[0])
    if value is None or not math.isfinite(value) or value < 0:
        return None
    return value


def parse_hostname(output: str) -> Optional[str]:
    hostname = output.rstrip()
    return hostname or None


def parse_loadavg(output: str) -> Optional[LoadAverage]:
    """Parse ``/proc/loadavg``: three loads, ``running/total`` and the last pid."""
    parts = output.split()
    if len(parts) != 5:
        _LOGGER.debug("Unexpected loadavg output: %r", output[:200])
        return None
    procs = parts[3].split("/")
    if len(procs) != 2 or not all(p.isdigit() for p in procs):
        return None
    return LoadAverage(
        load1=parts[0],
        load5=parts[1],
        load10=parts[2],
        running_procs=procs[0],
        total_procs=procs[1],
    )


def parse_meminfo(output: str) -> MemoryInfo:
    """Collect the known ``/proc/meminfo`` keys, converted from KiB to bytes."""
    memory = MemoryInfo()
    for line in output.splitlines():
        parts = line.split()
        if len(parts) != 3:
            continue
        attr = MEMINFO_KEYS.get(parts[0])
        if attr is None:
            continue
        value = safe_int(parts[1])
        if value is None:
            continue
        setattr(memory, attr, value * 1024)
    return memory


class DfState(enum.Enum):
    READY = "ready"
    AWAITING_CONTINUATION = "awaiting_continuation"


class DfLineMachine:
    """Recognise filesystem rows in ``df -B1`` output.

    ``df`` prints long device names on a line of their own and the numbers on
    the next line, which then has one column less. Other implementations keep
    everything on one line. The machine accepts both shapes.
    """

    def __init__(self, prefixes: Tuple[str, ...] = DEVICE_PREFIXES) -> None:
        self._prefixes = prefixes
        self.state = DfState.READY

    def feed(self, line: str) -> Optional[FilesystemInfo]:
        """Consume one line and return a filesystem when it completes a row."""
        parts = line.split()
        is_device = bool(parts) and parts[0].startswith(self._prefixes)

        if self.state is DfState.AWAITING_CONTINUATION:
            self.state = DfState.READY
            if len(parts) == 5:
                return self._build(parts, offset=1)

        if len(parts) == 1 and is_device:
            self.state = DfState.AWAITING_CONTINUATION
            return None
        if len(parts) == 6 and is_device:
            return self._build(parts, offset=0)
        return None

    @staticmethod
    def _build(parts: List[str], offset: int) -> Optional[FilesystemInfo]:
        # columns: [device] size used available use% mountpoint
        used = safe_int(parts[2 - offset])
        free = safe_int(parts[3 - offset])
        if used is None or free is None:
            return None
        return FilesystemInfo(mount_point=parts[5 - offset], used=used, free=free)


def parse_filesystems(output: str) -> List[FilesystemInfo]:
    machine = DfLineMachine()
    filesystems: List[FilesystemInfo] = []
    for line in output.splitlines():
        info = machine.feed(line)
        if info is not None:
            filesystems.append(info)
    return filesystems


def parse_addresses(output: str) -> List[Tuple[str, str, str]]:
    """Return ``(interface, family, address)`` tuples from ``ip -o addr``.

    The address keeps its prefix length, e.g. ``10.0.0.5/24``.
    """
    records: List[Tuple[str, str, str]] = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 4 or fields[2] not in (INET, INET6):
            continue
        records.append((fields[1], fields[2], fields[3]))
    return records


def parse_net_dev(output: str) -> Dict[str, Tuple[int, int]]:
    """Return ``{interface: (rx_bytes, tx_bytes)}`` from ``/proc/net/dev``."""
    counters: Dict[str, Tuple[int, int]] = {}
    for line in output.splitlines():
        parts = line.split()
        if len(parts) != NET_DEV_COLUMNS:
            continue
        name = parts[0].rstrip(":")
        rx = safe_int(parts[NET_DEV_RX_COLUMN])
        tx = safe_int(parts[NET_DEV_TX_COLUMN])
        if rx is None or tx is None:
            _LOGGER.debug("Skipping malformed /proc/net/dev line: %r", line)
            continue
        counters[name] = (rx, tx)
    return counters


def parse_cpu(output: str) -> Optional[CpuRawSample]:
    """Read the aggregate ``cpu`` line of ``/proc/stat``.

    Values are assigned by position; a non-numeric token leaves its field at
    zero and parsing continues with the next position.
    """
    for line in output.splitlines():
        fields = line.split()
        if not fields or fields[0] != "cpu":
            continue
        values: Dict[str, int] = {}
        for name, token in zip(CPU_FIELDS, fields[1:]):
            value = safe_int(token)
            if value is not None:
                values[name] = value
        return CpuRawSample(**values)
    return None
