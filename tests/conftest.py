from __future__ import annotations

from typing import Dict, List, Union

import pytest

from remote_stats import remote_commands
from remote_stats.ssh_executor import CommandExecutor, ExecError

UPTIME_OUTPUT = "93784.52 367123.04\n"
HOSTNAME_OUTPUT = "web01.example.com\n"
LOADAVG_OUTPUT = "0.10 0.20 0.30 3/50 1234\n"
MEMINFO_OUTPUT = (
    "MemTotal:        8048576 kB\n"
    "MemFree:         1024000 kB\n"
    "MemAvailable:    4096000 kB\n"
    "Buffers:          204800 kB\n"
    "Cached:          2048000 kB\n"
    "SwapCached:            0 kB\n"
    "SwapTotal:       2097148 kB\n"
    "SwapFree:        2097148 kB\n"
    "HugePages_Total:       0\n"
)
DF_OUTPUT = (
    "Filesystem                        1B-blocks        Used   Available Use% Mounted on\n"
    "udev                             4096000000           0  4096000000   0% /dev\n"
    "/dev/sda1                       51475068928 20000000000 28831313920  41% /\n"
    "/dev/mapper/ubuntu--vg-ubuntu--lv\n"
    "                               105089261568  5000000000 94704672768   6% /home\n"
    "tmpfs                             819200000     1000000   818200000   1% /run\n"
)
IP_ADDR_OUTPUT = (
    "1: lo    inet 127.0.0.1/8 scope host lo\\       valid_lft forever preferred_lft forever\n"
    "1: lo    inet6 ::1/128 scope host \\       valid_lft forever preferred_lft forever\n"
    "2: eth0    inet 10.0.0.5/24 brd 10.0.0.255 scope global eth0\\       valid_lft forever\n"
    "2: eth0    inet6 fe80::1/64 scope link \\       valid_lft forever preferred_lft forever\n"
)
NET_DEV_OUTPUT = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed\n"
    "    lo:  123456     100    0    0    0     0          0         0   123456     100    0    0    0     0       0          0\n"
    "  eth0: 9876543    5000    0    0    0     0          0         0  1234567    4000    0    0    0     0       0          0\n"
    " wlan0:    1000      10    0    0    0     0          0         0     2000      20    0    0    0     0       0          0\n"
)
STAT_OUTPUT_1 = (
    "cpu  100 0 50 800 10 5 5 0 0 0\n"
    "cpu0 50 0 25 400 5 2 3 0 0 0\n"
    "intr 12345\n"
)
STAT_OUTPUT_2 = (
    "cpu  200 10 100 1500 20 10 10 0 0 0\n"
    "cpu0 100 5 50 750 10 5 5 0 0 0\n"
    "intr 23456\n"
)

Output = Union[str, Exception]


class FakeExecutor(CommandExecutor):
    """Serve canned command output; unknown commands fail like a missing binary."""

    def __init__(self, outputs: Dict[str, Output]) -> None:
        self.outputs = dict(outputs)
        self.calls: List[str] = []
        self.connected = False
        self.closed = False

    def run(self, command: str) -> str:
        self.calls.append(command)
        result = self.outputs.get(command)
        if result is None:
            raise ExecError(f"{command}: command not found")
        if isinstance(result, Exception):
            raise result
        return result

    def connect(self) -> None:
        self.connected = True

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeExecutor":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def default_outputs() -> Dict[str, Output]:
    return {
        remote_commands.UPTIME: UPTIME_OUTPUT,
        remote_commands.HOSTNAME: HOSTNAME_OUTPUT,
        remote_commands.LOADAVG: LOADAVG_OUTPUT,
        remote_commands.MEMINFO: MEMINFO_OUTPUT,
        remote_commands.DISK_FREE: DF_OUTPUT,
        remote_commands.IP_ADDR[0]: IP_ADDR_OUTPUT,
        remote_commands.NET_DEV: NET_DEV_OUTPUT,
        remote_commands.CPU_STAT: STAT_OUTPUT_1,
    }


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor(default_outputs())
