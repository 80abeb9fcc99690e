"""Shell commands executed on the monitored host.

The parsers in :mod:`remote_stats.extractors` depend on the exact output of
these commands, so they are kept verbatim. ``df`` is asked for plain byte
counts (``-B1``) instead of human readable sizes.
"""
from __future__ import annotations

from typing import Tuple

UPTIME = "cat /proc/uptime"
HOSTNAME = "hostname -f"
LOADAVG = "cat /proc/loadavg"
MEMINFO = "cat /proc/meminfo"
DISK_FREE = "df -B1"
NET_DEV = "cat /proc/net/dev"
CPU_STAT = "cat /proc/stat"

# `ip` lives in /bin on most distributions and only in /sbin on some older ones.
IP_ADDR: Tuple[str, ...] = (
    "/bin/ip -o addr",
    "/sbin/ip -o addr",
)
