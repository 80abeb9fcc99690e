"""Data models for remote-stats."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import List, Optional

from .cpu_tracker import CpuDeltaTracker, CpuInfo
from .interfaces import InterfaceRegistry


@dataclass
class FilesystemInfo:
    """Usage of one mounted filesystem, in bytes."""

    mount_point: str
    used: int
    free: int

    @property
    def total(self) -> int:
        return self.used + self.free


@dataclass
class LoadAverage:
    """Parsed ``/proc/loadavg`` figures, kept as the remote printed them."""

    load1: str
    load5: str
    load10: str
    running_procs: str
    total_procs: str


@dataclass
class MemoryInfo:
    """Byte counts read from ``/proc/meminfo``.

    ``None`` means the key was absent from the report.
    """

    mem_total: Optional[int] = None
    mem_free: Optional[int] = None
    mem_buffers: Optional[int] = None
    mem_cached: Optional[int] = None
    swap_total: Optional[int] = None
    swap_free: Optional[int] = None


@dataclass
class Snapshot:
    """Everything currently known about the remote host.

    A single instance is carried across sampling ticks; every pass updates the
    fields it managed to read and leaves the others at their last value.
    """

    uptime: float = 0.0
    hostname: str = ""
    load1: str = ""
    load5: str = ""
    load10: str = ""
    running_procs: str = ""
    total_procs: str = ""
    mem_total: int = 0
    mem_free: int = 0
    mem_buffers: int = 0
    mem_cached: int = 0
    swap_total: int = 0
    swap_free: int = 0
    filesystems: List[FilesystemInfo] = field(default_factory=list)
    interfaces: InterfaceRegistry = field(default_factory=InterfaceRegistry)
    cpu_tracker: CpuDeltaTracker = field(default_factory=CpuDeltaTracker)
    cpu: CpuInfo = field(default_factory=CpuInfo)

    @property
    def mem_used(self) -> int:
        """Memory not free, not buffers and not page cache."""
        used = self.mem_total - self.mem_free - self.mem_buffers - self.mem_cached
        return max(0, used)

    def apply_load(self, load: LoadAverage) -> None:
        self.load1 = load.load1
        self.load5 = load.load5
        self.load10 = load.load10
        self.running_procs = load.running_procs
        self.total_procs = load.total_procs

    def apply_memory(self, memory: MemoryInfo) -> bool:
        """Copy the keys present in *memory*; return whether any changed."""
        updated = False
        for item in fields(memory):
            value = getattr(memory, item.name)
            if value is not None:
                setattr(self, item.name, value)
                updated = True
        return updated
