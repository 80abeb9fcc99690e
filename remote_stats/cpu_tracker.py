"""Turn cumulative ``/proc/stat`` counters into CPU utilisation."""
from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from typing import Optional

CPU_FIELDS = (
    "user",
    "nice",
    "system",
    "idle",
    "iowait",
    "irq",
    "soft_irq",
    "steal",
    "guest",
)


@dataclass(frozen=True)
class CpuRawSample:
    """Cumulative jiffy counters of the aggregate ``cpu`` line."""

    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    soft_irq: int = 0
    steal: int = 0
    guest: int = 0

    @property
    def total(self) -> int:
        return sum(getattr(self, name) for name in CPU_FIELDS)


@dataclass(frozen=True)
class CpuInfo:
    """Share of the sampling interval spent in each state, in percent."""

    user: float = 0.0
    nice: float = 0.0
    system: float = 0.0
    idle: float = 0.0
    iowait: float = 0.0
    irq: float = 0.0
    soft_irq: float = 0.0
    steal: float = 0.0
    guest: float = 0.0

    def total(self) -> float:
        return sum(getattr(self, item.name) for item in fields(self))


class TrackerState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    PRIMED = "primed"


class CpuDeltaTracker:
    """Keep the previous raw CPU sample to calculate utilisation."""

    def __init__(self) -> None:
        self._previous: Optional[CpuRawSample] = None

    @property
    def state(self) -> TrackerState:
        if self._previous is None:
            return TrackerState.UNINITIALIZED
        return TrackerState.PRIMED

    @property
    def previous(self) -> Optional[CpuRawSample]:
        return self._previous

    def compute(self, current: CpuRawSample) -> Optional[CpuInfo]:
        """Store *current* and return utilisation since the last sample.

        The first sample only primes the tracker and returns ``None``. When
        the counters did not advance at all the result is all zeros.
        """
        previous = self._previous
        self._previous = current
        if previous is None:
            return None

        total_delta = current.total - previous.total
        if total_delta <= 0:
            return CpuInfo()
        return CpuInfo(
            **{
                name: (getattr(current, name) - getattr(previous, name)) / total_delta * 100.0
                for name in CPU_FIELDS
            }
        )
