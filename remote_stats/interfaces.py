"""Network interface registry merging addresses and traffic counters."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

INET = "inet"
INET6 = "inet6"


@dataclass
class NetInterfaceInfo:
    """Addresses and cumulative traffic of one interface."""

    ipv4: str = ""
    ipv6: str = ""
    rx: int = 0
    tx: int = 0
    rx_rate: float = 0.0
    tx_rate: float = 0.0


class InterfaceRegistry:
    """Interfaces seen on the remote host, keyed by name.

    Entries are created by address listings only and are never removed;
    counter updates for unknown names are ignored.
    """

    def __init__(self) -> None:
        self._interfaces: Dict[str, NetInterfaceInfo] = {}
        self._last_ts: Dict[str, float] = {}

    def __bool__(self) -> bool:
        return bool(self._interfaces)

    def __contains__(self, name: object) -> bool:
        return name in self._interfaces

    def __iter__(self) -> Iterator[str]:
        return iter(self._interfaces)

    def __getitem__(self, name: str) -> NetInterfaceInfo:
        return self._interfaces[name]

    def items(self) -> Iterator[Tuple[str, NetInterfaceInfo]]:
        return iter(self._interfaces.items())

    def set_address(self, name: str, family: str, address: str) -> NetInterfaceInfo:
        """Record *address* for *family* on *name*, creating the entry if needed."""
        if family not in (INET, INET6):
            raise ValueError(f"unknown address family: {family}")
        info = self._interfaces.get(name)
        if info is None:
            info = self._interfaces[name] = NetInterfaceInfo()
        if family == INET:
            info.ipv4 = address
        else:
            info.ipv6 = address
        return info

    def update_counters(
        self, name: str, rx: int, tx: int, now: Optional[float] = None
    ) -> bool:
        """Update traffic counters of a known interface.

        Returns ``False`` (and changes nothing) when *name* is not registered.
        Rates in bytes/s are derived from the previous counters of the same
        interface; the first observation yields zero rates.
        """
        info = self._interfaces.get(name)
        if info is None:
            return False
        if now is None:
            now = time.time()
        last_ts = self._last_ts.get(name)
        rx_rate = tx_rate = 0.0
        if last_ts is not None:
            dt = max(1e-6, now - last_ts)
            rx_rate = max(0.0, (rx - info.rx) / dt)
            tx_rate = max(0.0, (tx - info.tx) / dt)
        info.rx = rx
        info.tx = tx
        info.rx_rate = rx_rate
        info.tx_rate = tx_rate
        self._last_ts[name] = now
        return True
