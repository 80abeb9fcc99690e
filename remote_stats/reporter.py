"""Terminal dashboard for a :class:`~remote_stats.models.Snapshot`."""
from __future__ import annotations

from typing import Iterable, Optional, Tuple, Union

from rich.console import Console
from rich.text import Text

from .models import Snapshot

KIB = 1024
MIB = KIB * 1024
GIB = MIB * 1024

TITLE_STYLE = "bright_yellow"
VALUE_STYLE = "bold bright_white"
HOST_STYLE = "bold bright_green"
UPTIME_STYLE = "bold bright_cyan"
INDENT = "    "

Part = Union[str, Tuple[str, str]]


def format_bytes(value: Union[int, float]) -> str:
    """Render a byte count in the largest base-1024 unit it fills."""
    if value < KIB:
        return f"{int(value)} bytes"
    if value < MIB:
        return f"{value / KIB:.2f} KiB"
    if value < GIB:
        return f"{value / MIB:.2f} MiB"
    return f"{value / GIB:.2f} GiB"


def format_rate(value: float) -> str:
    return f"{format_bytes(value)}/s"


def format_uptime(seconds: float) -> str:
    """Format seconds as ``1d 2h 3m 4.50s``, leaving out empty units."""
    seconds = round(max(0.0, seconds), 2)
    days, remainder = divmod(seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if days > 0:
        parts.append(f"{int(days)}d")
    if hours > 0:
        parts.append(f"{int(hours)}h")
    if minutes > 0:
        parts.append(f"{int(minutes)}m")
    parts.append(f"{secs:.2f}s")
    return " ".join(parts)


def _percent(value: float) -> str:
    return f"{value:.1f}%"


def _line(text: Text, *parts: Part) -> None:
    text.append(INDENT)
    for part in parts:
        if isinstance(part, tuple):
            text.append(part[0], style=part[1])
        else:
            text.append(part)
    text.append("\n")


def _title(text: Text, title: str) -> None:
    text.append("\n")
    text.append(title, style=TITLE_STYLE)
    text.append("\n")


def _value(value: str) -> Tuple[str, str]:
    return (value, VALUE_STYLE)


def _cpu_parts(snapshot: Snapshot) -> Iterable[Part]:
    cpu = snapshot.cpu
    labels = [
        (cpu.user, "user"),
        (cpu.system, "sys"),
        (cpu.nice, "nice"),
        (cpu.idle, "idle"),
        (cpu.iowait, "iowait"),
        (cpu.irq, "hardirq"),
        (cpu.soft_irq, "softirq"),
        (cpu.steal, "steal"),
        (cpu.guest, "guest"),
    ]
    for index, (value, label) in enumerate(labels):
        if index:
            yield ", "
        yield _value(_percent(value))
        yield f" {label}"


def render(snapshot: Snapshot) -> Text:
    """Build the dashboard text for *snapshot*."""
    text = Text()
    text.append(snapshot.hostname or "unknown host", style=HOST_STYLE)
    text.append(" up ")
    text.append(format_uptime(snapshot.uptime), style=UPTIME_STYLE)
    text.append("\n")

    _title(text, "Load:")
    _line(text, _value(f"{snapshot.load1} {snapshot.load5} {snapshot.load10}".strip()))

    _title(text, "CPU:")
    _line(text, *_cpu_parts(snapshot))

    _title(text, "Processes:")
    _line(
        text,
        _value(snapshot.running_procs or "0"),
        " running of ",
        _value(snapshot.total_procs or "0"),
        " total",
    )

    _title(text, "Memory:")
    _line(text, "free = ", _value(format_bytes(snapshot.mem_free)))
    _line(text, "used = ", _value(format_bytes(snapshot.mem_used)))
    _line(text, "buffers = ", _value(format_bytes(snapshot.mem_buffers)))
    _line(text, "cached = ", _value(format_bytes(snapshot.mem_cached)))
    _line(
        text,
        "swap = ",
        _value(format_bytes(snapshot.swap_free)),
        " free of ",
        _value(format_bytes(snapshot.swap_total)),
    )

    _title(text, "Filesystems:")
    for fs in snapshot.filesystems:
        _line(
            text,
            f"{fs.mount_point}: ",
            _value(format_bytes(fs.free)),
            " free of ",
            _value(format_bytes(fs.total)),
        )

    _title(text, "Network Interfaces:")
    for name, info in snapshot.interfaces.items():
        addresses = ", ".join(a for a in (info.ipv4, info.ipv6) if a)
        _line(text, _value(name), f" - {addresses}" if addresses else "")
        _line(
            text,
            "rx = ",
            _value(format_bytes(info.rx)),
            f" ({format_rate(info.rx_rate)})",
            ", tx = ",
            _value(format_bytes(info.tx)),
            f" ({format_rate(info.tx_rate)})",
        )

    return text


class Reporter:
    """Print snapshots to a rich console, one frame per tick."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def show(self, snapshot: Snapshot, clear: bool = True) -> None:
        if clear:
            self.console.clear()
        self.console.print(render(snapshot), end="")
