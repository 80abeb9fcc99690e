"""Utility helpers for remote-stats."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional


def resolve_private_key_path(key: Optional[str]) -> Optional[str]:
    """Return an absolute path for an SSH private key.

    Keys may be provided as absolute paths, paths relative to the current
    working directory, or with a leading ``~`` to refer to the user's home.
    ``None`` or empty values pass through unchanged.
    """

    if not key:
        return None

    path = Path(key).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    return str(path)


def safe_int(value: Any) -> Optional[int]:
    """Return *value* as a non-negative int or ``None`` when conversion fails."""

    try:
        if value is None:
            return None
        result = int(value)
    except (TypeError, ValueError):
        return None
    if result < 0:
        return None
    return result


def safe_float(value: Any) -> Optional[float]:
    """Return *value* as float or ``None`` when conversion fails."""

    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None
