"""remote-stats: live resource statistics of a remote Linux host over SSH."""
from __future__ import annotations

from .collector import SampleCollector, collect_once
from .models import Snapshot

__all__ = ["__version__", "SampleCollector", "Snapshot", "collect_once"]

__version__ = "0.1.0"
