"""Mutable per-context state shared by the counters cache and its helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..base.dto import CountersSnapshot


@dataclass
class StatsCacheState:
    """What one context has loaded so far.

    Attributes
    ----------
    snapshot:
        Currently cached counters, ``None`` when absent or not loaded.
    loaded:
        Whether ``StatsCache.load`` has completed since the last reset.
    jobs:
        Memoized queue depth, ``None`` until first computed.
    page_counts:
        Memoized namespace id -> page count.
    """

    snapshot: Optional[CountersSnapshot] = None
    loaded: bool = False
    jobs: Optional[int] = None
    page_counts: Dict[int, int] = field(default_factory=dict)

    def reset(self) -> None:
        self.snapshot = None
        self.loaded = False
        self.jobs = None
        self.page_counts.clear()


__all__ = ["StatsCacheState"]
