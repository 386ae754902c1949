"""Escalation tiers tried in order when populating the counters cache.

Each tier produces a snapshot (possibly absent or insane). ``StatsCache``
walks the tiers in sequence and stops at the first sane result, so adding or
reordering tiers is a matter of passing a different sequence.

Default order:

1. ``ReplicaTier``: cheap read, usually enough.
2. ``PrimaryTier``: covers replica lag (e.g. the row was initialized
   moments ago, or the replica saw a decrement before the matching insert).
3. ``RecomputeTier``: full recount, then a primary read. Skipped in miser
   mode because of its cost.
"""

from __future__ import annotations

from typing import Optional, Protocol, Tuple, Type

from ..base.dto import CountersSnapshot
from ..config.settings import SiteStatsSettings
from ..persistence.interfaces.repos import DatabaseHandles
from .loader import load_snapshot
from .recomputer import StatsRecomputer


class LoadTier(Protocol):
    """One step of the replica -> primary -> recompute fallback chain."""

    name: str

    def enabled(self, settings: SiteStatsSettings) -> bool:
        ...

    def load(self, handles: DatabaseHandles, settings: SiteStatsSettings) -> Optional[CountersSnapshot]:
        ...


class ReplicaTier:
    name = "replica"

    def enabled(self, settings: SiteStatsSettings) -> bool:
        return True

    def load(self, handles: DatabaseHandles, settings: SiteStatsSettings) -> Optional[CountersSnapshot]:
        return load_snapshot(handles.replica)


class PrimaryTier:
    name = "primary"

    def enabled(self, settings: SiteStatsSettings) -> bool:
        return True

    def load(self, handles: DatabaseHandles, settings: SiteStatsSettings) -> Optional[CountersSnapshot]:
        return load_snapshot(handles.primary)


class RecomputeTier:
    """Rebuild the row from the replica's source tables, then read the primary.

    Normally the row is initialized at install time; imports into an empty
    schema and hand-built databases can leave it missing or broken.
    """

    name = "recompute"

    def __init__(self, recomputer: Type[StatsRecomputer] = StatsRecomputer) -> None:
        self.recomputer = recomputer

    def enabled(self, settings: SiteStatsSettings) -> bool:
        return not settings.miser_mode

    def load(self, handles: DatabaseHandles, settings: SiteStatsSettings) -> Optional[CountersSnapshot]:
        self.recomputer.do_all_and_commit(handles, settings, handles.replica)
        return load_snapshot(handles.primary)


def default_tiers() -> Tuple[LoadTier, ...]:
    return (ReplicaTier(), PrimaryTier(), RecomputeTier())


__all__ = [
    "LoadTier",
    "ReplicaTier",
    "PrimaryTier",
    "RecomputeTier",
    "default_tiers",
]
