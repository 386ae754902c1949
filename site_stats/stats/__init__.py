"""Site counters: validation, loading, recount and the context cache.

Public surface re-exported for callers; see the individual modules for
details.
"""

from .ancillary import AncillaryCounters
from .cache import StatsCache
from .loader import load_snapshot
from .recomputer import StatsRecomputer
from .state import StatsCacheState
from .tiers import LoadTier, PrimaryTier, RecomputeTier, ReplicaTier, default_tiers
from .updater import StatsUpdate, count_active_users, update_active_users
from .validator import is_sane

__all__ = [
    "AncillaryCounters",
    "StatsCache",
    "load_snapshot",
    "StatsRecomputer",
    "StatsCacheState",
    "LoadTier",
    "PrimaryTier",
    "RecomputeTier",
    "ReplicaTier",
    "default_tiers",
    "StatsUpdate",
    "count_active_users",
    "update_active_users",
    "is_sane",
]
