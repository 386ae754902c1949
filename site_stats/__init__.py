"""Site-wide statistics counters with a self-healing, context-owned cache.

Typical use::

    from site_stats import build_container

    with build_container({"db_path": "wiki.db"}) as container:
        stats = container.stats()
        print(stats.articles(), stats.edits())
"""

from .config import SiteStatsSettings, get_settings
from .di import SiteStatsContainer, build_container
from .stats import AncillaryCounters, StatsCache, StatsRecomputer, is_sane

__all__ = [
    "SiteStatsSettings",
    "get_settings",
    "SiteStatsContainer",
    "build_container",
    "AncillaryCounters",
    "StatsCache",
    "StatsRecomputer",
    "is_sane",
]
