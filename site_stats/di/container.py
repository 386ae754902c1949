"""Composition root for the site statistics layer.

Goals:
- Centralize construction of handles, collaborators and the counters cache.
- Tie the cache lifetime to the container (one per request/session context)
  instead of module-level state.

Collaborators may be injected (e.g. a shared read-through cache tier, a
different job queue); anything not supplied is built from settings.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..cache import ReadThroughCache
from ..config import SiteStatsSettings, get_settings
from ..jobs import SqliteJobQueueGroup
from ..persistence.interfaces.repos import DatabaseHandles, IJobQueueGroup, IReadThroughCache
from ..persistence.sqlite import close_handles, open_handles
from ..stats import AncillaryCounters, StatsCache, StatsCacheState


class SiteStatsContainer:
    """Dependency injection container for one statistics context.

    Objects are created on first use and reused for the container's lifetime.
    """

    def __init__(
        self,
        settings: Optional[SiteStatsSettings] = None,
        *,
        handles: Optional[DatabaseHandles] = None,
        cache: Optional[IReadThroughCache] = None,
        job_queue: Optional[IJobQueueGroup] = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self._handles = handles
        self._owns_handles = handles is None
        self._cache = cache
        self._job_queue = job_queue
        self._singletons: Dict[str, Any] = {}

    def handles(self) -> DatabaseHandles:
        if self._handles is None:
            self._handles = open_handles(
                self.settings.db_path,
                self.settings.replica_db_path,
                self.settings.vslow_db_path,
            )
        return self._handles

    def state(self) -> StatsCacheState:
        if "state" not in self._singletons:
            self._singletons["state"] = StatsCacheState()
        return self._singletons["state"]

    def read_through_cache(self) -> IReadThroughCache:
        if self._cache is None:
            self._cache = ReadThroughCache()
        return self._cache

    def job_queue(self) -> IJobQueueGroup:
        if self._job_queue is None:
            self._job_queue = SqliteJobQueueGroup(self.handles().primary.conn)
        return self._job_queue

    def stats(self) -> StatsCache:
        """Return the counters cache for this context."""
        if "stats" not in self._singletons:
            self._singletons["stats"] = StatsCache(self.handles(), self.settings, state=self.state())
        return self._singletons["stats"]

    def ancillary(self) -> AncillaryCounters:
        if "ancillary" not in self._singletons:
            self._singletons["ancillary"] = AncillaryCounters(
                self.handles(),
                self.settings,
                self.read_through_cache(),
                self.job_queue(),
                state=self.state(),
            )
        return self._singletons["ancillary"]

    def close(self) -> None:
        """Drop cached objects and close connections this container opened."""
        self._singletons.clear()
        if self._owns_handles and self._handles is not None:
            close_handles(self._handles)
            self._handles = None

    def __enter__(self) -> "SiteStatsContainer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def build_container(overrides: Optional[Dict[str, Any]] = None) -> SiteStatsContainer:
    """Construct a container from merged settings plus ``overrides``."""
    return SiteStatsContainer(get_settings(overrides))


__all__ = ["SiteStatsContainer", "build_container"]
