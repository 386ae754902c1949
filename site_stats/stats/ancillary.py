"""Point counts that live beside the counters row.

These are plain memoized queries, not part of the self-healing snapshot:

- ``jobs()``: total depth of all job queues.
- ``pages_in_ns(ns)``: page count of one namespace.
- ``number_in_group(group)``: members of a user group, via the read-through
  cache.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..base.errors import JobQueueError
from ..base.logging import LogContext, get_logger, log_event
from ..cache.read_through import make_key
from ..config.defaults import TTL_HOUR, TTL_PROC_LONG
from ..config.settings import SiteStatsSettings
from ..persistence.interfaces.repos import DatabaseHandles, IJobQueueGroup, IReadThroughCache
from .state import StatsCacheState

logger = get_logger(__name__)


class AncillaryCounters:
    """Memoized queue, namespace and group counts.

    Parameters
    ----------
    handles:
        Handles to count from (the replica is used).
    settings:
        Supplies the group-expiry switch and the cache key prefix.
    cache:
        Read-through cache for group counts.
    job_queue:
        Reports queue depths.
    state:
        Memo storage; pass the ``StatsCache`` state so ``unload()`` clears it.
    """

    def __init__(
        self,
        handles: DatabaseHandles,
        settings: SiteStatsSettings,
        cache: IReadThroughCache,
        job_queue: IJobQueueGroup,
        state: Optional[StatsCacheState] = None,
    ) -> None:
        self.handles = handles
        self.settings = settings
        self.cache = cache
        self.job_queue = job_queue
        self.state = state if state is not None else StatsCacheState()

    def jobs(self) -> int:
        """Total queued jobs across all queues; ``0`` if the queue is unreachable.

        A total of exactly 1 is reported as 0: an empty queue still answers
        the size query with a single phantom row, and callers rely on 0
        meaning "empty".
        """
        if self.state.jobs is None:
            try:
                total = sum(self.job_queue.get_queue_sizes().values())
            except JobQueueError as e:
                log_event(logger, "stats.jobs.error", level=logging.WARNING, error=str(e))
                total = 0
            if total == 1:
                total = 0
            self.state.jobs = total
        return self.state.jobs

    def pages_in_ns(self, ns: int) -> int:
        if ns not in self.state.page_counts:
            self.state.page_counts[ns] = int(
                self.handles.replica.select_field("page", "COUNT(*)", {"page_namespace": ns}) or 0
            )
        return self.state.page_counts[ns]

    def number_in_group(self, group: str) -> int:
        """Members of ``group`` whose membership has not expired.

        Cached for an hour in the shared tier and briefly per process.
        """
        db = self.handles.replica

        def compute(_old_value: Optional[int]) -> int:
            if self.settings.disable_user_group_expiry:
                where, params = [], []
            else:
                where, params = ["ug_expiry IS NULL OR ug_expiry >= ?"], [db.timestamp()]
            log_event(
                logger,
                "stats.group_count.compute",
                LogContext(source=db.name),
                level=logging.DEBUG,
                group=group,
            )
            return int(
                db.select_field("user_groups", "COUNT(*)", {"ug_group": group}, where=where, params=params)
                or 0
            )

        return self.cache.get_with_set_callback(
            make_key(self.settings.cache_prefix, "groupcounts", group),
            TTL_HOUR,
            compute,
            process_ttl=TTL_PROC_LONG,
        )


__all__ = ["AncillaryCounters"]
