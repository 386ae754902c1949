"""Context-owned cache of the site-wide counters.

Purpose
-------
Serve ``edits()``, ``articles()``, ``pages()``, ``users()``,
``active_users()`` and ``images()`` from one lazily loaded snapshot. The
first accessor call loads it; later calls make no data-access calls until
``unload()`` or ``recache()``.

Loading walks the escalation tiers (see ``site_stats.stats.tiers``) and
stops at the first sane snapshot. When no tier produces one, the last
snapshot is served anyway and a warning is logged: a best-effort number is
preferred over failing the read.

Failure semantics
-----------------
Missing or insane counters never raise. Data-access errors from the handles
propagate unchanged.

Concurrency
-----------
No locking. One ``StatsCache`` belongs to one request/session context.
"""

from __future__ import annotations

import logging
import warnings
from typing import Optional, Sequence

from ..base.dto import CountersSnapshot
from ..base.logging import LogContext, get_logger, log_event
from ..config.defaults import LEGACY_PAGES_SENTINEL
from ..config.settings import SiteStatsSettings
from ..persistence.interfaces.repos import DatabaseHandles
from .loader import load_snapshot
from .state import StatsCacheState
from .tiers import LoadTier, default_tiers
from .updater import StatsUpdate
from .validator import is_sane

logger = get_logger(__name__)


class StatsCache:
    """Lazily loaded, self-healing counters snapshot.

    Parameters
    ----------
    handles:
        Primary and replica handles to read from.
    settings:
        Supplies ``miser_mode`` and the recount configuration.
    state:
        State object to populate; share it with ``AncillaryCounters`` so that
        ``unload()`` also clears their memoized values.
    tiers:
        Ordered escalation tiers; defaults to replica, primary, recompute.
    """

    def __init__(
        self,
        handles: DatabaseHandles,
        settings: SiteStatsSettings,
        state: Optional[StatsCacheState] = None,
        tiers: Optional[Sequence[LoadTier]] = None,
    ) -> None:
        self.handles = handles
        self.settings = settings
        self.state = state if state is not None else StatsCacheState()
        self.tiers = tuple(tiers) if tiers is not None else default_tiers()

    @property
    def loaded(self) -> bool:
        return self.state.loaded

    @property
    def snapshot(self) -> Optional[CountersSnapshot]:
        return self.state.snapshot

    def unload(self) -> None:
        """Forget everything loaded; the next accessor call reads again."""
        self.state.reset()

    def recache(self) -> None:
        self.load(recache=True)

    def load(self, recache: bool = False) -> None:
        """Populate the snapshot unless it is already loaded.

        Parameters
        ----------
        recache:
            Reload even when a snapshot is already cached.
        """
        if self.state.loaded and not recache:
            return

        snapshot = self.load_and_lazy_init()

        if _needs_schema_update(snapshot):
            # Row or column missing, or still holding the legacy -1 placeholder.
            log_event(
                logger,
                "stats.schema.migrate",
                LogContext(source=self.handles.primary.name),
                total_pages=snapshot.total_pages if snapshot is not None else None,
            )
            StatsUpdate().do_update(self.handles.primary)
            snapshot = load_snapshot(self.handles.replica)

        self.state.snapshot = snapshot
        self.state.loaded = True

    def load_and_lazy_init(self) -> Optional[CountersSnapshot]:
        """Run the escalation tiers and return the best snapshot found."""
        snapshot: Optional[CountersSnapshot] = None
        for tier in self.tiers:
            if not tier.enabled(self.settings):
                log_event(logger, "stats.load.skip", LogContext(tier=tier.name), level=logging.DEBUG)
                continue
            log_event(logger, "stats.load.tier", LogContext(tier=tier.name), level=logging.DEBUG)
            snapshot = tier.load(self.handles, self.settings)
            if is_sane(snapshot):
                return snapshot
            log_event(
                logger,
                "stats.load.insane",
                LogContext(tier=tier.name),
                level=logging.DEBUG,
                absent=snapshot is None,
            )

        log_event(
            logger,
            "stats.load.nonsensical",
            level=logging.WARNING,
            tiers=[t.name for t in self.tiers if t.enabled(self.settings)],
            snapshot=snapshot.to_row() if snapshot is not None else None,
        )
        return snapshot

    def _field(self, name: str) -> int:
        self.load()
        snapshot = self.state.snapshot
        if snapshot is None:
            return 0
        value = getattr(snapshot, name)
        return 0 if value is None else value

    def edits(self) -> int:
        return self._field("total_edits")

    def articles(self) -> int:
        return self._field("good_articles")

    def pages(self) -> int:
        return self._field("total_pages")

    def users(self) -> int:
        return self._field("users")

    def active_users(self) -> int:
        """Recently active users; ``0`` until ``update_active_users`` has run.

        A full recount does not fill this counter, so a rebuilt row still
        holds the never-computed ``-1`` column default.
        """
        return max(self._field("active_users"), 0)

    def images(self) -> int:
        return self._field("images")

    def views(self) -> int:
        """Total page views. No longer tracked; always ``0``.

        .. deprecated::
            Kept only so that old callers do not break.
        """
        warnings.warn(
            "StatsCache.views() is deprecated; page views are no longer tracked",
            DeprecationWarning,
            stacklevel=2,
        )
        return 0


def _needs_schema_update(snapshot: Optional[CountersSnapshot]) -> bool:
    if snapshot is None:
        return True
    return snapshot.total_pages is None or snapshot.total_pages == LEGACY_PAGES_SENTINEL


__all__ = ["StatsCache"]
