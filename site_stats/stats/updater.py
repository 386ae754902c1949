"""Incremental writes to the counters row.

``StatsUpdate`` applies counter deltas (e.g. +1 edit, +1 page) without a full
recount. A zero-valued update is also how an outdated row is migrated: it
creates the row when missing and turns NULL or negative counters into zero.

``update_active_users`` refreshes ``ss_active_users``, the one counter a full
recount does not cover.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, fields
from typing import Dict, List, Optional

from ..base.logging import LogContext, get_logger, log_event
from ..config.defaults import RC_EXTERNAL, SITE_STATS_ROW_ID
from ..config.settings import SiteStatsSettings
from ..persistence.interfaces.repos import DatabaseHandles, IDatabase

logger = get_logger(__name__)

_SECONDS_PER_DAY = 24 * 3600

# Delta field -> persisted column
_DELTA_COLUMNS: Dict[str, str] = {
    "edits": "ss_total_edits",
    "articles": "ss_good_articles",
    "pages": "ss_total_pages",
    "users": "ss_users",
    "images": "ss_images",
}


@dataclass(frozen=True)
class StatsUpdate:
    """Pending counter deltas; each may be negative."""

    edits: int = 0
    articles: int = 0
    pages: int = 0
    users: int = 0
    images: int = 0

    def merge(self, other: "StatsUpdate") -> "StatsUpdate":
        """Return one update carrying the sum of both sets of deltas."""
        return StatsUpdate(
            **{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)}
        )

    def is_noop(self) -> bool:
        return all(getattr(self, f.name) == 0 for f in fields(self))

    def do_update(self, db: IDatabase) -> None:
        """Apply the deltas to row 1 of ``site_stats`` on ``db``.

        A missing row is created from the (non-negative part of the) deltas.
        Counters never drop below zero; NULL counts as zero.
        """
        values: Dict[str, int] = {"ss_row_id": SITE_STATS_ROW_ID}
        assignments: List[str] = []
        for name, column in _DELTA_COLUMNS.items():
            delta = int(getattr(self, name))
            values[column] = max(delta, 0)
            assignments.append(f"{column} = MAX(COALESCE({column}, 0) + ({delta:d}), 0)")
        db.upsert("site_stats", values, ["ss_row_id"], assignments)
        log_event(
            logger,
            "stats.update.apply",
            LogContext(source=db.name),
            **{name: getattr(self, name) for name in _DELTA_COLUMNS},
        )


def count_active_users(
    db: IDatabase, active_user_days: int, now: Optional[float] = None
) -> int:
    """Count distinct registered users with a recent non-external action.

    Account creations are excluded since they would inflate the figure by
    every new sign-up.
    """
    moment = time.time() if now is None else now
    cutoff = db.timestamp(moment - active_user_days * _SECONDS_PER_DAY)
    value = db.select_field(
        "recentchanges",
        "COUNT(DISTINCT rc_user_text)",
        where=[
            "rc_type != ?",
            "rc_user != 0",
            "rc_log_type IS NULL OR rc_log_type != ?",
            "rc_timestamp >= ?",
        ],
        params=[RC_EXTERNAL, "newusers", cutoff],
    )
    return int(value or 0)


def update_active_users(
    handles: DatabaseHandles, settings: SiteStatsSettings, now: Optional[float] = None
) -> int:
    """Recount active users on the slow replica and store it on the primary."""
    active = count_active_users(handles.slow_replica, settings.active_user_days, now)
    handles.primary.update(
        "site_stats", {"ss_active_users": active}, {"ss_row_id": SITE_STATS_ROW_ID}
    )
    log_event(
        logger,
        "stats.active_users.update",
        LogContext(source=handles.slow_replica.name),
        active_users=active,
        days=settings.active_user_days,
    )
    return active


__all__ = ["StatsUpdate", "count_active_users", "update_active_users"]
