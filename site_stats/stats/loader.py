"""Single-row read of the persisted counters."""

from __future__ import annotations

from typing import Optional

from ..base.dto import COLUMN_MAP, CountersSnapshot
from ..persistence.interfaces.repos import IDatabase

SITE_STATS_TABLE = "site_stats"
SITE_STATS_COLUMNS = tuple(COLUMN_MAP.values())


def load_snapshot(db: IDatabase) -> Optional[CountersSnapshot]:
    """Read the counters row from ``db``; ``None`` when no row exists.

    No validation and no retries: data-access errors propagate.
    """
    row = db.select_row(SITE_STATS_TABLE, SITE_STATS_COLUMNS)
    if row is None:
        return None
    return CountersSnapshot.from_row(row)


__all__ = ["SITE_STATS_TABLE", "SITE_STATS_COLUMNS", "load_snapshot"]
