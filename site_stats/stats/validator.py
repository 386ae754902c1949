"""Sanity check for counters snapshots.

A snapshot is sane when the cross-field ordering holds (edits >= pages >=
articles) and every counter filled by a full recount lies within
``[0, SANE_COUNTER_MAX]``. ``active_users`` is refreshed separately and is
not checked.
"""

from __future__ import annotations

from typing import Optional

from ..base.dto import CountersSnapshot
from ..config.defaults import SANE_COUNTER_MAX

CHECKED_FIELDS = ("total_edits", "good_articles", "total_pages", "users", "images")


def is_sane(snapshot: Optional[CountersSnapshot]) -> bool:
    """Return whether ``snapshot`` can be served as-is or should be rebuilt."""
    if snapshot is None:
        return False
    values = [getattr(snapshot, field) for field in CHECKED_FIELDS]
    if any(v is None for v in values):
        return False
    if snapshot.total_pages < snapshot.good_articles or snapshot.total_edits < snapshot.total_pages:
        return False
    # Underflow from bad decrements, or overflow
    return all(0 <= v <= SANE_COUNTER_MAX for v in values)


__all__ = ["CHECKED_FIELDS", "is_sane"]
