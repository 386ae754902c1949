"""Immutable snapshot of the site-wide counters row.

Purpose
-------
Carry one read of the ``site_stats`` row across the loader, validator and
cache without exposing driver row objects. Snapshots are replaced wholesale
on reload and never mutated.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` (frozen) for construction from driver rows.

Notes
-----
- Values are kept exactly as persisted. A snapshot may therefore hold
  negative, oversized, or ``None`` counters; judging them is the validator's
  job, not the model's.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from ...config.defaults import SITE_STATS_ROW_ID

# Snapshot field -> persisted column
COLUMN_MAP: Dict[str, str] = {
    "row_id": "ss_row_id",
    "total_edits": "ss_total_edits",
    "good_articles": "ss_good_articles",
    "total_pages": "ss_total_pages",
    "users": "ss_users",
    "active_users": "ss_active_users",
    "images": "ss_images",
}


class CountersSnapshot(BaseModel):
    """One point-in-time read of the site statistics counters.

    Attributes
    ----------
    row_id:
        Key of the single logical row (always ``1`` for well-formed data).
    total_edits, good_articles, total_pages, users, active_users, images:
        Counter values; ``None`` when the column is NULL.
    """

    model_config = ConfigDict(frozen=True)

    row_id: int = SITE_STATS_ROW_ID
    total_edits: Optional[int] = None
    good_articles: Optional[int] = None
    total_pages: Optional[int] = None
    users: Optional[int] = None
    active_users: Optional[int] = None
    images: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CountersSnapshot":
        """Build a snapshot from a row keyed by ``ss_*`` column names.

        Columns missing from ``row`` map to ``None``.
        """
        values = {field: row.get(column) for field, column in COLUMN_MAP.items()}
        if values["row_id"] is None:
            values.pop("row_id")
        return cls(**values)

    def to_row(self) -> Dict[str, Optional[int]]:
        """Return the snapshot keyed by persisted column names."""
        return {column: getattr(self, field) for field, column in COLUMN_MAP.items()}


__all__ = ["COLUMN_MAP", "CountersSnapshot"]
