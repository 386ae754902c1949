"""Data transfer objects shared across the site statistics layers."""

from .counters_snapshot import COLUMN_MAP, CountersSnapshot

__all__ = ["COLUMN_MAP", "CountersSnapshot"]
