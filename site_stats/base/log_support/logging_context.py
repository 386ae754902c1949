"""Structured logging context object for the counters cache.

This module defines :class:`LogContext`, a dataclass carrying the fields
common to cache events (which data source handle was read, which fallback
tier was running, plus extra metadata). ``to_dict`` merges the ``extra``
mapping and prunes ``None`` values for clean structured output.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for site statistics logging events."""

    source: Optional[str] = None
    tier: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
