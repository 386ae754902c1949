"""
Structured base exception for the site_stats package.

Corrupt or missing counters are never reported through exceptions; this type
only covers configuration and collaborator failures that callers must see.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class SiteStatsError(Exception):
    """Represents a structured site statistics error with a normalized code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining code and message."""
        return f"{self.code.value}: {self.message}"


__all__ = ["SiteStatsError"]
