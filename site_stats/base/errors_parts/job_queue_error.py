"""
Job queue access failure.

Raised by job queue adapters when queue sizes cannot be read. The ancillary
``jobs()`` counter downgrades this error to a zero count; everything else
propagates it.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .site_stats_error import SiteStatsError


class JobQueueError(SiteStatsError):
    """Raised when the job queue backend cannot report its depth."""

    def __init__(self, message: str, raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.QUEUE_UNAVAILABLE, message=message, raw=raw)


__all__ = ["JobQueueError"]
