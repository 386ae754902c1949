"""
Normalized site statistics error codes (taxonomy).

Defines the `ErrorCode` enumeration used by the site_stats error types.
Values are lowercase snake_case and are considered a stable public contract
for logging.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    VALIDATION = "validation"
    QUEUE_UNAVAILABLE = "queue_unavailable"


__all__ = ["ErrorCode"]
