"""Configuration validation error."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .site_stats_error import SiteStatsError


class ConfigError(SiteStatsError):
    """Raised when merged settings fail validation."""

    def __init__(self, message: str, raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message, raw=raw)


__all__ = ["ConfigError"]
