"""Unified site statistics error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``site_stats.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.site_stats_error import SiteStatsError
from .errors_parts.config_error import ConfigError
from .errors_parts.job_queue_error import JobQueueError

__all__ = ["ErrorCode", "SiteStatsError", "ConfigError", "JobQueueError"]
