"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `site_stats.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .site_stats_error import SiteStatsError
from .config_error import ConfigError
from .job_queue_error import JobQueueError

__all__ = ["ErrorCode", "SiteStatsError", "ConfigError", "JobQueueError"]
