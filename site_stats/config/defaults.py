"""site_stats.config.defaults
==========================

Central place for small, stable default values used across the site_stats
package. These defaults can be overridden via environment variables or an
external configuration file, but provide sensible fallbacks for local
development and tests.

Module Purpose
--------------
- Provide a single import location for conservative default constants (no I/O).
- Keep the stats and persistence layers free of magic literals.

Imports nothing from other site_stats packages; only plain constants live here.
"""

from __future__ import annotations

# ---- Counters ----

# Fixed key of the single logical site_stats row.
SITE_STATS_ROW_ID = 1
# Upper bound accepted by the sanity check for any tracked counter.
SANE_COUNTER_MAX = 2_000_000_000
# Value written by very old schemas into ss_total_pages before it was tracked.
LEGACY_PAGES_SENTINEL = -1

# ---- Article counting ----
DEFAULT_ARTICLE_COUNT_METHOD = "link"
# Namespaces whose pages count as articles.
DEFAULT_CONTENT_NAMESPACES = [0]

# ---- Active users ----
DEFAULT_ACTIVE_USER_DAYS = 30
# rc_type value for changes imported from an external source.
RC_EXTERNAL = 5

# ---- Read-through cache TTLs (seconds) ----
TTL_HOUR = 3600
TTL_PROC_LONG = 30
DEFAULT_CACHE_PREFIX = "site_stats"

# ---- SQLite config (infrastructure) ----
# Standard busy timeout to mitigate lock contention (milliseconds).
SQLITE_BUSY_TIMEOUT_MS = 5000
# Journal and sync mode optimized for local development and light concurrency.
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"


__all__ = [
    # Counters
    "SITE_STATS_ROW_ID",
    "SANE_COUNTER_MAX",
    "LEGACY_PAGES_SENTINEL",
    # Articles
    "DEFAULT_ARTICLE_COUNT_METHOD",
    "DEFAULT_CONTENT_NAMESPACES",
    # Active users
    "DEFAULT_ACTIVE_USER_DAYS",
    "RC_EXTERNAL",
    # Cache
    "TTL_HOUR",
    "TTL_PROC_LONG",
    "DEFAULT_CACHE_PREFIX",
    # SQLite
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_JOURNAL_MODE",
    "SQLITE_SYNCHRONOUS",
]
