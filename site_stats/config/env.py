"""site_stats.config.env
=====================

Centralized environment variable mapping for site statistics settings.

Purpose
-------
- Provide a single source of truth mapping setting names to the environment
  variables that may override them.
- Offer small parsing helpers so that boolean and list-valued settings are
  read the same way everywhere.

Failure Modes
-------------
- Unset variables are skipped; the caller keeps the lower-priority value.
- Parsing problems are left to the settings model, which reports them as
  ``ConfigError``.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

ENV_PREFIX = "SITESTATS_"

# Setting name -> env var suffix
ENV_FIELD_MAP: Dict[str, str] = {
    "article_count_method": "ARTICLE_COUNT_METHOD",
    "miser_mode": "MISER_MODE",
    "disable_user_group_expiry": "DISABLE_USER_GROUP_EXPIRY",
    "active_user_days": "ACTIVE_USER_DAYS",
    "content_namespaces": "CONTENT_NAMESPACES",
    "cache_prefix": "CACHE_PREFIX",
    "db_path": "DB_PATH",
    "replica_db_path": "REPLICA_DB_PATH",
    "vslow_db_path": "VSLOW_DB_PATH",
}

CONFIG_FILE_ENV = f"{ENV_PREFIX}CONFIG_FILE"
LOG_LEVEL_ENV = f"{ENV_PREFIX}LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def parse_bool(value: str) -> Any:
    """Return ``True``/``False`` for common spellings, else the raw string.

    Unknown spellings are passed through so validation can reject them with a
    proper message instead of silently coercing.
    """
    v = value.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    return value


def parse_int_list(value: str) -> List[str]:
    """Split a comma-separated list, dropping empty items."""
    return [part.strip() for part in value.split(",") if part.strip()]


_PARSERS = {
    "miser_mode": parse_bool,
    "disable_user_group_expiry": parse_bool,
    "content_namespaces": parse_int_list,
}


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Collect settings overrides from ``SITESTATS_*`` environment variables.

    Parameters
    ----------
    environ:
        Mapping to read from; defaults to ``os.environ``.

    Returns
    -------
    Dict[str, Any]
        Setting name to raw (lightly parsed) value for every variable set.
    """
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}
    for field, suffix in ENV_FIELD_MAP.items():
        raw = env.get(f"{ENV_PREFIX}{suffix}")
        if raw is None:
            continue
        parser = _PARSERS.get(field)
        out[field] = parser(raw) if parser else raw
    return out


__all__ = [
    "ENV_PREFIX",
    "ENV_FIELD_MAP",
    "CONFIG_FILE_ENV",
    "LOG_LEVEL_ENV",
    "parse_bool",
    "parse_int_list",
    "env_overrides",
]
