"""Unified configuration layer for site statistics.

Goals
-----
* Centralize defaults (article counting method, miser mode, TTLs).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external JSON config file pointed to by SITESTATS_CONFIG_FILE
    3. Environment variables (e.g. SITESTATS_MISER_MODE)
    4. In-code overrides passed to helper
* Provide a single call site: ``get_settings(overrides)``.

External Config File (Optional)
-------------------------------
If SITESTATS_CONFIG_FILE is set to a path, it is read as a JSON object.
Structure example:

```
{
  "article_count_method": "comma",
  "miser_mode": true,
  "content_namespaces": [0, 100]
}
```

Public API
----------
* get_settings(overrides: dict | None = None) -> SiteStatsSettings
* reset_settings_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..base.errors import ConfigError
from .env import CONFIG_FILE_ENV, env_overrides
from .settings import ArticleCountMethod, SiteStatsSettings

_FILE_CACHE: Optional[Dict[str, Any]] = None


def _load_external_config() -> Dict[str, Any]:
    """Read the JSON config file once per process; missing file -> ``{}``.

    A file that exists but does not hold a JSON object raises ``ConfigError``
    so that a typo in deployment config is not silently ignored.
    """
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        _FILE_CACHE = {}
        return _FILE_CACHE
    p = Path(path).expanduser()
    if not p.exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in {p}: {e}", raw=e) from e
    if not isinstance(data, dict):
        raise ConfigError(f"{p} must contain a JSON object")
    _FILE_CACHE = data
    return data


def reset_settings_cache() -> None:
    """Forget the cached config file contents (tests and reloads)."""
    global _FILE_CACHE
    _FILE_CACHE = None


def get_settings(overrides: Optional[Dict[str, Any]] = None) -> SiteStatsSettings:
    """Return merged, validated settings.

    Merge order (later wins): defaults -> config file -> env vars -> overrides

    Raises
    ------
    ConfigError
        When the merged values fail validation.
    """
    cfg: Dict[str, Any] = {}
    cfg |= _load_external_config()
    cfg |= env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    try:
        return SiteStatsSettings(**cfg)
    except ValidationError as e:
        raise ConfigError(f"invalid site stats settings: {e}", raw=e) from e


__all__ = [
    "ArticleCountMethod",
    "SiteStatsSettings",
    "get_settings",
    "reset_settings_cache",
]
