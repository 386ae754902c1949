"""Typed settings model for the site statistics layer.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_dump()`` convenience.

Failure modes & side effects
----------------------------
- Pure data container: no I/O side effects. Construction through
  :func:`site_stats.config.get_settings` converts Pydantic validation errors
  into :class:`~site_stats.base.errors.ConfigError`.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .defaults import (
    DEFAULT_ACTIVE_USER_DAYS,
    DEFAULT_ARTICLE_COUNT_METHOD,
    DEFAULT_CACHE_PREFIX,
    DEFAULT_CONTENT_NAMESPACES,
)

ArticleCountMethod = Literal["any", "link", "comma"]


class SiteStatsSettings(BaseModel):
    """Settings consumed by the counters cache and its collaborators.

    Attributes
    ----------
    article_count_method:
        How ``articles()`` decides that a content page is an article:
        ``any`` counts every non-redirect content page, ``link`` requires the
        page to link somewhere, ``comma`` requires non-empty content.
    miser_mode:
        When set, the cache never falls back to a full recount of the source
        tables; insane counters are served as they are.
    disable_user_group_expiry:
        When set, group membership expiry is ignored by ``number_in_group``.
    active_user_days:
        Window (days) of recent activity that makes a user "active".
    content_namespaces:
        Namespace ids counted by ``articles()``.
    cache_prefix:
        Prefix for read-through cache keys.
    db_path / replica_db_path / vslow_db_path:
        SQLite files for the primary, replica and low-priority replica
        handles. Replica paths default to the primary path.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    article_count_method: ArticleCountMethod = DEFAULT_ARTICLE_COUNT_METHOD
    miser_mode: bool = False
    disable_user_group_expiry: bool = False
    active_user_days: int = Field(default=DEFAULT_ACTIVE_USER_DAYS, ge=0)
    content_namespaces: List[int] = Field(
        default_factory=lambda: list(DEFAULT_CONTENT_NAMESPACES)
    )
    cache_prefix: str = DEFAULT_CACHE_PREFIX
    db_path: Optional[str] = None
    replica_db_path: Optional[str] = None
    vslow_db_path: Optional[str] = None

    @field_validator("content_namespaces")
    @classmethod
    def _require_namespaces(cls, value: List[int]) -> List[int]:
        if not value:
            raise ValueError("at least one content namespace is required")
        return value


__all__ = ["ArticleCountMethod", "SiteStatsSettings"]
