"""Full recount of the site counters from the source tables.

Purpose
-------
Rebuild the ``site_stats`` row when it is missing or nonsensical. Each count
is an independent ``COUNT(*)`` style query; results are cached on the
instance and written back as one upserted row keyed by the fixed row id.

Failure semantics
-----------------
No retries. Any data-access error propagates to the caller. Running the
recount concurrently from several contexts is safe: every run upserts the
same single row and the last writer wins.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from ..base.logging import LogContext, get_logger, log_event
from ..config.defaults import SITE_STATS_ROW_ID
from ..config.settings import SiteStatsSettings
from ..persistence.interfaces.repos import DatabaseHandles, IDatabase
from .loader import SITE_STATS_TABLE
from .updater import update_active_users

logger = get_logger(__name__)

Source = Union[IDatabase, bool]


class StatsRecomputer:
    """Counts edits, articles, pages, users and files from scratch.

    Parameters
    ----------
    handles:
        Available data-source handles; writes always go to ``primary``.
    settings:
        Supplies the article counting method and content namespaces.
    source:
        Handle to count from: an ``IDatabase`` is used directly, ``True``
        selects the primary, ``False`` the low-priority replica.
    """

    def __init__(
        self,
        handles: DatabaseHandles,
        settings: SiteStatsSettings,
        source: Source = False,
    ) -> None:
        self.handles = handles
        self.settings = settings
        if isinstance(source, bool):
            self.db = handles.primary if source else handles.slow_replica
        else:
            self.db = source
        self._edits: Optional[int] = None
        self._articles: Optional[int] = None
        self._pages: Optional[int] = None
        self._users: Optional[int] = None
        self._files: Optional[int] = None

    def _count(self, table: str) -> int:
        return int(self.db.select_field(table, "COUNT(*)") or 0)

    def edits(self) -> int:
        """Count live plus archived (deleted) revisions."""
        self._edits = self._count("revision") + self._count("archive")
        return self._edits

    def articles(self) -> int:
        """Count non-redirect content pages per the article counting method."""
        tables: List[str] = ["page"]
        conds: Dict[str, Any] = {
            "page_namespace": list(self.settings.content_namespaces),
            "page_is_redirect": 0,
        }
        where: List[str] = []
        method = self.settings.article_count_method
        if method == "link":
            tables.append("pagelinks")
            where.append("pl_from = page_id")
        elif method == "comma":
            # Checking for an actual comma would mean loading every page's
            # text; an empty page certainly has none.
            where.append("page_len > 0")
        self._articles = int(
            self.db.select_field(tables, "COUNT(DISTINCT page_id)", conds, where=where) or 0
        )
        return self._articles

    def pages(self) -> int:
        self._pages = self._count("page")
        return self._pages

    def users(self) -> int:
        self._users = self._count("user")
        return self._users

    def files(self) -> int:
        self._files = self._count("image")
        return self._files

    def refresh(self) -> None:
        """Upsert the counters row, computing any count not done yet."""
        values = {
            "ss_row_id": SITE_STATS_ROW_ID,
            "ss_total_edits": self.edits() if self._edits is None else self._edits,
            "ss_good_articles": self.articles() if self._articles is None else self._articles,
            "ss_total_pages": self.pages() if self._pages is None else self._pages,
            "ss_users": self.users() if self._users is None else self._users,
            "ss_images": self.files() if self._files is None else self._files,
        }
        self.handles.primary.upsert(SITE_STATS_TABLE, values, ["ss_row_id"], values)
        log_event(
            logger,
            "stats.recompute.refresh",
            LogContext(source=self.db.name),
            edits=values["ss_total_edits"],
            articles=values["ss_good_articles"],
            pages=values["ss_total_pages"],
            users=values["ss_users"],
            images=values["ss_images"],
        )

    @classmethod
    def do_all_and_commit(
        cls,
        handles: DatabaseHandles,
        settings: SiteStatsSettings,
        source: Source = False,
        *,
        active_users: bool = False,
    ) -> None:
        """Recount everything, persist it, and optionally refresh active users.

        Parameters
        ----------
        active_users:
            Also recompute ``ss_active_users`` from recent changes.
        """
        counter = cls(handles, settings, source)
        log_event(logger, "stats.recompute.start", LogContext(source=counter.db.name), level=logging.DEBUG)

        counter.edits()
        counter.articles()
        counter.pages()
        counter.users()
        counter.files()

        counter.refresh()

        if active_users:
            update_active_users(handles, settings)


__all__ = ["StatsRecomputer"]
