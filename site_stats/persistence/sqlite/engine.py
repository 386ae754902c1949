"""SQLite engine helpers for the persistence layer.

Purpose
-------
Provide safe, centralized helpers for opening SQLite connections and ensuring
the counters table and its source tables exist.

External dependencies
---------------------
- Standard library only (``sqlite3``). No side effects at import time.

Timeout and reliability strategy
--------------------------------
- Applies a standard ``busy_timeout`` (milliseconds) from
  ``site_stats.config.defaults`` to mitigate lock contention.
- Enables WAL journaling and NORMAL synchronous mode for file databases.

Fallback semantics
------------------
No fallback/caching is implemented at this layer; callers see every
``sqlite3.Error`` unchanged.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ...config.defaults import (
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_JOURNAL_MODE,
    SQLITE_SYNCHRONOUS,
)

MEMORY_DB = ":memory:"

SCHEMA_STATEMENTS = (
    # Single logical row, ss_row_id = 1. The -1 defaults mark counters that
    # have never been computed.
    """
    CREATE TABLE IF NOT EXISTS site_stats (
        ss_row_id INTEGER PRIMARY KEY,
        ss_total_edits INTEGER DEFAULT 0,
        ss_good_articles INTEGER DEFAULT 0,
        ss_total_pages INTEGER DEFAULT -1,
        ss_users INTEGER DEFAULT -1,
        ss_active_users INTEGER DEFAULT -1,
        ss_images INTEGER DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS page (
        page_id INTEGER PRIMARY KEY AUTOINCREMENT,
        page_namespace INTEGER NOT NULL,
        page_title TEXT NOT NULL,
        page_is_redirect INTEGER NOT NULL DEFAULT 0,
        page_len INTEGER NOT NULL DEFAULT 0,
        UNIQUE (page_namespace, page_title)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS revision (
        rev_id INTEGER PRIMARY KEY AUTOINCREMENT,
        rev_page INTEGER NOT NULL,
        rev_timestamp TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS archive (
        ar_id INTEGER PRIMARY KEY AUTOINCREMENT,
        ar_namespace INTEGER NOT NULL,
        ar_title TEXT NOT NULL,
        ar_rev_id INTEGER
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS pagelinks (
        pl_from INTEGER NOT NULL,
        pl_namespace INTEGER NOT NULL,
        pl_title TEXT NOT NULL,
        PRIMARY KEY (pl_from, pl_namespace, pl_title)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS user (
        user_id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_name TEXT NOT NULL UNIQUE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS user_groups (
        ug_user INTEGER NOT NULL,
        ug_group TEXT NOT NULL,
        ug_expiry TEXT,
        PRIMARY KEY (ug_user, ug_group)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS image (
        img_name TEXT PRIMARY KEY,
        img_size INTEGER NOT NULL DEFAULT 0
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS recentchanges (
        rc_id INTEGER PRIMARY KEY AUTOINCREMENT,
        rc_timestamp TEXT NOT NULL,
        rc_user INTEGER NOT NULL DEFAULT 0,
        rc_user_text TEXT NOT NULL,
        rc_type INTEGER NOT NULL DEFAULT 0,
        rc_log_type TEXT
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS job (
        job_id INTEGER PRIMARY KEY AUTOINCREMENT,
        job_cmd TEXT NOT NULL,
        job_params TEXT,
        job_timestamp TEXT
    );
    """,
)


def create_connection(db_path: str | None = None) -> sqlite3.Connection:
    """Open a SQLite connection with sane defaults and apply PRAGMA settings.

    Parameters
    ----------
    db_path:
        Path to the database file; ``None`` or ``":memory:"`` opens a private
        in-memory database. Parent directories are created as needed.

    Returns
    -------
    sqlite3.Connection
        An open connection with ``row_factory`` set to ``sqlite3.Row``.
    """
    if not db_path or db_path == MEMORY_DB:
        conn = sqlite3.connect(MEMORY_DB)
    else:
        path = Path(db_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path))
        conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
        conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")  # ms
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the counters table and its source tables, then commit.

    Schema overview
    ---------------
    - ``site_stats``: the single counters row
    - ``page``, ``revision``, ``archive``, ``pagelinks``, ``user``,
      ``user_groups``, ``image``, ``recentchanges``: tables counted by the
      recomputer and the ancillary counters
    - ``job``: queued background jobs
    """
    for statement in SCHEMA_STATEMENTS:
        conn.execute(statement)
    conn.commit()


__all__ = ["MEMORY_DB", "SCHEMA_STATEMENTS", "create_connection", "init_schema"]
