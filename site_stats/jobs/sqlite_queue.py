"""SQLite-backed job queue group.

Reports queue depths from the ``job`` table, one queue per ``job_cmd``.
Driver errors are wrapped in ``JobQueueError`` so callers can tell an
unreachable queue apart from other data-access failures.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional

from ..base.errors import JobQueueError
from ..persistence.interfaces.repos import IJobQueueGroup


class SqliteJobQueueGroup(IJobQueueGroup):
    """Job queue group reading the ``job`` table of one SQLite connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def get_queue_sizes(self) -> Dict[str, int]:
        try:
            rows = self.conn.execute(
                "SELECT job_cmd, COUNT(*) FROM job GROUP BY job_cmd"
            ).fetchall()
        except sqlite3.Error as e:
            raise JobQueueError(f"cannot read job queue sizes: {e}", raw=e) from e
        return {r[0]: int(r[1]) for r in rows}

    def push(self, job_cmd: str, params: Optional[str] = None, timestamp: Optional[Any] = None) -> int:
        """Queue a job and return its id (committed immediately)."""
        try:
            with self.conn:
                cur = self.conn.execute(
                    "INSERT INTO job(job_cmd, job_params, job_timestamp) VALUES(?, ?, ?)",
                    (job_cmd, params, timestamp),
                )
        except sqlite3.Error as e:
            raise JobQueueError(f"cannot push {job_cmd!r} job: {e}", raw=e) from e
        return int(cur.lastrowid)


__all__ = ["SqliteJobQueueGroup"]
