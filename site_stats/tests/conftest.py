"""Pytest configuration for the site statistics test suite.

Provides separate in-memory primary and replica databases (so tests can make
the replica lag behind the primary), a call-counting database wrapper, and
small seeding helpers.
"""

from __future__ import annotations

import json
import logging
import os
from collections import Counter
from typing import Any, Callable, Dict, Iterator, Mapping

import pytest

from site_stats.base.logging import BASE_LOGGER_NAME, get_logger
from site_stats.config import SiteStatsSettings, reset_settings_cache
from site_stats.persistence.interfaces import DatabaseHandles
from site_stats.persistence.sqlite import SqliteDatabase, create_connection, init_schema


class CountingDatabase(SqliteDatabase):
    """SqliteDatabase that records how often each data-access call is made."""

    def __init__(self, conn, name: str = "primary") -> None:
        super().__init__(conn, name=name)
        self.calls: Counter = Counter()

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def select_row(self, *args, **kwargs):
        self.calls["select_row"] += 1
        return super().select_row(*args, **kwargs)

    def select_field(self, *args, **kwargs):
        self.calls["select_field"] += 1
        return super().select_field(*args, **kwargs)

    def upsert(self, *args, **kwargs):
        self.calls["upsert"] += 1
        return super().upsert(*args, **kwargs)

    def update(self, *args, **kwargs):
        self.calls["update"] += 1
        return super().update(*args, **kwargs)


def _open(name: str) -> CountingDatabase:
    conn = create_connection(":memory:")
    init_schema(conn)
    return CountingDatabase(conn, name=name)


@pytest.fixture()
def primary() -> Iterator[CountingDatabase]:
    db = _open("primary")
    try:
        yield db
    finally:
        db.conn.close()


@pytest.fixture()
def replica() -> Iterator[CountingDatabase]:
    db = _open("replica")
    try:
        yield db
    finally:
        db.conn.close()


@pytest.fixture()
def handles(primary: CountingDatabase, replica: CountingDatabase) -> DatabaseHandles:
    return DatabaseHandles(primary=primary, replica=replica)


@pytest.fixture()
def settings() -> SiteStatsSettings:
    return SiteStatsSettings()


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep ``SITESTATS_*`` variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("SITESTATS_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


def write_stats_row(db: SqliteDatabase, **values: Any) -> None:
    """Insert or replace the counters row with the given snapshot fields."""
    columns: Dict[str, Any] = {
        "ss_row_id": values.pop("row_id", 1),
        "ss_total_edits": values.pop("edits", 0),
        "ss_good_articles": values.pop("articles", 0),
        "ss_total_pages": values.pop("pages", 0),
        "ss_users": values.pop("users", 0),
        "ss_active_users": values.pop("active_users", 0),
        "ss_images": values.pop("images", 0),
    }
    assert not values, f"unknown fields: {values}"
    names = ", ".join(columns)
    marks = ", ".join("?" for _ in columns)
    with db.conn:
        db.conn.execute(f"INSERT OR REPLACE INTO site_stats ({names}) VALUES ({marks})", list(columns.values()))


def insert_rows(db: SqliteDatabase, table: str, rows: list[Mapping[str, Any]]) -> None:
    with db.conn:
        for row in rows:
            names = ", ".join(row)
            marks = ", ".join("?" for _ in row)
            db.conn.execute(f'INSERT INTO "{table}" ({names}) VALUES ({marks})', list(row.values()))


def seed_content(db: SqliteDatabase) -> None:
    """Populate source tables with a small, known data set.

    Pages (namespace, title, redirect, len):
      1 (0, Alpha, 0, 120)  links to Beta
      2 (0, Beta, 0, 0)     empty, links to Alpha
      3 (0, Gamma, 0, 50)   no outgoing links
      4 (0, Old, 1, 10)     redirect, links to Alpha
      5 (1, Talk, 0, 30)    talk namespace, links to Alpha
      6 (100, Portal, 0, 5) custom namespace
    Revisions: 9 live, 2 archived. Users: 3. Images: 2.
    """
    insert_rows(
        db,
        "page",
        [
            {"page_id": 1, "page_namespace": 0, "page_title": "Alpha", "page_is_redirect": 0, "page_len": 120},
            {"page_id": 2, "page_namespace": 0, "page_title": "Beta", "page_is_redirect": 0, "page_len": 0},
            {"page_id": 3, "page_namespace": 0, "page_title": "Gamma", "page_is_redirect": 0, "page_len": 50},
            {"page_id": 4, "page_namespace": 0, "page_title": "Old", "page_is_redirect": 1, "page_len": 10},
            {"page_id": 5, "page_namespace": 1, "page_title": "Talk", "page_is_redirect": 0, "page_len": 30},
            {"page_id": 6, "page_namespace": 100, "page_title": "Portal", "page_is_redirect": 0, "page_len": 5},
        ],
    )
    insert_rows(
        db,
        "pagelinks",
        [
            {"pl_from": 1, "pl_namespace": 0, "pl_title": "Beta"},
            {"pl_from": 1, "pl_namespace": 0, "pl_title": "Gamma"},
            {"pl_from": 2, "pl_namespace": 0, "pl_title": "Alpha"},
            {"pl_from": 4, "pl_namespace": 0, "pl_title": "Alpha"},
            {"pl_from": 5, "pl_namespace": 0, "pl_title": "Alpha"},
        ],
    )
    insert_rows(db, "revision", [{"rev_page": (i % 6) + 1} for i in range(9)])
    insert_rows(
        db,
        "archive",
        [
            {"ar_namespace": 0, "ar_title": "Deleted", "ar_rev_id": 100},
            {"ar_namespace": 0, "ar_title": "Deleted", "ar_rev_id": 101},
        ],
    )
    insert_rows(db, "user", [{"user_name": n} for n in ("Ann", "Bob", "Cy")])
    insert_rows(db, "image", [{"img_name": "A.png", "img_size": 10}, {"img_name": "B.jpg", "img_size": 20}])


@pytest.fixture()
def write_row() -> Callable[..., None]:
    """Return ``write_stats_row`` for writing counters into a handle."""
    return write_stats_row


@pytest.fixture()
def seed() -> Callable[[SqliteDatabase], None]:
    """Return ``seed_content`` for populating a handle's source tables."""
    return seed_content


@pytest.fixture()
def insert() -> Callable[[SqliteDatabase, str, list], None]:
    return insert_rows


class _EventHandler(logging.Handler):
    """Decode ``log_event`` payloads as they are emitted."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: list[dict] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            payload = {"msg": record.getMessage()}
        payload["level"] = record.levelname
        self.events.append(payload)


@pytest.fixture()
def log_events() -> Iterator[list]:
    """Collect structured events logged under the ``site_stats`` logger."""
    handler = _EventHandler()
    base = get_logger(BASE_LOGGER_NAME)
    base.addHandler(handler)
    try:
        yield handler.events
    finally:
        base.removeHandler(handler)
