"""Lazy loading, escalation and self-healing of the counters cache."""
from __future__ import annotations

import sqlite3

import pytest

from site_stats.config import SiteStatsSettings
from site_stats.persistence.interfaces import DatabaseHandles
from site_stats.persistence.sqlite import SqliteDatabase
from site_stats.stats import StatsCache, StatsCacheState
from site_stats.stats.recomputer import StatsRecomputer
from site_stats.stats.tiers import PrimaryTier

SANE = {"edits": 100, "articles": 50, "pages": 80, "users": 10, "active_users": 4, "images": 5}
# edits < pages
INSANE = {"edits": 5, "articles": 1, "pages": 10, "users": 1, "images": 0}


@pytest.fixture()
def recompute_calls(monkeypatch):
    """Replace the full recount with a recorder that writes nothing."""
    calls = []

    def fake(cls, handles, settings, source=False, *, active_users=False):
        calls.append(source)

    monkeypatch.setattr(StatsRecomputer, "do_all_and_commit", classmethod(fake))
    return calls


@pytest.fixture()
def shared_handles(primary):
    """Handles whose replica reads the primary's connection (no lag)."""
    return DatabaseHandles(primary=primary, replica=SqliteDatabase(primary.conn, name="replica"))


def test_sane_replica_is_served_without_escalation(handles, primary, replica, write_row, settings):
    write_row(replica, **SANE)
    stats = StatsCache(handles, settings)

    assert stats.edits() == 100
    assert stats.articles() == 50
    assert stats.pages() == 80
    assert stats.users() == 10
    assert stats.active_users() == 4
    assert stats.images() == 5
    assert primary.total_calls == 0
    assert replica.calls["select_row"] == 1


def test_accessors_are_lazy(handles, replica, write_row, settings):
    write_row(replica, **SANE)
    stats = StatsCache(handles, settings)
    assert not stats.loaded
    assert replica.total_calls == 0
    stats.pages()
    assert stats.loaded


def test_unload_forces_one_fresh_load(handles, replica, write_row, settings):
    write_row(replica, **SANE)
    stats = StatsCache(handles, settings)
    stats.edits()
    write_row(replica, **{**SANE, "edits": 200})
    assert stats.edits() == 100

    stats.unload()
    assert not stats.loaded
    assert stats.edits() == 200
    stats.users()
    assert replica.calls["select_row"] == 2


def test_recache_reloads_immediately(handles, replica, write_row, settings):
    write_row(replica, **SANE)
    stats = StatsCache(handles, settings)
    stats.edits()
    write_row(replica, **{**SANE, "images": 9})

    stats.recache()
    assert replica.calls["select_row"] == 2
    assert stats.images() == 9
    assert replica.calls["select_row"] == 2


def test_unload_clears_shared_state(handles, replica, write_row, settings):
    write_row(replica, **SANE)
    state = StatsCacheState()
    state.jobs = 7
    state.page_counts[0] = 3
    stats = StatsCache(handles, settings, state=state)
    stats.edits()

    stats.unload()
    assert state.snapshot is None
    assert state.jobs is None
    assert state.page_counts == {}


def test_lagging_replica_falls_back_to_primary(
    handles, primary, replica, write_row, settings, recompute_calls
):
    write_row(replica, **INSANE)
    write_row(primary, **SANE)
    stats = StatsCache(handles, settings)

    assert stats.edits() == 100
    assert stats.pages() == 80
    assert recompute_calls == []
    assert primary.calls["select_row"] == 1


def test_missing_replica_row_falls_back_to_primary(
    handles, primary, write_row, settings, recompute_calls
):
    write_row(primary, **SANE)
    assert StatsCache(handles, settings).articles() == 50
    assert recompute_calls == []


def test_recompute_runs_once_when_both_are_insane(handles, primary, replica, seed, write_row, settings):
    seed(replica)
    write_row(replica, **INSANE)
    write_row(primary, **INSANE)
    stats = StatsCache(handles, settings)

    assert stats.edits() == 11
    assert stats.articles() == 2
    assert stats.pages() == 6
    assert stats.users() == 3
    assert stats.images() == 2
    assert primary.calls["upsert"] == 1
    # primary tier, then the re-read after the recount
    assert primary.calls["select_row"] == 2


def test_recompute_counts_from_the_replica(
    handles, replica, write_row, settings, recompute_calls
):
    write_row(replica, **INSANE)
    StatsCache(handles, settings).edits()
    assert recompute_calls == [replica]


def test_absent_row_everywhere_is_rebuilt(handles, primary, settings):
    stats = StatsCache(handles, settings)
    assert stats.edits() == 0
    assert stats.pages() == 0
    assert primary.calls["upsert"] == 1


def test_active_users_before_first_refresh(handles, primary, replica, seed, settings):
    seed(replica)
    stats = StatsCache(handles, settings)
    assert stats.edits() == 11
    # column default survives the recount
    assert stats.snapshot.active_users == -1
    assert stats.active_users() == 0


def test_miser_mode_never_recomputes(handles, primary, replica, write_row, recompute_calls):
    write_row(replica, **INSANE)
    write_row(primary, **INSANE)
    stats = StatsCache(handles, SiteStatsSettings(miser_mode=True))

    assert stats.edits() == 5
    assert stats.pages() == 10
    assert recompute_calls == []
    assert primary.calls["upsert"] == 0


def test_persistently_insane_snapshot_is_served_with_warning(
    handles, primary, replica, write_row, settings, recompute_calls, log_events
):
    write_row(replica, **INSANE)
    write_row(primary, **{**INSANE, "edits": 6})
    stats = StatsCache(handles, settings)

    # last tier's answer wins
    assert stats.edits() == 6
    assert len(recompute_calls) == 1
    warnings = [e for e in log_events if e["event"] == "stats.load.nonsensical"]
    assert len(warnings) == 1
    assert warnings[0]["level"] == "WARNING"
    assert warnings[0]["tiers"] == ["replica", "primary", "recompute"]


def test_legacy_placeholder_is_migrated(shared_handles, primary, write_row, log_events):
    write_row(primary, edits=5, articles=0, pages=-1, users=1, images=0)
    stats = StatsCache(shared_handles, SiteStatsSettings(miser_mode=True))

    assert stats.pages() == 0
    assert stats.edits() == 5
    assert primary.calls["upsert"] == 1
    assert "stats.schema.migrate" in [e["event"] for e in log_events]


def test_null_pages_are_migrated(shared_handles, primary, write_row):
    write_row(primary, edits=5, articles=0, pages=None, users=1, images=0)
    stats = StatsCache(shared_handles, SiteStatsSettings(miser_mode=True))
    assert stats.pages() == 0
    assert primary.calls["upsert"] == 1


def test_missing_row_is_created_in_miser_mode(shared_handles, primary):
    stats = StatsCache(shared_handles, SiteStatsSettings(miser_mode=True))
    assert stats.edits() == 0
    assert stats.images() == 0
    assert primary.conn.execute("SELECT COUNT(*) FROM site_stats").fetchone()[0] == 1


def test_sane_row_is_not_migrated(handles, primary, replica, write_row, settings):
    write_row(replica, **SANE)
    StatsCache(handles, settings).pages()
    assert primary.calls["upsert"] == 0


def test_custom_tier_order(handles, primary, replica, write_row, settings):
    write_row(primary, **SANE)
    write_row(replica, **{**SANE, "edits": 999})
    stats = StatsCache(handles, settings, tiers=[PrimaryTier()])
    assert stats.edits() == 100
    assert replica.total_calls == 0


def test_data_access_errors_propagate(handles, replica, settings):
    replica.conn.execute("DROP TABLE site_stats")
    stats = StatsCache(handles, settings)
    with pytest.raises(sqlite3.OperationalError):
        stats.edits()
    assert not stats.loaded


def test_views_is_deprecated(handles, settings):
    stats = StatsCache(handles, settings)
    with pytest.warns(DeprecationWarning):
        assert stats.views() == 0
