"""Container wiring and per-context cache lifetime."""
from __future__ import annotations

from site_stats import SiteStatsContainer, build_container
from site_stats.cache import ReadThroughCache
from site_stats.config import SiteStatsSettings
from site_stats.persistence.sqlite import close_handles, open_handles
from site_stats.stats import StatsUpdate


def test_container_reuses_objects(handles, settings):
    container = SiteStatsContainer(settings, handles=handles)
    assert container.stats() is container.stats()
    assert container.ancillary() is container.ancillary()
    assert container.stats().state is container.ancillary().state


def test_unload_clears_ancillary_memo(handles, settings, write_row, replica):
    write_row(replica, edits=3, pages=2, articles=1, users=1)
    container = SiteStatsContainer(settings, handles=handles)
    container.ancillary().pages_in_ns(0)
    container.stats().edits()

    container.stats().unload()
    assert container.state().page_counts == {}
    assert not container.stats().loaded


def test_contexts_do_not_share_snapshots(handles, settings, write_row, replica):
    write_row(replica, edits=3, pages=2, articles=1, users=1)
    first = SiteStatsContainer(settings, handles=handles)
    assert first.stats().edits() == 3

    write_row(replica, edits=4, pages=2, articles=1, users=1)
    second = SiteStatsContainer(settings, handles=handles)
    assert second.stats().edits() == 4
    assert first.stats().edits() == 3


def test_injected_cache_is_used(handles, settings):
    shared = ReadThroughCache()
    container = SiteStatsContainer(settings, handles=handles, cache=shared)
    assert container.read_through_cache() is shared
    assert container.ancillary().cache is shared


def test_injected_handles_are_not_closed(handles, settings, primary):
    with SiteStatsContainer(settings, handles=handles) as container:
        container.stats()
    assert primary.select_field("site_stats", "COUNT(*)") == 0


def test_build_container_end_to_end(tmp_path):
    path = str(tmp_path / "wiki.db")
    with build_container({"db_path": path}) as container:
        stats = container.stats()
        # empty database: recounted to zero, then incremented
        assert stats.edits() == 0
        StatsUpdate(edits=2, pages=1).do_update(container.handles().primary)
        stats.unload()
        assert stats.edits() == 2
        assert stats.pages() == 1
        assert container.ancillary().jobs() == 0

    handles = open_handles(path)
    try:
        assert handles.replica.select_field("site_stats", "ss_total_edits") == 2
    finally:
        close_handles(handles)


def test_build_container_reads_settings():
    container = build_container({"miser_mode": True, "article_count_method": "any"})
    try:
        assert isinstance(container.settings, SiteStatsSettings)
        assert container.settings.miser_mode is True
        assert container.settings.article_count_method == "any"
    finally:
        container.close()
