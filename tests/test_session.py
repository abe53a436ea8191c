import asyncio
import random
import threading

import pytest

from conftest import make_fire
from src.analysis.buckets import BRIGHTNESS_NOTCHES
from src.filters.pipeline import derive_visible
from src.session import LOADING_MESSAGE, FireMapSession, MapData


@pytest.fixture
def session(fires, regions, projection):
    return FireMapSession(
        fires, regions, map_size=(960, 600), chart_size=(420, 220), projection=projection
    )


def visible_ids(session):
    return [r.id for r in session.visible]


def test_initial_view_shows_everything_above_floor(session):
    assert visible_ids(session) == ["a2", "a3", "b1", "b2", "x1"]
    assert session.last_diff.entered == visible_ids(session)
    assert session.regions_label == "States: all states"
    assert session.time_frame_label.endswith("January 2023–October 2023")
    assert session.slider_color == "rgb(255, 0, 0)"


def test_region_filter_waits_for_indexing(session):
    assert session.on_region_click("Alpha")
    assert session.visible == []

    session.index_regions()
    assert visible_ids(session) == ["a2", "a3"]
    assert session.regions_label == "States: Alpha"


def test_unknown_region_click_is_ignored(session):
    assert not session.on_region_click("Atlantis")
    assert session.state.selected_regions == frozenset()


def test_brightness_must_be_a_notch(session):
    with pytest.raises(ValueError, match="not a notch"):
        session.on_brightness_change(337)

    session.on_brightness_change(450)
    assert visible_ids(session) == ["b1", "b2"]
    assert session.last_diff.exited == ["a2", "a3", "x1"]


def test_season_toggle_and_forced_state(session):
    session.on_season_toggle("Summer")
    assert "b2" not in visible_ids(session)

    session.on_season_toggle("Summer", checked=False)
    assert "Summer" not in session.state.selected_seasons

    session.on_season_toggle("Summer", checked=True)
    assert "b2" in visible_ids(session)


def test_clearing_seasons_empties_map_but_not_chart(session):
    session.set_seasons([])
    assert session.visible == []
    assert session.layer.visible_marks() == []
    assert session.time_frame_label.endswith("none")
    assert session.chart.frame.averages[0] == pytest.approx(330.0)


def test_fit_and_reset(session):
    session.index_regions()
    session.on_region_click("Beta")
    assert session.fit_to_selection()
    assert not session.viewport.transform.is_identity

    session.zoom_out()
    assert session.viewport.transform.is_identity
    assert session.state.selected_regions == {"Beta"}

    session.fit_to_selection()
    session.reset_selection()
    assert session.viewport.transform.is_identity
    assert session.state.selected_regions == frozenset()
    assert len(session.visible) == 5


def test_hover_returns_tooltip_fields(session):
    session.index_regions()
    assert session.hover("a3")["region_label"] == "Alpha"
    assert session.hover("a1") is None


def test_chart_follows_resize(session):
    frame = session.on_resize((520, 220))
    assert frame.width == 472
    assert session.chart.frame is frame


def test_deferred_indexing_refreshes_when_done(session):
    async def scenario():
        session.on_region_click("Beta")
        task = session.start_indexing(delay=0.01)
        assert session.start_indexing() is task
        assert session.loading
        assert session.loading_message == LOADING_MESSAGE
        assert session.visible == []
        await task.wait()

    asyncio.run(scenario())

    assert not session.loading
    assert session.loading_message is None
    assert visible_ids(session) == ["b1", "b2"]


def test_concurrent_events_keep_layer_and_view_in_step(regions, projection):
    records = [
        make_fire(f"r{i}", lon=(i % 20) / 10, lat=0.5, brightness=325 + (i % 8) * 25, month=i % 12 + 1)
        for i in range(2000)
    ]
    session = FireMapSession(records, regions, projection=projection)
    errors = []

    def worker(seed):
        rng = random.Random(seed)
        try:
            for _ in range(60):
                session.on_brightness_change(rng.choice(BRIGHTNESS_NOTCHES))
                if rng.random() < 0.2:
                    session.on_season_toggle("Summer")
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(seed,)) for seed in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert session.visible == derive_visible(session.buckets, session.state)
    assert sorted(m.record.id for m in session.layer.visible_marks()) == sorted(visible_ids(session))


def test_sessions_share_data_but_not_filters(fires, regions, projection):
    data = MapData(fires, regions, projection=projection)
    first, second = data.new_session(), data.new_session()

    first.on_brightness_change(450)
    first.on_season_toggle("Winter")

    assert second.state.brightness_threshold == 325
    assert visible_ids(second) == ["a2", "a3", "b1", "b2", "x1"]
    assert first.buckets is second.buckets
    assert first.layer is not second.layer


def test_shared_indexing_runs_once_and_refreshes_every_session(fires, regions, projection):
    data = MapData(fires, regions, projection=projection)
    early = data.new_session()
    early.on_region_click("Beta")

    async def scenario():
        task = data.start_indexing(delay=0.01)
        early.attach_index_task(task)
        assert data.start_indexing() is task

        late = data.new_session()
        late.on_region_click("Alpha")
        assert late.loading
        await task.wait()
        return late

    late = asyncio.run(scenario())

    assert visible_ids(early) == ["b1", "b2"]
    assert visible_ids(late) == ["a2", "a3"]
    assert not early.loading and not late.loading
