import pytest

from conftest import make_fire
from src.analysis.scales import radius_scale
from src.render.fire_layer import FireLayerRenderer


def test_new_marks_enter_at_zero_radius(fires, projection):
    layer = FireLayerRenderer(projection.project)
    diff = layer.render(fires[:2])

    assert diff.entered == ["a1", "a2"]
    mark = layer.find("a2")
    assert mark.radius == 0
    assert mark.target_radius == pytest.approx(radius_scale(330))
    assert mark.animating
    assert (mark.x, mark.y) == (5.0, -5.0)

    layer.finish_transitions()
    assert not mark.animating


def test_rerender_keeps_marks_by_id(fires, projection):
    exited = []
    layer = FireLayerRenderer(projection.project, on_exit=exited.append)
    layer.render(fires)
    kept = layer.find("b1")
    kept.settle()

    diff = layer.render([fires[3], fires[4]])

    assert diff.retained == ["b1", "b2"]
    assert sorted(diff.exited) == ["a1", "a2", "a3", "x1"]
    assert layer.find("b1") is kept
    assert not kept.animating
    assert {m.record.id for m in exited} == {"a1", "a2", "a3", "x1"}


def test_unplaceable_records_get_no_mark(projection):
    records = [
        make_fire("no-coords", lon=None),
        make_fire("no-brightness", brightness=None),
        make_fire("ok"),
    ]
    layer = FireLayerRenderer(projection.project)
    layer.render(records)
    assert [m.record.id for m in layer.visible_marks()] == ["ok"]


def test_unprojectable_records_get_no_mark():
    layer = FireLayerRenderer(lambda lon, lat: None)
    layer.render([make_fire("far")])
    assert layer.visible_marks() == []


def test_enter_hook_sees_every_new_mark(fires, projection):
    entered = []
    layer = FireLayerRenderer(projection.project, on_enter=entered.append)
    layer.render(fires)
    layer.render(fires)
    assert len(entered) == len(fires)
