import pytest

from conftest import GridProjection
from src.render.fire_layer import FireLayerRenderer
from src.render.map_figure import RegionPaths, map_figure, points_trace
from src.render.viewport import IDENTITY, ViewportTransform


class FurnishedProjection(GridProjection):
    """Grid projection that also offers an inset box and a one-line graticule."""

    inset_boxes = {"Alaska": (0.0, 400.0, 200.0, 590.0)}

    def graticule(self):
        return [[(0.0, 0.0), (10.0, 0.0), None, (30.0, 0.0)]]

    def graticule_labels(self):
        return [(5.0, 14.0, "0°")]


def trace_names(fig):
    return [trace.name for trace in fig.data]


def test_marker_size_follows_zoom(fires, projection):
    layer = FireLayerRenderer(projection.project)
    layer.render(fires)
    marks = layer.visible_marks()

    plain = points_trace(marks)
    zoomed = points_trace(marks, zoom=2.0)

    for mark, size, zoomed_size in zip(marks, plain.marker.size, zoomed.marker.size):
        assert size == pytest.approx(2 * mark.target_radius)
        assert zoomed_size == pytest.approx(4 * mark.target_radius)


def test_map_figure_scales_points_with_viewport(fires, regions, projection):
    layer = FireLayerRenderer(projection.project)
    layer.render(fires)
    marks = layer.visible_marks()
    paths = RegionPaths(regions, projection)

    fig = map_figure(paths, {}, marks, ViewportTransform(scale=3.0), (960, 600))

    points = fig.data[-1]
    assert points.name == "fires"
    assert list(points.marker.size) == pytest.approx(
        [6 * m.target_radius for m in marks]
    )


def test_plain_projection_draws_no_furniture(regions, projection):
    paths = RegionPaths(regions, projection)

    fig = map_figure(paths, {"Alpha": "#333"}, [], IDENTITY, (960, 600))

    assert trace_names(fig) == ["Alpha", "fires"]
    assert not fig.layout.shapes


def test_insets_and_graticule_are_drawn_when_offered(regions):
    paths = RegionPaths(regions, FurnishedProjection())

    fig = map_figure(paths, {"Alpha": "#333"}, [], IDENTITY, (960, 600))

    assert trace_names(fig) == ["graticule", "graticule labels", "Alpha", "fires"]
    assert len(fig.layout.shapes) == 1
    assert fig.layout.shapes[0].y0 == 400.0
    assert list(fig.data[0].x) == [0.0, 10.0, None, 30.0, None]
