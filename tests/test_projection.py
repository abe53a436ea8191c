import math

import pytest
from shapely.geometry import MultiPolygon, Point, box

from src.analysis.projection import AlbersProjection, in_alaska, in_hawaii


@pytest.fixture(scope="module")
def albers():
    return AlbersProjection(960, 600)


def within(point, area_box):
    x0, y0, x1, y1 = area_box
    return x0 <= point[0] <= x1 and y0 <= point[1] <= y1


def on_screen(point, albers):
    return within(point, (0, 0, albers.width, albers.height))


def test_alaska_fire_lands_in_its_inset(albers):
    p = albers.project(-150.0, 64.0)

    assert on_screen(p, albers)
    assert within(p, albers.inset_boxes["Alaska"])


def test_hawaii_fire_lands_in_its_inset(albers):
    p = albers.project(-155.5, 19.6)

    assert on_screen(p, albers)
    assert within(p, albers.inset_boxes["Hawaii"])


def test_lower48_fire_stays_clear_of_insets(albers):
    p = albers.project(-98.0, 38.5)

    assert on_screen(p, albers)
    assert not any(within(p, b) for b in albers.inset_boxes.values())


def test_routing_by_location():
    assert in_alaska(-150.0, 64.0)
    assert in_alaska(179.0, 52.0)
    assert not in_alaska(-122.0, 47.6)
    assert in_hawaii(-157.8, 21.3)
    assert not in_hawaii(-118.2, 34.0)


def test_non_finite_coordinates_do_not_project(albers):
    assert albers.project(math.nan, 40.0) is None
    assert albers.project(-100.0, math.inf) is None


def test_polygon_parts_are_drawn_in_their_own_area(albers):
    shape = MultiPolygon([box(-152, 60, -148, 62), box(-100, 38, -98, 40)])

    alaska_ring, kansas_ring = albers.path(shape)

    assert all(within(p, albers.inset_boxes["Alaska"]) for p in alaska_ring)
    assert not any(within(p, albers.inset_boxes["Alaska"]) for p in kansas_ring)
    assert albers.bounds(box(-152, 60, -148, 62)) is not None


def test_non_polygons_cannot_be_drawn(albers):
    with pytest.raises(ValueError):
        albers.path(Point(-100, 40))


def test_graticule_and_labels(albers):
    lines = albers.graticule()
    labels = [text for _, _, text in albers.graticule_labels()]

    assert lines
    assert all(on_screen(p, albers) for line in lines for p in line if p is not None)
    assert "-100°" in labels
    assert "40°" in labels
