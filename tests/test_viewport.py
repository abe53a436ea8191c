import pytest
from shapely.geometry import LineString, box

from src.analysis.records import RegionPolygon
from src.render.viewport import (
    IDENTITY,
    SELECTED_FILL,
    UNSELECTED_FILL,
    SelectionViewport,
    fit_transform,
    union_bounds,
)


@pytest.fixture
def viewport(regions, projection):
    return SelectionViewport(regions, projection, 960, 600)


def test_fit_centers_single_region(viewport):
    assert viewport.fit_to_selection(["Alpha"])
    t = viewport.transform

    # Alpha spans (0, -10)-(10, 0) in map pixels
    assert t.scale == pytest.approx(min(920 / 10, 560 / 10) * 0.95)
    assert t.apply(5, -5) == pytest.approx((480, 300))


def test_fit_covers_union_of_selection(viewport):
    viewport.fit_to_selection(["Alpha", "Beta"])
    t = viewport.transform
    assert t.apply(10, -5) == pytest.approx((480, 300))


def test_empty_selection_leaves_transform_alone(viewport):
    assert not viewport.fit_to_selection([])
    assert viewport.transform is IDENTITY


def test_degenerate_bounds_are_a_no_op(regions, projection):
    line = RegionPolygon("Line", LineString([(0, 0), (0, 1)]))
    viewport = SelectionViewport(regions + [line], projection, 960, 600)
    assert not viewport.fit_to_selection(["Line"])
    assert viewport.transform.is_identity


def test_unknown_region_is_a_no_op(viewport):
    assert not viewport.fit_to_selection(["Atlantis"])
    assert viewport.transform.is_identity


def test_zoom_out_restores_identity(viewport):
    viewport.fit_to_selection(["Beta"])
    assert not viewport.transform.is_identity
    viewport.zoom_out()
    assert viewport.transform.is_identity
    assert viewport.transform.visible_window(960, 600) == ((0, 960), (0, 600))


def test_region_styles_mark_selection(viewport):
    assert viewport.region_styles({"Beta"}) == {
        "Alpha": UNSELECTED_FILL,
        "Beta": SELECTED_FILL,
    }


def test_union_and_fit_helpers():
    assert union_bounds([None, None]) is None
    assert union_bounds([((0, 0), (1, 1)), None, ((2, -1), (3, 0))]) == ((0, -1), (3, 1))
    assert fit_transform(None, 100, 100) is None
    assert fit_transform(((1, 1), (1, 5)), 100, 100) is None
