import pytest

from conftest import make_fire
from src.analysis.monthly_chart import (
    AggregateChart,
    chart_figure,
    layout_chart,
    monthly_average,
    plot_size,
)
from src.analysis.scales import color_scale


def test_monthly_average_leaves_empty_months_none(fires):
    averages = monthly_average(fires)
    assert averages[0] == pytest.approx(325.0)
    assert averages[2] == pytest.approx(360.0)
    assert averages[6] == pytest.approx(450.0)
    assert averages[10] == pytest.approx(500.0)
    assert averages[11] == pytest.approx(400.0)
    assert averages[1] is None
    assert averages.count(None) == 7


def test_monthly_average_skips_unusable_records():
    records = [
        make_fire("ok", brightness=400, month=5),
        make_fire("no-b", brightness=None, month=5),
        make_fire("no-date", brightness=900, month=None),
    ]
    assert monthly_average(records)[4] == 400


def test_plot_size_subtracts_margins():
    assert plot_size((420, 220)) == (372, 154)


def test_bands_tile_the_plot_and_follow_seasons(fires):
    frame = layout_chart(fires, {"Winter"}, (420, 220))

    assert frame.bands[0].x == pytest.approx(0)
    assert frame.bands[-1].x + frame.bands[-1].width == pytest.approx(372)
    assert [b.month for b in frame.bands if b.visible] == [1, 11, 12]

    january = frame.bands[0]
    assert january.color == color_scale(325.0)
    assert january.opacity == 0.16

    february = frame.bands[1]
    assert (february.color, february.opacity) == ("steelblue", 0.12)


def test_points_and_line_break_on_empty_months(fires):
    frame = layout_chart(fires, {"Summer"}, (420, 220))
    assert len(frame.points) == 12
    assert frame.points[1][1] is None
    # Jan | Mar | Jul | Nov-Dec
    assert [len(s) for s in frame.line_segments()] == [1, 1, 1, 2]


def test_empty_data_falls_back_to_default_domain():
    frame = layout_chart([], set(), (420, 220))
    assert frame.y_domain == (300.0, 340.0)
    assert all(y is None for _, y in frame.points)
    assert frame.line_segments() == []


def test_resize_rebuilds_scales(fires):
    chart = AggregateChart((420, 220))
    chart.redraw(fires, {"Fall"})
    narrow = chart.frame.width

    frame = chart.resize((620, 220))
    assert frame.width == narrow + 200
    assert [b.month for b in frame.bands if b.visible] == [8, 9, 10]


def test_chart_figure_draws_visible_bands_only(fires):
    frame = layout_chart(fires, {"Winter", "Spring"}, (420, 220))
    fig = chart_figure(frame, (420, 220))
    assert len(fig.layout.shapes) == 6
    assert len(fig.data) == 1
