import pytest

from src.analysis.scales import (
    LinearScale,
    PointScale,
    color_scale,
    nice_domain,
    opacity_scale,
    radius_scale,
)


def test_brightness_encodings_span_their_ranges():
    assert radius_scale(325) == pytest.approx(1.0)
    assert radius_scale(510) == pytest.approx(6.0)
    assert color_scale(325) == "rgb(255, 0, 0)"
    assert color_scale(510) == "rgb(255, 255, 0)"


def test_opacity_is_clamped():
    assert opacity_scale(200) == pytest.approx(0.35)
    assert opacity_scale(900) == pytest.approx(0.9)


def test_color_channels_stay_in_gamut_outside_domain():
    assert color_scale(1000) == "rgb(255, 255, 0)"
    assert color_scale(0) == "rgb(255, 0, 0)"


def test_degenerate_domain_maps_to_middle_of_range():
    scale = LinearScale((400, 400), (0, 100))
    assert scale(400) == 50
    assert scale(123) == 50


def test_nice_extends_to_round_values():
    assert nice_domain(301, 339) == (300, 340)
    scale = LinearScale((301, 339), (100, 0)).nice()
    assert scale.domain == (300, 340)
    assert scale.ticks(3) == [300, 310, 320, 330, 340]


def test_point_scale_pads_half_a_step():
    x = PointScale(range(1, 13), (0, 120), padding=0.5)
    assert x.step == pytest.approx(10)
    assert x(1) == pytest.approx(5)
    assert x(12) == pytest.approx(115)
