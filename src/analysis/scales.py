"""Small scale helpers for visual encodings (linear, point, sequential color)."""

import math
from typing import Sequence, Tuple

# Shared input domain of the brightness encodings. Fixed, so colors and sizes
# mean the same thing whatever the current filter.
BRIGHTNESS_DOMAIN: Tuple[float, float] = (325.0, 510.0)

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def tick_step(start: float, stop: float, count: int = 10) -> float:
    """Round tick spacing (1, 2 or 5 times a power of ten) for about ``count`` ticks."""
    step0 = abs(stop - start) / max(1, count)
    if step0 == 0 or not math.isfinite(step0):
        return 0.0
    step1 = 10 ** math.floor(math.log10(step0))
    error = step0 / step1
    if error >= _E10:
        step1 *= 10
    elif error >= _E5:
        step1 *= 5
    elif error >= _E2:
        step1 *= 2
    return step1 if stop >= start else -step1


def nice_domain(start: float, stop: float, count: int = 10) -> Tuple[float, float]:
    """Extend a domain outward to round tick values."""
    if start > stop:
        lo, hi = nice_domain(stop, start, count)
        return hi, lo

    prev_step = None
    for _ in range(10):
        step = tick_step(start, stop, count)
        if step == 0 or step == prev_step:
            break
        start = math.floor(start / step) * step
        stop = math.ceil(stop / step) * step
        prev_step = step
    return start, stop


class LinearScale:
    """Maps a continuous domain linearly onto a continuous range."""

    def __init__(
        self,
        domain: Tuple[float, float],
        range_: Tuple[float, float],
        clamp: bool = False,
    ):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))
        self.clamp = clamp

    def normalize(self, value: float) -> float:
        d0, d1 = self.domain
        span = d1 - d0
        if span == 0:
            # Degenerate domain maps everything to the middle of the range
            return 0.5
        t = (value - d0) / span
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return t

    def __call__(self, value: float) -> float:
        r0, r1 = self.range
        return r0 + (r1 - r0) * self.normalize(value)

    def nice(self, count: int = 10) -> "LinearScale":
        self.domain = nice_domain(self.domain[0], self.domain[1], count)
        return self

    def ticks(self, count: int = 10) -> list:
        lo, hi = sorted(self.domain)
        step = tick_step(lo, hi, count)
        if step == 0:
            return [lo]
        first = math.ceil(lo / step)
        last = math.floor(hi / step)
        return [round(i * step, 10) for i in range(first, last + 1)]


class PointScale:
    """Evenly spaced positions for a discrete domain, with outer padding in steps."""

    def __init__(
        self, domain: Sequence, range_: Tuple[float, float], padding: float = 0.5
    ):
        self.domain = list(domain)
        self.range = (float(range_[0]), float(range_[1]))
        self.padding = padding
        self._index = {value: i for i, value in enumerate(self.domain)}

    @property
    def step(self) -> float:
        n = len(self.domain)
        start, stop = self.range
        return (stop - start) / max(1, n - 1 + self.padding * 2)

    def __call__(self, value) -> float:
        n = len(self.domain)
        start, stop = self.range
        step = self.step
        offset = start + (stop - start - step * (n - 1)) * 0.5
        return offset + step * self._index[value]


def _hex_to_rgb(color: str) -> Tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


class SequentialColorScale:
    """Interpolates in RGB between two colors across a numeric domain."""

    def __init__(
        self,
        domain: Tuple[float, float],
        start_color: str = "#ff0000",
        end_color: str = "#ffff00",
    ):
        self._t = LinearScale(domain, (0.0, 1.0))
        self.start = _hex_to_rgb(start_color)
        self.end = _hex_to_rgb(end_color)

    def rgb(self, value: float) -> Tuple[int, int, int]:
        t = self._t(value)
        channels = []
        for a, b in zip(self.start, self.end):
            c = round(a + (b - a) * t)
            channels.append(min(255, max(0, c)))
        return tuple(channels)

    def __call__(self, value: float) -> str:
        r, g, b = self.rgb(value)
        return f"rgb({r}, {g}, {b})"


# Brightness encodings shared by the fire layer, chart bands and slider
radius_scale = LinearScale(BRIGHTNESS_DOMAIN, (1.0, 6.0))
color_scale = SequentialColorScale(BRIGHTNESS_DOMAIN, "#ff0000", "#ffff00")
opacity_scale = LinearScale(BRIGHTNESS_DOMAIN, (0.35, 0.9), clamp=True)
