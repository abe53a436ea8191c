"""Region selection styling and fit-to-selection viewport transforms."""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

from src.analysis.projection import PixelBounds
from src.analysis.records import RegionPolygon
from src.utils import log

FIT_PADDING_PX = 40
FIT_DAMPING = 0.95

SELECTED_FILL = "#dcdcdc"
UNSELECTED_FILL = "#1b1b1b"
REGION_STROKE = "#333"


@dataclass(frozen=True)
class ViewportTransform:
    """Scale then translate applied to the whole map layer."""

    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    @property
    def is_identity(self) -> bool:
        return self.scale == 1.0 and self.translate_x == 0.0 and self.translate_y == 0.0

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return self.scale * x + self.translate_x, self.scale * y + self.translate_y

    def visible_window(
        self, width: float, height: float
    ) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Map-space x and y ranges that end up inside the viewport."""
        x0 = (0 - self.translate_x) / self.scale
        x1 = (width - self.translate_x) / self.scale
        y0 = (0 - self.translate_y) / self.scale
        y1 = (height - self.translate_y) / self.scale
        return (x0, x1), (y0, y1)


IDENTITY = ViewportTransform()


def union_bounds(bounds: Iterable[Optional[PixelBounds]]) -> Optional[PixelBounds]:
    x0 = y0 = math.inf
    x1 = y1 = -math.inf
    for b in bounds:
        if b is None:
            continue
        (bx0, by0), (bx1, by1) = b
        x0, y0 = min(x0, bx0), min(y0, by0)
        x1, y1 = max(x1, bx1), max(y1, by1)
    if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
        return None
    return (x0, y0), (x1, y1)


def fit_transform(
    bounds: Optional[PixelBounds],
    width: float,
    height: float,
    padding: float = FIT_PADDING_PX,
    damping: float = FIT_DAMPING,
) -> Optional[ViewportTransform]:
    """
    Tightest transform placing ``bounds`` centered in the viewport.

    Returns None for missing or zero-area bounds.
    """
    if bounds is None:
        return None
    (x0, y0), (x1, y1) = bounds
    dx, dy = x1 - x0, y1 - y0
    if dx <= 0 or dy <= 0:
        return None

    k = min((width - padding) / dx, (height - padding) / dy) * damping
    cx, cy = (x0 + x1) / 2, (y0 + y1) / 2
    return ViewportTransform(
        scale=k, translate_x=width / 2 - k * cx, translate_y=height / 2 - k * cy
    )


class SelectionViewport:
    """
    Viewport state driven by the selected regions.

    The transform only changes on an explicit fit, zoom-out or reset; filter
    changes never touch it.
    """

    def __init__(
        self,
        regions: Sequence[RegionPolygon],
        projection,
        width: float,
        height: float,
    ):
        self.regions = {r.name: r for r in regions}
        self.projection = projection
        self.width = width
        self.height = height
        self.transform: ViewportTransform = IDENTITY
        self._bounds_cache: Dict[str, Optional[PixelBounds]] = {}

    def region_bounds(self, name: str) -> Optional[PixelBounds]:
        if name not in self._bounds_cache:
            region = self.regions.get(name)
            bounds = None
            if region is not None:
                try:
                    bounds = self.projection.bounds(region.geometry)
                except Exception as e:
                    log(f"⚠️  Cannot project bounds of {name!r}: {e}")
            self._bounds_cache[name] = bounds
        return self._bounds_cache[name]

    def compute_fit(self, selected: Iterable[str]) -> Optional[ViewportTransform]:
        selected = list(selected)
        if not selected:
            return None
        union = union_bounds(self.region_bounds(name) for name in selected)
        return fit_transform(union, self.width, self.height)

    def fit_to_selection(self, selected: Iterable[str]) -> bool:
        """Zoom onto the selected regions. No-op (False) when nothing fits."""
        transform = self.compute_fit(selected)
        if transform is None:
            return False
        self.transform = transform
        return True

    def zoom_out(self):
        self.transform = IDENTITY

    def region_fill(self, name: str, selected: Iterable[str]) -> str:
        return SELECTED_FILL if name in selected else UNSELECTED_FILL

    def region_styles(self, selected: Iterable[str]) -> Dict[str, str]:
        selected = set(selected)
        return {name: self.region_fill(name, selected) for name in self.regions}
