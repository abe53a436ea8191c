"""
Map projection collaborator.

Projects lon/lat onto the lower 48 with CONUS Albers equal-area (EPSG:5070)
and moves Alaska (EPSG:3338) and Hawaii (Hawaii Albers) into inset boxes in
the lower-left corner, so every US fire lands inside the viewport. Pixel y
grows downward, like screen space.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

from pyproj import Transformer
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

Extent = Tuple[float, float, float, float]  # (west, south, east, north)
Box = Tuple[float, float, float, float]  # pixel (x0, y0, x1, y1)
PixelBounds = Tuple[Tuple[float, float], Tuple[float, float]]
Line = List[Optional[Tuple[float, float]]]

CONUS_EXTENT: Extent = (-125.0, 24.0, -66.0, 49.0)
ALASKA_EXTENT: Extent = (-170.0, 51.0, -129.0, 72.0)
HAWAII_EXTENT: Extent = (-160.5, 18.5, -154.5, 22.5)

ALASKA_CRS = "EPSG:3338"
HAWAII_CRS = (
    "+proj=aea +lat_0=13 +lon_0=-157 +lat_1=8 +lat_2=18 +datum=WGS84 +units=m +no_defs"
)

# Inset boxes as fractions of the viewport (x0, y0, x1, y1)
ALASKA_BOX = (0.01, 0.74, 0.23, 0.985)
HAWAII_BOX = (0.24, 0.84, 0.36, 0.985)

GRATICULE_STEP_DEG = 10
# Lower-48 graticule drawn over a slightly wider area than the fitted extent
GRATICULE_EXTENT: Extent = (-130.0, 20.0, -60.0, 50.0)


def _outline(extent: Extent, samples: int = 20) -> Tuple[List[float], List[float]]:
    """Points along the border of a lon/lat extent; parallels are curved in Albers."""
    west, south, east, north = extent
    lons, lats = [], []
    for i in range(samples + 1):
        lon = west + (east - west) * i / samples
        lat = south + (north - south) * i / samples
        lons += [lon, lon, west, east]
        lats += [south, north, lat, lat]
    return lons, lats


class ProjectedArea:
    """One conic projection fitted into a pixel box."""

    def __init__(self, name: str, crs: str, extent: Extent, box: Box):
        self.name = name
        self.extent = extent
        self.box = box
        self._transformer = Transformer.from_crs("EPSG:4326", crs, always_xy=True)

        xs, ys = self._transformer.transform(*_outline(extent))
        x0, x1 = min(xs), max(xs)
        y0, y1 = min(ys), max(ys)
        bx0, by0, bx1, by1 = box
        self.scale = min((bx1 - bx0) / (x1 - x0), (by1 - by0) / (y1 - y0))
        self._cx, self._cy = (x0 + x1) / 2, (y0 + y1) / 2
        self._px, self._py = (bx0 + bx1) / 2, (by0 + by1) / 2

    def _to_pixels(self, x: float, y: float) -> Tuple[float, float]:
        return self._px + self.scale * (x - self._cx), self._py - self.scale * (y - self._cy)

    def project(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        try:
            x, y = self._transformer.transform(lon, lat)
        except Exception:
            return None
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        return self._to_pixels(x, y)

    def project_ring(self, coords: Sequence) -> List[Tuple[float, float]]:
        lons = [c[0] for c in coords]
        lats = [c[1] for c in coords]
        xs, ys = self._transformer.transform(lons, lats)
        ring = []
        for x, y in zip(xs, ys):
            if not (math.isfinite(x) and math.isfinite(y)):
                raise ValueError("Ring contains coordinates outside the projection")
            ring.append(self._to_pixels(x, y))
        return ring

    def contains_pixel(self, x: float, y: float) -> bool:
        x0, y0, x1, y1 = self.box
        return x0 <= x <= x1 and y0 <= y <= y1

    def graticule(
        self, extent: Extent, step: int, exclude: Sequence["ProjectedArea"] = ()
    ) -> List[Line]:
        """
        Meridians and parallels every ``step`` degrees inside ``extent``,
        clipped to this area's box. ``None`` entries break a line.
        """
        west, south, east, north = extent
        lines: List[List[Tuple[float, float]]] = []
        lon = math.ceil(west / step) * step
        while lon <= east:
            lines.append([(lon, south + (north - south) * i / 30) for i in range(31)])
            lon += step
        lat = math.ceil(south / step) * step
        while lat <= north:
            lines.append([(west + (east - west) * i / 60, lat) for i in range(61)])
            lat += step

        clipped = []
        for geo_line in lines:
            line: Line = []
            for lon, lat in geo_line:
                p = self.project(lon, lat)
                if (
                    p is None
                    or not self.contains_pixel(*p)
                    or any(a.contains_pixel(*p) for a in exclude)
                ):
                    if line and line[-1] is not None:
                        line.append(None)
                    continue
                line.append(p)
            if any(p is not None for p in line):
                clipped.append(line)
        return clipped


def in_alaska(lon: float, lat: float) -> bool:
    """Rough geographic test used to route points and polygons to the Alaska inset."""
    if lon >= 172 or lon <= -141:
        return lat >= 51
    if lon <= -129:
        return lat >= 54.5
    return False


def in_hawaii(lon: float, lat: float) -> bool:
    return -161 <= lon <= -154 and 18 <= lat <= 23


class AlbersProjection:
    """
    Composite US Albers projection fitted to a ``width`` x ``height`` viewport.

    Args:
        width: Viewport width in pixels
        height: Viewport height in pixels
        extent: Lower-48 extent (west, south, east, north) to fit
        margin: Pixels kept free around the lower-48 extent
    """

    def __init__(
        self,
        width: float,
        height: float,
        extent: Extent = CONUS_EXTENT,
        margin: float = 10.0,
        crs: str = "EPSG:5070",
    ):
        self.width = float(width)
        self.height = float(height)

        def frac(box):
            return (
                box[0] * self.width,
                box[1] * self.height,
                box[2] * self.width,
                box[3] * self.height,
            )

        self.lower48 = ProjectedArea(
            "Lower 48",
            crs,
            extent,
            (margin, margin, self.width - margin, self.height - margin),
        )
        self.alaska = ProjectedArea("Alaska", ALASKA_CRS, ALASKA_EXTENT, frac(ALASKA_BOX))
        self.hawaii = ProjectedArea("Hawaii", HAWAII_CRS, HAWAII_EXTENT, frac(HAWAII_BOX))
        self.insets = (self.alaska, self.hawaii)

    def area_for(self, lon: float, lat: float) -> ProjectedArea:
        if in_alaska(lon, lat):
            return self.alaska
        if in_hawaii(lon, lat):
            return self.hawaii
        return self.lower48

    def project(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        """Pixel position of (lon, lat), or None when it cannot be projected."""
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return None
        return self.area_for(lon, lat).project(lon, lat)

    def __call__(self, lon: float, lat: float) -> Optional[Tuple[float, float]]:
        return self.project(lon, lat)

    def path(self, geometry: BaseGeometry) -> List[List[Tuple[float, float]]]:
        """
        Drawable outline: a list of closed pixel rings (exteriors and holes).

        Each polygon part is drawn in the area (lower 48 or an inset) that
        holds its representative point.

        Raises:
            ValueError: geometry is not a (multi)polygon or cannot be projected
        """
        if isinstance(geometry, Polygon):
            polygons = [geometry]
        elif isinstance(geometry, MultiPolygon):
            polygons = list(geometry.geoms)
        else:
            raise ValueError(f"Cannot draw geometry of type {geometry.geom_type}")

        rings = []
        for polygon in polygons:
            if polygon.is_empty:
                continue
            anchor = polygon.representative_point()
            area = self.area_for(anchor.x, anchor.y)
            rings.append(area.project_ring(polygon.exterior.coords))
            for interior in polygon.interiors:
                rings.append(area.project_ring(interior.coords))
        return rings

    def bounds(self, geometry: BaseGeometry) -> Optional[PixelBounds]:
        """Projected pixel bounds ((x0, y0), (x1, y1)), or None if nothing projects."""
        rings = self.path(geometry)
        points = [p for ring in rings for p in ring]
        if not points:
            return None
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return (min(xs), min(ys)), (max(xs), max(ys))

    @property
    def inset_boxes(self) -> Dict[str, Box]:
        return {area.name: area.box for area in self.insets}

    def graticule(self, step: int = GRATICULE_STEP_DEG) -> List[Line]:
        """Grid lines for the lower 48 (kept out of the insets) and for each inset."""
        lines = self.lower48.graticule(GRATICULE_EXTENT, step, exclude=self.insets)
        for area in self.insets:
            west, south, east, north = area.extent
            lines += area.graticule((west - 1, south - 1, east + 1, north + 1), step)
        return lines

    def graticule_labels(
        self, step: int = GRATICULE_STEP_DEG
    ) -> List[Tuple[float, float, str]]:
        """
        (x, y, text) labels: longitudes along the top edge at 40°N, latitudes
        along the left edge at 95°W.
        """
        labels = []
        for lon in range(-180, 181, step):
            p = self.lower48.project(lon, 40)
            if p is not None and 0 <= p[0] <= self.width:
                labels.append((p[0], 14.0, f"{lon}°"))
        for lat in range(-90, 91, step):
            p = self.lower48.project(-95, lat)
            if p is not None and 0 <= p[1] <= self.height:
                labels.append((8.0, p[1] + 4, f"{lat}°"))
        return labels
