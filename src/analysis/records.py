"""Core record types: fire detections and named region boundaries."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep


class DayNight(str, Enum):
    """Satellite overpass flag for a detection."""

    DAY = "Day"
    NIGHT = "Night"
    UNKNOWN = "Unknown"

    @classmethod
    def from_flag(cls, raw) -> "DayNight":
        """Map a FIRMS day/night flag ("D", "N", "Day", ...) to the enum."""
        flag = str(raw or "").strip().upper()
        if flag in ("D", "DAY"):
            return cls.DAY
        if flag in ("N", "NIGHT"):
            return cls.NIGHT
        return cls.UNKNOWN


@dataclass(eq=False)
class FireRecord:
    """
    One satellite hotspot detection.

    Created once at load time. ``containing_regions`` stays ``None`` until the
    containment indexer assigns it; readers treat ``None`` as the empty set.
    """

    id: str
    coordinates: Optional[Tuple[float, float]]  # (lon, lat)
    brightness: Optional[float]
    acquired: Optional[datetime]
    day_night: DayNight = DayNight.UNKNOWN
    acq_date: Optional[str] = None
    acq_time: Optional[str] = None
    containing_regions: Optional[FrozenSet[str]] = field(default=None, repr=False)

    @property
    def month(self) -> Optional[int]:
        """Calendar month (1-12) of acquisition, or None if the date is unusable."""
        return self.acquired.month if self.acquired is not None else None

    @property
    def regions(self) -> FrozenSet[str]:
        return self.containing_regions or frozenset()

    @property
    def is_indexed(self) -> bool:
        return self.containing_regions is not None

    def assign_regions(self, names: FrozenSet[str]):
        """Record the containing regions. Allowed exactly once per record."""
        if self.containing_regions is not None:
            raise RuntimeError(f"Fire record {self.id} was already indexed")
        self.containing_regions = frozenset(names)


@dataclass(eq=False)
class RegionPolygon:
    """A named (multi)polygon boundary, read-only after load."""

    name: str
    geometry: BaseGeometry

    def __post_init__(self):
        self._prepared = None

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Geographic bounding box (min_lon, min_lat, max_lon, max_lat)."""
        return self.geometry.bounds

    def contains(self, lon: float, lat: float) -> bool:
        """Exact containment test, boundary inclusive."""
        if self._prepared is None:
            self._prepared = prep(self.geometry)
        return self._prepared.covers(Point(lon, lat))
