import sys
from datetime import datetime
from pathlib import Path

import pytest
from shapely.geometry import box

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from src.analysis.records import DayNight, FireRecord, RegionPolygon  # noqa: E402


class GridProjection:
    """Plain equirectangular stand-in: 10 px per degree, y grows downward."""

    def __init__(self, scale=10.0):
        self.scale = scale

    def project(self, lon, lat):
        return lon * self.scale, -lat * self.scale

    def __call__(self, lon, lat):
        return self.project(lon, lat)

    def path(self, geometry):
        return [[self.project(x, y) for x, y in geometry.exterior.coords]]

    def bounds(self, geometry):
        if geometry.is_empty:
            return None
        min_lon, min_lat, max_lon, max_lat = geometry.bounds
        return self.project(min_lon, max_lat), self.project(max_lon, min_lat)


def make_fire(
    id,
    lon=0.5,
    lat=0.5,
    brightness=400.0,
    month=6,
    year=2023,
    day_night=DayNight.DAY,
):
    acquired = datetime(year, month, 15, 12, 30) if month is not None else None
    return FireRecord(
        id=str(id),
        coordinates=(lon, lat) if lon is not None else None,
        brightness=brightness,
        acquired=acquired,
        day_night=day_night,
        acq_date=acquired.strftime("%Y-%m-%d") if acquired else None,
        acq_time="1230" if acquired else None,
    )


@pytest.fixture
def regions():
    """Two unit squares side by side sharing the lon=1 edge, plus an empty one."""
    return [
        RegionPolygon("Alpha", box(0, 0, 1, 1)),
        RegionPolygon("Beta", box(1, 0, 2, 1)),
    ]


@pytest.fixture
def projection():
    return GridProjection()


@pytest.fixture
def fires():
    return [
        make_fire("a1", 0.5, 0.5, brightness=320, month=1),
        make_fire("a2", 0.5, 0.5, brightness=330, month=1),
        make_fire("a3", 0.2, 0.8, brightness=400, month=12),
        make_fire("b1", 1.5, 0.5, brightness=500, month=11),
        make_fire("b2", 1.5, 0.5, brightness=450, month=7),
        make_fire("x1", 5.0, 5.0, brightness=360, month=3),
    ]
