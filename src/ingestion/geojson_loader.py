"""Load fire point and region polygon GeoJSON into core record types."""

import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import geopandas as gpd
import pandas as pd
from shapely.geometry import shape

from src.analysis.records import DayNight, FireRecord, RegionPolygon
from src.utils import log

# Property names that may carry the day/night flag, checked in order
DAYNIGHT_FIELDS = ("DAYNIGHT", "DAY_NIGHT", "DAY")


def _number(value) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _coordinates(geometry: Optional[Dict[str, Any]]) -> Optional[Tuple[float, float]]:
    if not geometry:
        return None
    coords = geometry.get("coordinates")
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    lon, lat = _number(coords[0]), _number(coords[1])
    if lon is None or lat is None:
        return None
    return lon, lat


def parse_acquisition(acq_date, acq_time=None) -> Optional[datetime]:
    """
    Acquisition timestamp from a date string and optional HHMM time.

    Returns None when the date cannot be parsed.
    """
    if acq_date is None or (isinstance(acq_date, float) and math.isnan(acq_date)):
        return None
    stamp = pd.to_datetime(str(acq_date), errors="coerce")
    if pd.isna(stamp):
        return None
    stamp = stamp.to_pydatetime().replace(tzinfo=None)

    if acq_time not in (None, ""):
        t = str(acq_time).zfill(4)
        if t[:2].isdigit() and t[2:4].isdigit():
            hh, mm = int(t[:2]), int(t[2:4])
            if hh < 24 and mm < 60:
                stamp = stamp.replace(hour=hh, minute=mm)
    return stamp


def _clock(acq_time) -> Optional[str]:
    """Normalise ACQ_TIME (int, float or string) to its HHMM string form."""
    if acq_time is None or acq_time == "":
        return None
    if isinstance(acq_time, float):
        return str(int(acq_time)) if math.isfinite(acq_time) else None
    return str(acq_time).split(".")[0]


def _day_night(properties: Dict[str, Any]) -> DayNight:
    for name in DAYNIGHT_FIELDS:
        value = properties.get(name)
        if value not in (None, ""):
            return DayNight.from_flag(value)
    return DayNight.UNKNOWN


def records_from_features(features: Iterable[Dict[str, Any]]) -> List[FireRecord]:
    """
    Build fire records from GeoJSON point features.

    Malformed fields are kept as None; no feature is dropped.
    """
    records = []
    for i, feature in enumerate(features):
        properties = feature.get("properties") or {}
        record_id = properties.get("id", feature.get("id", i))
        acq_date = properties.get("ACQ_DATE")
        acq_time = _clock(properties.get("ACQ_TIME"))

        records.append(
            FireRecord(
                id=str(record_id),
                coordinates=_coordinates(feature.get("geometry")),
                brightness=_number(properties.get("BRIGHTNESS")),
                acquired=parse_acquisition(acq_date, acq_time),
                day_night=_day_night(properties),
                acq_date=str(acq_date) if acq_date is not None else None,
                acq_time=acq_time,
            )
        )
    return records


def regions_from_features(features: Iterable[Dict[str, Any]]) -> List[RegionPolygon]:
    """Build named regions from polygon features; unnamed or unreadable ones are skipped."""
    regions = []
    for feature in features:
        name = (feature.get("properties") or {}).get("NAME")
        if not name:
            continue
        try:
            geometry = shape(feature["geometry"])
        except Exception as e:
            log(f"⚠️  Skipping region {name!r}: unreadable geometry ({e})")
            continue
        regions.append(RegionPolygon(name=str(name), geometry=geometry))
    return regions


def load_fire_records(path: str | Path) -> List[FireRecord]:
    """Read the fire point GeoJSON file."""
    fires_gdf = gpd.read_file(path)
    records = records_from_features(fires_gdf.iterfeatures(na="null"))
    log(f"✓ Loaded {len(records)} fire detections from {path}")
    return records


def load_regions(path: str | Path) -> List[RegionPolygon]:
    """Read the region (state) boundary GeoJSON file."""
    regions_gdf = gpd.read_file(path)
    if regions_gdf.crs is not None and regions_gdf.crs.to_epsg() != 4326:
        regions_gdf = regions_gdf.to_crs("EPSG:4326")

    regions = []
    for name, geometry in zip(regions_gdf.get("NAME", []), regions_gdf.geometry):
        if not name or geometry is None:
            continue
        regions.append(RegionPolygon(name=str(name), geometry=geometry))
    log(f"✓ Loaded {len(regions)} regions from {path}")
    return regions
