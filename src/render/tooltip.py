"""Display fields for the hover tooltip of a fire point."""

import math
from typing import Dict, Optional

from src.analysis.records import FireRecord


def format_brightness(brightness: Optional[float]) -> str:
    if brightness is None or not math.isfinite(brightness):
        return "N/A"
    return f"{brightness:.2f}"


def format_acquisition(record: FireRecord) -> str:
    """
    "M/D/YYYY HH:MM" from the acquisition date and optional HHMM time.

    Unparseable dates fall back to the raw string, missing ones to "unknown".
    """
    if not record.acq_date:
        return "unknown"
    if record.acquired is None:
        return str(record.acq_date)

    d = record.acquired
    date_part = f"{d.month}/{d.day}/{d.year}"

    if record.acq_time not in (None, ""):
        t = str(record.acq_time).zfill(4)
        hh, mm = t[:2], t[2:4]
        if hh.isdigit() and mm.isdigit():
            return f"{date_part} {hh}:{mm}"

    return f"{date_part} {d:%H:%M:%S}"


def region_label(record: FireRecord) -> str:
    if not record.regions:
        return "Unknown"
    return ", ".join(sorted(record.regions))


def on_hover_record(record: FireRecord) -> Dict[str, Optional[str]]:
    """Tooltip fields for ``record``; lat/lon are None when coordinates are unusable."""
    lat = lon = None
    if record.coordinates is not None:
        x, y = record.coordinates
        if math.isfinite(x) and math.isfinite(y):
            lat, lon = f"{y:.4f}°", f"{x:.4f}°"

    return {
        "brightness": format_brightness(record.brightness),
        "formatted_date": format_acquisition(record),
        "day_night": record.day_night.value,
        "region_label": region_label(record),
        "lat": lat,
        "lon": lon,
    }
