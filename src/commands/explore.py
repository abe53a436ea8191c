"""Dataset exploration commands - CLI compatible."""

from typing import Any, Dict, Iterable, Optional

from src.analysis.buckets import snap_to_notch
from src.analysis.monthly_chart import monthly_average
from src.config import FIRES_GEOJSON, REGIONS_GEOJSON
from src.filters.filter_state import FilterState
from src.filters.pipeline import derive_chart_subset, derive_visible
from src.filters.seasons import (
    MONTH_NAMES,
    SEASON_NAMES,
    describe_regions,
    describe_time_frame,
    months_for_seasons,
)
from src.session import FireMapSession


def open_session(
    fires_path: str = FIRES_GEOJSON, regions_path: str = REGIONS_GEOJSON
) -> FireMapSession:
    """Load both datasets and run the containment pass synchronously."""
    session = FireMapSession.from_files(fires_path, regions_path)
    session.index_regions()
    return session


def summarize_session(session: FireMapSession) -> Dict[str, Any]:
    """
    Counts describing a loaded session.

    Returns:
        {
            "success": bool,
            "total_fires": int,
            "total_regions": int,
            "unknown_region": int,
            "date_range": tuple or None,
            "per_notch": {notch: count},
            "per_season": {season: count},
            "message": str
        }
    """
    full = session.buckets[session.buckets.notches[0]]
    per_season = {}
    for season in SEASON_NAMES:
        months = months_for_seasons([season])
        per_season[season] = sum(1 for r in full if r.month in months)

    date_range = None
    if session.first_date and session.last_date:
        date_range = (str(session.first_date), str(session.last_date))

    unknown = sum(1 for r in session.records if not r.regions)
    return {
        "success": True,
        "total_fires": len(session.records),
        "total_regions": len(session.regions),
        "unknown_region": unknown,
        "date_range": date_range,
        "per_notch": session.buckets.counts(),
        "per_season": per_season,
        "message": f"Found {len(session.records)} fires across {len(session.regions)} regions",
    }


def get_dataset_summary(
    fires_path: str = FIRES_GEOJSON, regions_path: str = REGIONS_GEOJSON
) -> Dict[str, Any]:
    try:
        return summarize_session(open_session(fires_path, regions_path))
    except Exception as e:
        return {
            "success": False,
            "total_fires": 0,
            "total_regions": 0,
            "unknown_region": 0,
            "date_range": None,
            "per_notch": {},
            "per_season": {},
            "message": f"Error reading fire data: {str(e)}",
        }


def describe_visible(
    session: FireMapSession,
    seasons: Iterable[str],
    brightness: float,
    regions: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Visible fires and monthly averages for a filter combination."""
    state = FilterState.create(
        seasons=seasons,
        brightness=snap_to_notch(brightness, session.buckets.notches),
        regions=regions or (),
    )
    visible = derive_visible(session.buckets, state)
    averages = monthly_average(derive_chart_subset(session.buckets, state))

    return {
        "success": True,
        "visible_fires": len(visible),
        "brightness_threshold": state.brightness_threshold,
        "seasons": sorted(state.selected_seasons),
        "regions": sorted(state.selected_regions),
        "time_frame": describe_time_frame(
            state.selected_seasons, session.first_date, session.last_date
        ),
        "regions_label": describe_regions(state.selected_regions),
        "monthly_average": {
            MONTH_NAMES[i]: round(a, 2) if a is not None else None
            for i, a in enumerate(averages)
        },
        "message": f"{len(visible)} fires match the filters",
    }


def get_visible_fires(
    seasons: Iterable[str],
    brightness: float,
    regions: Optional[Iterable[str]] = None,
    fires_path: str = FIRES_GEOJSON,
    regions_path: str = REGIONS_GEOJSON,
) -> Dict[str, Any]:
    try:
        session = open_session(fires_path, regions_path)
        unknown = sorted(set(regions or ()) - set(session.region_names))
        if unknown:
            return {
                "success": False,
                "visible_fires": 0,
                "message": f"Unknown region(s): {', '.join(unknown)}",
            }
        return describe_visible(session, seasons, brightness, regions)
    except Exception as e:
        return {
            "success": False,
            "visible_fires": 0,
            "message": f"Error: {str(e)}",
        }
