"""Fetch fire data commands - CLI compatible."""

from typing import Any, Dict, Tuple

from flows.dataset_flow import fire_dataset_flow
from src.config import FIRES_GEOJSON
from .regions import get_region_bbox


def fetch_fires_for_region(
    region: str,
    days_back: int = 2,
    output_path: str = FIRES_GEOJSON,
) -> Dict[str, Any]:
    """
    Build the fire dataset for a named preset.

    Args:
        region: Preset name (e.g., "california", "ca", "pacific-northwest")
        days_back: Number of days to look back (1-10, default 2)
        output_path: GeoJSON file to write

    Returns:
        Dictionary with results:
        {
            "success": bool,
            "fires_written": int,
            "region": str,
            "bbox": tuple,
            "output_file": str or None,
            "message": str
        }
    """
    bbox = get_region_bbox(region)

    if bbox is None:
        return {
            "success": False,
            "fires_written": 0,
            "region": region,
            "bbox": None,
            "output_file": None,
            "message": f"Unknown region: {region}. Use 'firemap presets' to see available regions.",
        }

    return fetch_fires_for_bbox(
        bbox=bbox, days_back=days_back, output_path=output_path, region_name=region
    )


def fetch_fires_for_bbox(
    bbox: Tuple[float, float, float, float],
    days_back: int = 2,
    output_path: str = FIRES_GEOJSON,
    region_name: str | None = None,
) -> Dict[str, Any]:
    """
    Build the fire dataset for a custom bounding box.

    Args:
        bbox: Bounding box (west, south, east, north) in WGS84 decimal degrees
        days_back: Number of days to look back (1-10, default 2)
        output_path: GeoJSON file to write
        region_name: Optional name for this region (for reporting)
    """
    try:
        count = fire_dataset_flow(
            bbox=bbox, days_back=days_back, output_path=output_path
        )

        return {
            "success": True,
            "fires_written": count,
            "region": region_name,
            "bbox": bbox,
            "output_file": output_path,
            "message": f"Wrote {count} fires to {output_path}"
            if count
            else "No fires detected in this area/timeframe",
        }

    except Exception as e:
        return {
            "success": False,
            "fires_written": 0,
            "region": region_name,
            "bbox": bbox,
            "output_file": None,
            "message": f"Error: {str(e)}",
        }
