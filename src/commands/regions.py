"""Region presets and region listings."""

from typing import Any, Dict, List, Tuple

from src.config import REGIONS_GEOJSON
from src.ingestion.geojson_loader import load_regions

BBox = Tuple[float, float, float, float]

# Fetch presets: (west, south, east, north), keyed by state name with its
# postal abbreviation as an alias
STATE_PRESETS: Dict[str, Tuple[str, BBox]] = {
    "California": ("ca", (-124.5, 32.5, -114.13, 42.0)),
    "Oregon": ("or", (-124.6, 41.9, -116.5, 46.3)),
    "Washington": ("wa", (-124.8, 45.5, -116.9, 49.0)),
    "Nevada": ("nv", (-120.0, 35.0, -114.0, 42.0)),
    "Arizona": ("az", (-114.8, 31.3, -109.0, 37.0)),
    "New Mexico": ("nm", (-109.0, 31.3, -103.0, 37.0)),
    "Colorado": ("co", (-109.1, 37.0, -102.0, 41.0)),
    "Montana": ("mt", (-116.1, 44.4, -104.0, 49.0)),
    "Idaho": ("id", (-117.2, 41.9, -111.0, 49.0)),
    "Wyoming": ("wy", (-111.1, 41.0, -104.0, 45.0)),
    "Texas": ("tx", (-106.7, 25.8, -93.5, 36.5)),
    "Oklahoma": ("ok", (-103.0, 33.6, -94.4, 37.0)),
    "Florida": ("fl", (-87.6, 24.5, -80.0, 31.0)),
    "Georgia": ("ga", (-85.6, 30.4, -80.8, 35.0)),
}

AREA_PRESETS: Dict[str, BBox] = {
    "conus": (-125, 24, -66, 49),
    "pacific-northwest": (-124.8, 41.9, -111.0, 49.0),
    "southwest": (-124.5, 31.3, -109.0, 42.0),
    "rocky-mountains": (-117.2, 37.0, -102.0, 49.0),
    "southeast": (-94.1, 24.5, -75.4, 36.6),
}


def _preset_table() -> Dict[str, BBox]:
    table = dict(AREA_PRESETS)
    for name, (abbr, bbox) in STATE_PRESETS.items():
        table[name.lower().replace(" ", "-")] = bbox
        table[abbr] = bbox
    return table


def get_region_bbox(region: str) -> BBox | None:
    """
    Get bounding box for a named preset.

    Args:
        region: Preset name (e.g., "california", "ca", "conus")

    Returns:
        Bounding box (west, south, east, north) or None if not found
    """
    return _preset_table().get(region.lower().replace(" ", "-"))


def get_preset_names() -> List[str]:
    return sorted(_preset_table())


def list_map_regions(regions_path: str = REGIONS_GEOJSON) -> Dict[str, Any]:
    """
    Names of the regions in the boundary dataset, with their bounding boxes.

    Returns:
        {"success": bool, "regions": [{"name", "bbox"}], "message": str}
    """
    try:
        regions = load_regions(regions_path)
    except Exception as e:
        return {"success": False, "regions": [], "message": f"Error: {str(e)}"}

    items = [
        {"name": r.name, "bbox": [round(v, 3) for v in r.bounds]}
        for r in sorted(regions, key=lambda r: r.name)
    ]
    return {
        "success": True,
        "regions": items,
        "message": f"Found {len(items)} regions in {regions_path}",
    }
