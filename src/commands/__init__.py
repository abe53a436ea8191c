"""Command functions for the CLI and the web app."""

from .fetch_fires import fetch_fires_for_region, fetch_fires_for_bbox
from .explore import get_dataset_summary, get_visible_fires
from .regions import list_map_regions

__all__ = [
    "fetch_fires_for_region",
    "fetch_fires_for_bbox",
    "get_dataset_summary",
    "get_visible_fires",
    "list_map_regions",
]
