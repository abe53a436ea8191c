"""Runtime configuration loaded from the environment (.env supported)."""

import os

from dotenv import load_dotenv

_ = load_dotenv()

FIRES_GEOJSON = os.getenv("FIRES_GEOJSON", "data/fires_year.geojson")
REGIONS_GEOJSON = os.getenv("REGIONS_GEOJSON", "data/us-states.json")

FIRMS_API_KEY = os.getenv("FIRMS_API_KEY")
FIRMS_SOURCE = os.getenv("FIRMS_SOURCE", "VIIRS_SNPP_NRT")

MAP_SIZE = (
    int(os.getenv("FIREMAP_MAP_WIDTH", "960")),
    int(os.getenv("FIREMAP_MAP_HEIGHT", "600")),
)
CHART_SIZE = (
    int(os.getenv("FIREMAP_CHART_WIDTH", "420")),
    int(os.getenv("FIREMAP_CHART_HEIGHT", "220")),
)

# Delay before the containment pass starts, so the loading banner paints first
INDEX_DELAY_SECONDS = float(os.getenv("FIREMAP_INDEX_DELAY", "0.02"))
