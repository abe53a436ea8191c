from prefect import flow, task
from prefect.tasks import task_input_hash
from datetime import timedelta
from pathlib import Path
import json

import pandas as pd

from src.config import FIRMS_API_KEY, FIRMS_SOURCE, FIRES_GEOJSON
from src.ingestion.firms_client import FIRMSClient, detections_to_features
from src.analysis.buckets import NOTCH_MIN
from src.utils import log


@task(cache_key_fn=task_input_hash, cache_expiration=timedelta(hours=3))
def fetch_active_fires(
    api_key: str,
    bbox: tuple[float, float, float, float],
    days: int = 1,
    source: str = FIRMS_SOURCE,
) -> pd.DataFrame:
    """
    Fetch active fires from FIRMS.

    Args:
        api_key: FIRMS API key
        bbox: Bounding box (west, south, east, north)
        days: Days to look back
        source: FIRMS satellite source
    """
    with FIRMSClient(api_key) as client:
        return client.get_active_fires(bbox, days, source)


@task
def to_point_features(detections: pd.DataFrame, min_brightness: float) -> list[dict]:
    """Convert detections to map point features, dropping those below the slider floor."""
    features = detections_to_features(detections)
    kept = [
        f
        for f in features
        if f["properties"]["BRIGHTNESS"] is not None
        and f["properties"]["BRIGHTNESS"] >= min_brightness
    ]
    log(f"   Kept {len(kept)}/{len(features)} detections with brightness >= {min_brightness}")
    return kept


@task
def export_feature_collection(features: list[dict], output_path: str) -> str:
    """Write the features as a GeoJSON FeatureCollection."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump({"type": "FeatureCollection", "features": features}, f, default=str)
    return output_path


@flow(name="Fire Map Dataset Build")
def fire_dataset_flow(
    bbox: tuple[float, float, float, float],
    days_back: int = 2,
    output_path: str = FIRES_GEOJSON,
    min_brightness: float = NOTCH_MIN,
    source: str = FIRMS_SOURCE,
) -> int:
    """
    Build the fire point dataset used by the map.

    Args:
        bbox: Bounding box (west, south, east, north) to fetch
        days_back: Number of days to look back for fire data (1-10)
        output_path: Where to write the GeoJSON
        min_brightness: Drop detections dimmer than this
        source: FIRMS satellite source

    Returns:
        Number of features written
    """
    if not FIRMS_API_KEY:
        raise RuntimeError("FIRMS_API_KEY not set in environment or .env file")

    log(f"🔥 Fetching {source} detections for {bbox} (last {days_back} days)...")
    detections: pd.DataFrame = fetch_active_fires(FIRMS_API_KEY, bbox, days_back, source)  # type: ignore[assignment]

    if detections.empty:
        log("No fires detected")
        features = []
    else:
        features = to_point_features(detections, min_brightness)  # type: ignore[assignment]

    _ = export_feature_collection(features, output_path)
    log(f"✓ Wrote {len(features)} fires to {output_path}")
    return len(features)


# NOTE: FIRMS API has ~24hr processing delay, use days_back=2 for recent fires
# NOTE: setting more than 10 days back will return nothing from FIRMS API
if __name__ == "__main__":
    fire_dataset_flow(bbox=(-125, 24, -66, 49), days_back=2)
