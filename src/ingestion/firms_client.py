import httpx
from io import StringIO
from typing import Any, Dict, List

import pandas as pd


class FIRMSClient:
    """Client for NASA FIRMS active fire data."""

    BASE_URL = "https://firms.modaps.eosdis.nasa.gov/api/area/csv"

    def __init__(self, api_key: str, timeout: float = 30.0):
        self.api_key = api_key
        self.client = httpx.Client(timeout=timeout)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.client.close()

    def get_active_fires(
        self,
        bbox: tuple,  # (west, south, east, north)
        days: int = 1,
        source: str = "VIIRS_SNPP_NRT",
    ) -> pd.DataFrame:
        """
        Fetch active fire detections.

        Args:
            bbox: Bounding box (west, south, east, north) in WGS84
            days: Number of days to look back (1-10)
            source: Satellite source (VIIRS_SNPP_NRT, VIIRS_NOAA20_NRT, MODIS_NRT)

        Returns:
            DataFrame with one row per detection, as returned by FIRMS
        """
        url = f"{self.BASE_URL}/{self.api_key}/{source}/{bbox[0]},{bbox[1]},{bbox[2]},{bbox[3]}/{days}"

        response = self.client.get(url)
        response.raise_for_status()

        return pd.read_csv(StringIO(response.text))


def detections_to_features(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Convert FIRMS CSV rows into point features the map loader understands.

    VIIRS reports brightness as ``bright_ti4``, MODIS as ``brightness``.
    """
    if df.empty:
        return []

    brightness_col = "bright_ti4" if "bright_ti4" in df.columns else "brightness"
    features = []
    for i, row in enumerate(df.itertuples(index=False)):
        row = row._asdict()
        acq_time = row.get("acq_time")
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "Point",
                    "coordinates": [float(row["longitude"]), float(row["latitude"])],
                },
                "properties": {
                    "id": f"{row.get('acq_date')}_{i}",
                    "BRIGHTNESS": row.get(brightness_col),
                    "ACQ_DATE": row.get("acq_date"),
                    "ACQ_TIME": str(int(acq_time)).zfill(4)
                    if pd.notna(acq_time)
                    else None,
                    "DAYNIGHT": row.get("daynight"),
                },
            }
        )
    return features
