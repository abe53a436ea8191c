import pandas as pd

from src.ingestion.firms_client import detections_to_features


def test_viirs_rows_become_point_features():
    df = pd.DataFrame(
        [
            {
                "latitude": 38.1,
                "longitude": -120.2,
                "bright_ti4": 355.4,
                "acq_date": "2024-08-01",
                "acq_time": 930,
                "daynight": "D",
            }
        ]
    )
    (feature,) = detections_to_features(df)
    assert feature["geometry"]["coordinates"] == [-120.2, 38.1]
    assert feature["properties"] == {
        "id": "2024-08-01_0",
        "BRIGHTNESS": 355.4,
        "ACQ_DATE": "2024-08-01",
        "ACQ_TIME": "0930",
        "DAYNIGHT": "D",
    }


def test_modis_brightness_column_is_used():
    df = pd.DataFrame(
        [{"latitude": 1.0, "longitude": 2.0, "brightness": 330.0, "acq_date": "2024-01-01"}]
    )
    (feature,) = detections_to_features(df)
    assert feature["properties"]["BRIGHTNESS"] == 330.0
    assert feature["properties"]["ACQ_TIME"] is None


def test_empty_frame_gives_no_features():
    assert detections_to_features(pd.DataFrame()) == []
