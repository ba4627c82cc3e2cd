import numpy as np
import pandas as pd
import pytest

from config.constants import WEEKDAYS
from data_pipeline.load_measurements import (
    build_site_id,
    clean_measurements,
    load_measurements,
    normalize_columns
)


def test_load_measurements_derives_time_features(raw_csv, raw_measurements):
    df = load_measurements(raw_csv)

    assert len(df) == len(raw_measurements)
    assert {"timestamp", "pm2_5", "latitude", "longitude", "state", "site_id", "hour", "weekday"} <= set(df.columns)
    assert df["hour"].between(0, 23).all()
    assert list(df["weekday"].cat.categories) == WEEKDAYS

    # 2024-01-01 was a Monday
    first = df.iloc[0]
    assert first["timestamp"] == pd.Timestamp("2024-01-01 00:00")
    assert first["weekday"] == "Monday"
    assert df["timestamp"].is_monotonic_increasing


def test_site_id_from_epa_codes(raw_measurements):
    df = clean_measurements(raw_measurements)
    assert "06-037-1103" in set(df["site_id"])
    assert df["site_id"].nunique() == 4


def test_site_id_falls_back_to_coordinates():
    df = pd.DataFrame({"latitude": [34.06691], "longitude": [-118.22723]})
    assert build_site_id(df).iloc[0] == "34.0669,-118.2272"


def test_clean_drops_missing_and_negative_readings(raw_measurements):
    raw = raw_measurements.copy()
    raw.loc[0, "Sample Measurement"] = np.nan
    raw.loc[1, "Sample Measurement"] = -1.5
    raw.loc[2, "Date Local"] = "not-a-date"

    df = clean_measurements(raw)

    assert len(df) == len(raw) - 3
    assert (df["pm2_5"] >= 0).all()


def test_snake_case_input_is_accepted():
    raw = pd.DataFrame({
        "pm2_5": [8.0, 40.0],
        "date": ["2024-03-02", "2024-03-02"],
        "time": ["07:00", "19:00"],
        "latitude": [47.6, 47.6],
        "longitude": [-122.3, -122.3],
        "state": ["Washington", "Washington"],
    })
    df = clean_measurements(raw)

    assert df["hour"].tolist() == [7, 19]
    assert df["weekday"].astype(str).tolist() == ["Saturday", "Saturday"]


def test_missing_required_columns():
    with pytest.raises(ValueError, match="Missing required columns"):
        normalize_columns(pd.DataFrame({"Sample Measurement": [1.0]}))


def test_all_rows_invalid_raises(raw_measurements):
    raw = raw_measurements.copy()
    raw["Sample Measurement"] = -1.0
    with pytest.raises(ValueError, match="No valid measurements"):
        clean_measurements(raw)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_measurements(str(tmp_path / "nope.csv"))


def test_existing_site_id_is_kept():
    raw = pd.DataFrame({
        "pm2_5": [8.0, 40.0],
        "date": ["2024-03-02", "2024-03-02"],
        "time": ["07:00", "19:00"],
        "latitude": [47.6, 47.6],
        "longitude": [-122.3, -122.3],
        "state": ["Washington", "Washington"],
        "site_id": ["53-033-0030", "53-033-0030"],
    })
    df = clean_measurements(raw)

    assert df["site_id"].tolist() == ["53-033-0030", "53-033-0030"]
