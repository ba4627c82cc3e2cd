import os
import tempfile

os.environ.setdefault("MPLBACKEND", "Agg")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="pm25_logs_"))

import numpy as np
import pandas as pd
import pytest

from config.constants import WEEKDAYS

# One representative concentration per AQI band
BAND_CONCENTRATIONS = [5.0, 20.0, 45.0, 100.0, 200.0, 300.0]

SITES = [
    # state name, state code, county code, site num, lat, lon
    ("California", 6, 37, 1103, 34.0669, -118.2272),
    ("California", 6, 73, 1201, 32.7015, -117.1496),
    ("Texas", 48, 201, 1035, 29.7337, -95.2575),
    ("New York", 36, 61, 135, 40.8160, -73.9020),
]


@pytest.fixture
def raw_measurements():
    """EPA AirData style hourly export, 4 sites x 4 days."""
    rng = np.random.RandomState(0)
    timestamps = pd.date_range("2024-01-01 00:00", periods=96, freq="h")

    rows = []
    for state, state_code, county_code, site_num, lat, lon in SITES:
        for i, ts in enumerate(timestamps):
            base = BAND_CONCENTRATIONS[(i + site_num) % len(BAND_CONCENTRATIONS)]
            rows.append({
                "State Code": state_code,
                "County Code": county_code,
                "Site Num": site_num,
                "Latitude": lat,
                "Longitude": lon,
                "Date Local": ts.strftime("%Y-%m-%d"),
                "Time Local": ts.strftime("%H:%M"),
                "Sample Measurement": round(base + rng.uniform(-2, 2), 1),
                "Units of Measure": "Micrograms/cubic meter (LC)",
                "State Name": state,
                "County Name": "Some County",
            })
    return pd.DataFrame(rows)


@pytest.fixture
def raw_csv(tmp_path, raw_measurements):
    path = tmp_path / "hourly_pm25.csv"
    raw_measurements.to_csv(path, index=False)
    return str(path)


@pytest.fixture
def modeling_frame():
    """Feature frame where the AQI category is driven by the hour of day."""
    rng = np.random.RandomState(42)
    n = 180
    hour = rng.randint(0, 24, size=n)
    category = np.where(hour < 8, "Good", np.where(hour < 16, "Moderate", "Unhealthy"))

    return pd.DataFrame({
        "hour": hour,
        "latitude": rng.uniform(30, 45, size=n),
        "longitude": rng.uniform(-120, -75, size=n),
        "weekday": rng.choice(WEEKDAYS, size=n),
        "aqi_category": category,
    })
