import os

import pandas as pd

from config.settings import settings
from config.logging import logger
from config.constants import (
    RAW_COLUMN_MAP,
    REQUIRED_COLUMNS,
    TIMESTAMP_COLUMN,
    CONCENTRATION_COLUMN,
    WEEKDAYS
)


# =========================================================
# HELPERS
# =========================================================
def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename EPA AirData headers to internal snake_case names."""
    df = df.rename(columns={k: v for k, v in RAW_COLUMN_MAP.items() if k in df.columns})

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns in measurement CSV: {missing}")

    return df


def build_site_id(df: pd.DataFrame) -> pd.Series:
    """
    Existing site_id column, else State-County-Site code when the export
    carries it, otherwise the rounded coordinates.
    """
    if "site_id" in df.columns:
        return df["site_id"].astype(str)

    if {"state_code", "county_code", "site_num"}.issubset(df.columns):
        return (
            df["state_code"].astype(str).str.zfill(2) + "-"
            + df["county_code"].astype(str).str.zfill(3) + "-"
            + df["site_num"].astype(str).str.zfill(4)
        )

    return df["latitude"].round(4).astype(str) + "," + df["longitude"].round(4).astype(str)


def add_time_features(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df["hour"] = df[TIMESTAMP_COLUMN].dt.hour
    df["weekday"] = pd.Categorical(df[TIMESTAMP_COLUMN].dt.day_name(), categories=WEEKDAYS)
    return df


# =========================================================
# MAIN LOADER
# =========================================================
def clean_measurements(raw: pd.DataFrame) -> pd.DataFrame:
    df = normalize_columns(raw)
    rows_in = len(df)

    # -----------------------------
    # TIMESTAMP
    # -----------------------------
    df[TIMESTAMP_COLUMN] = pd.to_datetime(
        df["date"].astype(str) + " " + df["time"].astype(str),
        errors="coerce"
    )

    # -----------------------------
    # NUMERIC COLUMNS
    # -----------------------------
    for col in [CONCENTRATION_COLUMN, "latitude", "longitude"]:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    df = df.dropna(subset=[TIMESTAMP_COLUMN, CONCENTRATION_COLUMN, "latitude", "longitude"]).copy()
    dropped_missing = rows_in - len(df)
    if dropped_missing:
        logger.warning(f"Dropped {dropped_missing} rows with missing timestamp, reading or coordinates")

    negative = df[CONCENTRATION_COLUMN] < 0
    if negative.any():
        logger.warning(f"Dropped {int(negative.sum())} rows with negative PM2.5 readings")
        df = df[~negative].copy()

    if df.empty:
        raise ValueError("No valid measurements left after cleaning")

    df["state"] = df["state"].astype(str)
    df["site_id"] = build_site_id(df)
    df = add_time_features(df)

    keep = [
        TIMESTAMP_COLUMN, CONCENTRATION_COLUMN, "latitude", "longitude",
        "state", "site_id", "hour", "weekday"
    ]
    if "county" in df.columns:
        keep.insert(5, "county")

    df = df[keep].sort_values(TIMESTAMP_COLUMN).reset_index(drop=True)
    logger.info(f"Measurements kept: {len(df)} of {rows_in}")
    return df


def load_measurements(csv_path: str = None) -> pd.DataFrame:
    """
    Load the hourly PM2.5 CSV and return cleaned records with
    derived hour-of-day and weekday columns.
    """
    csv_path = csv_path or settings.DATA_CSV
    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"Could not find measurement file: {csv_path}")

    logger.info(f"Loading measurements from {csv_path}")
    raw = pd.read_csv(csv_path, low_memory=False)
    logger.info(f"Raw shape (rows, columns): {raw.shape}")

    return clean_measurements(raw)


if __name__ == "__main__":
    df = load_measurements()
    print(df.head())
    print("Rows:", len(df))
