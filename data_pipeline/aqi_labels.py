# =========================================================
# AQI LABELING
# ---------------------------------------------------------
# Numeric AQI and AQI category from PM2.5 concentration
# using the US EPA 24-hour breakpoints.
# =========================================================

import math

import numpy as np
import pandas as pd

from config.constants import (
    PM25_BREAKPOINTS,
    AQI_MAX,
    AQI_CATEGORIES,
    CONCENTRATION_COLUMN,
    AQI_COLUMN,
    TARGET_COLUMN
)

# Upper edges of each category band after truncation to 0.1 ug/m3
CATEGORY_BIN_EDGES = [-np.inf, 12.0, 35.4, 55.4, 150.4, 250.4, np.inf]


def truncate_concentration(conc):
    """EPA truncates PM2.5 to one decimal place before lookup."""
    return math.floor(float(conc) * 10 + 1e-9) / 10


def _is_missing(conc):
    return conc is None or pd.isna(conc) or conc < 0


def pm25_sub_index(conc):
    if _is_missing(conc):
        return None

    c = truncate_concentration(conc)
    for c_low, c_high, i_low, i_high, _ in PM25_BREAKPOINTS:
        if c_low <= c <= c_high:
            return round(((i_high - i_low) / (c_high - c_low)) * (c - c_low) + i_low)

    return AQI_MAX


def aqi_category(conc):
    """
    Concentration -> AQI category name.
    Returns None when the reading is missing or negative.
    """
    if _is_missing(conc):
        return None

    c = truncate_concentration(conc)
    for _, c_high, _, _, category in PM25_BREAKPOINTS:
        if c <= c_high:
            return category

    return AQI_CATEGORIES[-1]


def categorize_concentrations(conc: pd.Series) -> pd.Series:
    """Vectorised aqi_category, returning an ordered categorical."""
    values = pd.to_numeric(conc, errors="coerce")
    truncated = np.floor(values * 10 + 1e-9) / 10
    truncated = truncated.where(values >= 0)

    return pd.cut(
        truncated,
        bins=CATEGORY_BIN_EDGES,
        labels=AQI_CATEGORIES,
        right=True
    ).astype(pd.CategoricalDtype(AQI_CATEGORIES, ordered=True))


def add_aqi_labels(df: pd.DataFrame) -> pd.DataFrame:
    """Adds numeric `aqi` and categorical `aqi_category` columns."""
    if CONCENTRATION_COLUMN not in df.columns:
        raise ValueError(f"Column '{CONCENTRATION_COLUMN}' is required for AQI labeling")

    out = df.copy()
    out[AQI_COLUMN] = out[CONCENTRATION_COLUMN].map(pm25_sub_index).astype(float)
    out[TARGET_COLUMN] = categorize_concentrations(out[CONCENTRATION_COLUMN])
    return out
