# =========================================================
# EXPLORATORY PLOTS
# ---------------------------------------------------------
# Loads:  labelled measurements (DataFrame)
# Saves:  PNG figures under FIGURE_DIR
# =========================================================

import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from config.settings import settings
from config.logging import logger
from config.constants import (
    AQI_CATEGORIES,
    AQI_CATEGORY_COLORS,
    CONCENTRATION_COLUMN,
    TARGET_COLUMN,
    TIMESTAMP_COLUMN,
    WEEKDAYS
)


def plot_concentration_histogram(df: pd.DataFrame, bins: int = 60):
    values = df[CONCENTRATION_COLUMN].dropna()
    upper = values.quantile(0.99) if len(values) else 0

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.hist(values.clip(upper=upper), bins=bins, color="#3498db", edgecolor="white")
    ax.set_xlabel("PM2.5 (µg/m³), clipped at 99th percentile")
    ax.set_ylabel("Hourly readings")
    ax.set_title("Distribution of Hourly PM2.5", fontsize=14, weight="bold")
    ax.grid(axis="y", alpha=0.35)
    fig.tight_layout()
    return fig


def plot_category_counts(df: pd.DataFrame):
    counts = df[TARGET_COLUMN].astype(str).value_counts()
    counts = [int(counts.get(cat, 0)) for cat in AQI_CATEGORIES]
    colors = [AQI_CATEGORY_COLORS[cat] for cat in AQI_CATEGORIES]

    fig, ax = plt.subplots(figsize=(12, 4))
    bars = ax.bar(AQI_CATEGORIES, counts, color=colors)

    for bar in bars:
        h = bar.get_height()
        ax.text(bar.get_x() + bar.get_width() / 2, h, str(int(h)), ha="center", va="bottom", fontsize=10)

    ax.set_ylabel("Frequency")
    ax.set_title("AQI Category Distribution", fontsize=14, weight="bold")
    ax.tick_params(axis="x", rotation=30)
    ax.grid(axis="y", alpha=0.35)
    fig.tight_layout()
    return fig


def plot_daily_time_series(df: pd.DataFrame):
    daily = df.set_index(TIMESTAMP_COLUMN)[CONCENTRATION_COLUMN].resample("D").mean()

    fig, ax = plt.subplots(figsize=(14, 5))
    ax.plot(daily.index, daily.values, linewidth=1.5, color="#34495e", label="Daily mean")
    ax.plot(daily.index, daily.rolling(7, min_periods=1).mean(), linestyle="--",
            linewidth=2, color="#1abc9c", label="7-day moving avg")
    ax.set_xlabel("Date")
    ax.set_ylabel("PM2.5 (µg/m³)")
    ax.set_title("Daily Mean PM2.5", fontsize=14, weight="bold")
    ax.tick_params(axis="x", rotation=45)
    ax.grid(alpha=0.35)
    ax.legend()
    fig.tight_layout()
    return fig


def plot_hourly_profile(df: pd.DataFrame):
    hourly = df.groupby("hour")[CONCENTRATION_COLUMN].mean().reindex(range(24))

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.plot(hourly.index, hourly.values, marker="o", color="#e67e22")
    ax.set_xticks(range(0, 24, 2))
    ax.set_xlabel("Hour of day")
    ax.set_ylabel("Mean PM2.5 (µg/m³)")
    ax.set_title("PM2.5 by Hour of Day", fontsize=14, weight="bold")
    ax.grid(alpha=0.35)
    fig.tight_layout()
    return fig


def hour_weekday_matrix(df: pd.DataFrame) -> pd.DataFrame:
    return df.assign(weekday=df["weekday"].astype(str)).pivot_table(
        index="weekday",
        columns="hour",
        values=CONCENTRATION_COLUMN,
        aggfunc="mean"
    ).reindex(index=WEEKDAYS, columns=range(24))


def plot_hour_weekday_heatmap(df: pd.DataFrame):
    matrix = hour_weekday_matrix(df)

    fig, ax = plt.subplots(figsize=(14, 4.5))
    im = ax.imshow(np.ma.masked_invalid(matrix.to_numpy(dtype=float)), aspect="auto", cmap="YlOrRd")
    fig.colorbar(im, ax=ax, label="Mean PM2.5 (µg/m³)")
    ax.set_xticks(range(24))
    ax.set_yticks(range(len(WEEKDAYS)))
    ax.set_yticklabels(WEEKDAYS)
    ax.set_xlabel("Hour of day")
    ax.set_title("Mean PM2.5 by Weekday and Hour", fontsize=14, weight="bold")
    fig.tight_layout()
    return fig


def site_means(df: pd.DataFrame) -> pd.DataFrame:
    return df.groupby("site_id", as_index=False).agg(
        latitude=("latitude", "first"),
        longitude=("longitude", "first"),
        state=("state", "first"),
        pm2_5=(CONCENTRATION_COLUMN, "mean"),
        readings=(CONCENTRATION_COLUMN, "size")
    )


def plot_site_map(df: pd.DataFrame):
    sites = site_means(df)

    fig, ax = plt.subplots(figsize=(12, 7))
    points = ax.scatter(
        sites["longitude"],
        sites["latitude"],
        c=sites[CONCENTRATION_COLUMN],
        cmap="YlOrRd",
        s=30,
        edgecolor="#333333",
        linewidth=0.3
    )
    fig.colorbar(points, ax=ax, label="Mean PM2.5 (µg/m³)")
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title("Monitoring Sites by Mean PM2.5", fontsize=14, weight="bold")
    ax.grid(alpha=0.25)
    fig.tight_layout()
    return fig


EDA_FIGURES = {
    "pm25_histogram.png": plot_concentration_histogram,
    "aqi_category_counts.png": plot_category_counts,
    "pm25_daily_series.png": plot_daily_time_series,
    "pm25_hourly_profile.png": plot_hourly_profile,
    "pm25_hour_weekday_heatmap.png": plot_hour_weekday_heatmap,
    "site_map.png": plot_site_map,
}


def generate_eda_report(df: pd.DataFrame, out_dir: str = None) -> list:
    logger.info("========== EDA REPORT STARTED ==========")

    out_dir = out_dir or settings.FIGURE_DIR
    os.makedirs(out_dir, exist_ok=True)

    paths = []
    for filename, plot in EDA_FIGURES.items():
        fig = plot(df)
        path = os.path.join(out_dir, filename)
        fig.savefig(path, dpi=120)
        plt.close(fig)
        paths.append(path)

    logger.info(f"EDA figures saved: {len(paths)} -> {out_dir}")
    logger.info("========== EDA REPORT COMPLETED ==========")
    return paths
