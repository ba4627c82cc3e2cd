# =========================
# AQI CONSTANTS (US EPA PM2.5, 24-HOUR)
# =========================

# (conc_low, conc_high, aqi_low, aqi_high, category)
PM25_BREAKPOINTS = [
    (0.0, 12.0, 0, 50, "Good"),
    (12.1, 35.4, 51, 100, "Moderate"),
    (35.5, 55.4, 101, 150, "Unhealthy for Sensitive Groups"),
    (55.5, 150.4, 151, 200, "Unhealthy"),
    (150.5, 250.4, 201, 300, "Very Unhealthy"),
    (250.5, 350.4, 301, 400, "Hazardous"),
    (350.5, 500.4, 401, 500, "Hazardous"),
]

AQI_MAX = 500

# Severity order, used for every display of the label
AQI_CATEGORIES = [
    "Good",
    "Moderate",
    "Unhealthy for Sensitive Groups",
    "Unhealthy",
    "Very Unhealthy",
    "Hazardous",
]

AQI_CATEGORY_COLORS = {
    "Good": "#2ecc71",
    "Moderate": "#f1c40f",
    "Unhealthy for Sensitive Groups": "#e67e22",
    "Unhealthy": "#e74c3c",
    "Very Unhealthy": "#8e44ad",
    "Hazardous": "#7f0000",
}

# =========================
# INPUT SCHEMA
# =========================

# EPA AirData hourly export -> internal names
RAW_COLUMN_MAP = {
    "Sample Measurement": "pm2_5",
    "Date Local": "date",
    "Time Local": "time",
    "Latitude": "latitude",
    "Longitude": "longitude",
    "State Name": "state",
    "County Name": "county",
    "State Code": "state_code",
    "County Code": "county_code",
    "Site Num": "site_num",
}

REQUIRED_COLUMNS = ["pm2_5", "date", "time", "latitude", "longitude", "state"]

TIMESTAMP_COLUMN = "timestamp"
CONCENTRATION_COLUMN = "pm2_5"
AQI_COLUMN = "aqi"
TARGET_COLUMN = "aqi_category"

WEEKDAYS = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

# =========================
# FEATURE CONFIG
# =========================

NUMERIC_FEATURES = [
    "hour",
    "latitude",
    "longitude"
]

CATEGORICAL_FEATURES = [
    "weekday"
]

FEATURE_COLUMNS = NUMERIC_FEATURES + CATEGORICAL_FEATURES

# =========================
# ARTIFACTS
# =========================

MODEL_ARTIFACT = "best_model.joblib"
METRICS_FILE = "evaluation_metrics.json"
COMPARISON_FILE = "model_comparison.csv"
CONFUSION_MATRIX_FIGURE = "confusion_matrix.png"
IMPORTANCE_FIGURE = "feature_importance.png"
