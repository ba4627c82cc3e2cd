from config.constants import AQI_CATEGORIES, AQI_CATEGORY_COLORS

UNKNOWN_COLOR = "#95a5a6"

# =====================================================
# AQI CATEGORY RANGES
# =====================================================

AQI_CATEGORY_RANGES = {
    "Good": "0 – 50",
    "Moderate": "51 – 100",
    "Unhealthy for Sensitive Groups": "101 – 150",
    "Unhealthy": "151 – 200",
    "Very Unhealthy": "201 – 300",
    "Hazardous": "301+"
}


# =====================================================
# CATEGORY → COLOR
# =====================================================
def category_color(category: str) -> str:
    return AQI_CATEGORY_COLORS.get(category, UNKNOWN_COLOR)


# =====================================================
# CATEGORY → FULL INFO (label + range + severity)
# =====================================================
def category_info(category: str):
    if category not in AQI_CATEGORIES:
        return {"label": "Unknown", "range": "N/A", "severity": None}

    return {
        "label": category,
        "range": AQI_CATEGORY_RANGES[category],
        "severity": AQI_CATEGORIES.index(category)
    }
