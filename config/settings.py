import logging
import os
from dotenv import load_dotenv

# -----------------------------------------------------
# LOAD LOCAL .env IF EXISTS
# -----------------------------------------------------
load_dotenv()


def _env_bool(name, default):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Central configuration for the PM2.5 AQI modeling pipeline.
    Every value can be overridden from the environment or a local .env file.
    """

    # ---------------- ENV ----------------
    ENV = os.getenv("ENV", "dev")

    # ---------------- PATHS ----------------
    DATA_CSV = os.getenv("DATA_CSV", "data/hourly_pm25.csv")
    ARTIFACT_DIR = os.getenv("ARTIFACT_DIR", "artifacts")
    FIGURE_DIR = os.getenv("FIGURE_DIR", os.path.join(ARTIFACT_DIR, "figures"))
    TUNING_CACHE_PATH = os.getenv(
        "TUNING_CACHE_PATH", os.path.join(ARTIFACT_DIR, "tuning_cache.joblib")
    )
    USE_TUNING_CACHE = _env_bool("USE_TUNING_CACHE", "true")

    # ---------------- SAMPLING ----------------
    SAMPLE_PER_CLASS = int(os.getenv("SAMPLE_PER_CLASS", "2000"))
    MIN_CLASS_ROWS = int(os.getenv("MIN_CLASS_ROWS", "10"))
    TEST_SIZE = float(os.getenv("TEST_SIZE", "0.25"))

    # ---------------- MODELING ----------------
    CV_FOLDS = int(os.getenv("CV_FOLDS", "5"))
    RANDOM_SEARCH_ITER = int(os.getenv("RANDOM_SEARCH_ITER", "20"))
    RANDOM_STATE = int(os.getenv("RANDOM_STATE", "42"))
    N_JOBS = int(os.getenv("N_JOBS", "-1"))

    # ---------------- LOGGING ----------------
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# ---------------- CREATE INSTANCE ----------------
settings = Settings()

# ---------------- FAIL FAST ----------------
if not 0 < settings.TEST_SIZE < 1:
    raise ValueError("TEST_SIZE must be between 0 and 1")

if settings.CV_FOLDS < 2:
    raise ValueError("CV_FOLDS must be at least 2")

if settings.SAMPLE_PER_CLASS <= 0:
    raise ValueError("SAMPLE_PER_CLASS must be positive")

if not isinstance(logging.getLevelName(settings.LOG_LEVEL), int):
    raise ValueError(f"Unknown LOG_LEVEL: {settings.LOG_LEVEL}")
