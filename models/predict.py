import os

import joblib
import pandas as pd

from config.settings import settings
from config.constants import MODEL_ARTIFACT, TIMESTAMP_COLUMN
from data_pipeline.load_measurements import add_time_features


def load_model_artifact(path: str = None) -> dict:
    path = path or os.path.join(settings.ARTIFACT_DIR, MODEL_ARTIFACT)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Model file missing: {path}. Run the training pipeline first!")
    return joblib.load(path)


def predict_aqi_category(records, artifact: dict = None) -> pd.Series:
    """
    Predict AQI categories for rows with `timestamp`, `latitude`, `longitude`.
    `records` may be a DataFrame or a list of dicts.
    """
    artifact = artifact or load_model_artifact()

    df = pd.DataFrame(records)
    missing = [c for c in [TIMESTAMP_COLUMN, "latitude", "longitude"] if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns for prediction: {missing}")

    df[TIMESTAMP_COLUMN] = pd.to_datetime(df[TIMESTAMP_COLUMN])
    df = add_time_features(df)

    X = df[artifact["features"]].copy()
    X["weekday"] = X["weekday"].astype(str)

    preds = artifact["pipeline"].predict(X)
    return pd.Series(artifact["label_encoder"].inverse_transform(preds), index=df.index, name="aqi_category")


if __name__ == "__main__":
    now = pd.Timestamp.now().floor("h")
    sample = [{"timestamp": now, "latitude": lat, "longitude": lon}
              for lat, lon in [(34.05, -118.24), (40.71, -74.01)]]
    print(pd.concat([pd.DataFrame(sample), predict_aqi_category(sample)], axis=1))
