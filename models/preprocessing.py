import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from config.constants import (
    NUMERIC_FEATURES,
    CATEGORICAL_FEATURES,
    FEATURE_COLUMNS,
    TARGET_COLUMN
)


def build_preprocessor():
    """
    One-hot encode the weekday, standardize hour and coordinates.
    """
    return ColumnTransformer(
        transformers=[
            ("num", StandardScaler(), NUMERIC_FEATURES),
            ("cat", OneHotEncoder(handle_unknown="ignore"), CATEGORICAL_FEATURES)
        ],
        sparse_threshold=0
    )


def split_features_target(df: pd.DataFrame):
    missing = [c for c in FEATURE_COLUMNS + [TARGET_COLUMN] if c not in df.columns]
    if missing:
        raise ValueError(f"Missing modeling columns: {missing}")

    X = df[FEATURE_COLUMNS].copy()
    X["weekday"] = X["weekday"].astype(str)
    y = df[TARGET_COLUMN].astype(str)
    return X, y
