# =========================================================
# STRATIFIED SAMPLE + TRAIN/TEST SPLIT
# ---------------------------------------------------------
# - caps every AQI category at SAMPLE_PER_CLASS rows
# - drops categories too small for stratified CV
# - 75/25 class-stratified split
# =========================================================

import math

import numpy as np
import pandas as pd
from imblearn.under_sampling import RandomUnderSampler
from sklearn.model_selection import train_test_split

from config.settings import settings
from config.logging import logger
from config.constants import TARGET_COLUMN


def min_rows_per_class(min_class_rows=None, cv_folds=None, test_size=None):
    """Smallest class size that still leaves CV_FOLDS rows in the training split."""
    min_class_rows = settings.MIN_CLASS_ROWS if min_class_rows is None else min_class_rows
    cv_folds = cv_folds or settings.CV_FOLDS
    test_size = test_size or settings.TEST_SIZE
    return max(min_class_rows, math.ceil(cv_folds / (1 - test_size)) + 1)


def drop_rare_classes(df: pd.DataFrame, min_rows: int) -> pd.DataFrame:
    counts = df[TARGET_COLUMN].value_counts()
    present = counts[counts > 0]
    rare = present[present < min_rows].index.tolist()

    if rare:
        logger.warning(f"Dropping AQI categories with fewer than {min_rows} rows: {rare}")
        df = df[~df[TARGET_COLUMN].isin(rare)]

    out = df.copy()
    if isinstance(out[TARGET_COLUMN].dtype, pd.CategoricalDtype):
        out[TARGET_COLUMN] = out[TARGET_COLUMN].cat.remove_unused_categories()
    return out


def stratified_sample(df: pd.DataFrame, per_class: int = None, random_state: int = None) -> pd.DataFrame:
    """At most `per_class` rows per AQI category; smaller categories are kept whole."""
    per_class = per_class or settings.SAMPLE_PER_CLASS
    random_state = settings.RANDOM_STATE if random_state is None else random_state

    labelled = df.dropna(subset=[TARGET_COLUMN])
    if labelled.empty:
        raise ValueError("No labelled rows to sample from")

    y = labelled[TARGET_COLUMN].astype(str).to_numpy()
    classes, counts = np.unique(y, return_counts=True)
    strategy = {c: int(min(n, per_class)) for c, n in zip(classes, counts)}

    sampler = RandomUnderSampler(sampling_strategy=strategy, random_state=random_state)
    sampler.fit_resample(np.zeros((len(y), 1)), y)

    sample = labelled.iloc[np.sort(sampler.sample_indices_)].reset_index(drop=True)
    logger.info(f"Stratified sample per class: {strategy}")
    return sample


def split_train_test(df: pd.DataFrame, test_size: float = None, random_state: int = None):
    test_size = test_size or settings.TEST_SIZE
    random_state = settings.RANDOM_STATE if random_state is None else random_state

    train_df, test_df = train_test_split(
        df,
        test_size=test_size,
        stratify=df[TARGET_COLUMN].astype(str),
        random_state=random_state
    )
    logger.info(f"Train rows: {len(train_df)} | Test rows: {len(test_df)}")
    return train_df.reset_index(drop=True), test_df.reset_index(drop=True)


def _require_two_classes(df):
    if df[TARGET_COLUMN].nunique() < 2:
        raise ValueError("At least two AQI categories are needed to train a classifier")


def build_training_sample(df: pd.DataFrame):
    """Labelled measurements -> (train_df, test_df)."""
    logger.info("========== BUILD TRAINING SAMPLE STARTED ==========")

    _require_two_classes(df)
    sample = stratified_sample(df)
    sample = drop_rare_classes(sample, min_rows_per_class())
    _require_two_classes(sample)

    train_df, test_df = split_train_test(sample)

    logger.info("========== BUILD TRAINING SAMPLE COMPLETED ==========")
    return train_df, test_df
