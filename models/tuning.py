# =====================================================
# CROSS-VALIDATED MODEL COMPARISON + TUNING
# -----------------------------------------------------
# - untuned baselines: stratified k-fold accuracy
# - tuned families: GridSearchCV / RandomizedSearchCV
# - results cached with joblib, keyed by data fingerprint
# =====================================================

import hashlib
import os
import time

import joblib
import pandas as pd
from sklearn.model_selection import (
    GridSearchCV,
    ParameterGrid,
    RandomizedSearchCV,
    StratifiedKFold,
    cross_val_score
)
from sklearn.preprocessing import LabelEncoder

from config.settings import settings
from config.logging import logger
from models.candidates import GRID, MODEL_NAMES, build_pipeline, get_search_space


# =====================================================
# HELPERS
# =====================================================
def encode_labels(y):
    encoder = LabelEncoder()
    return encoder, encoder.fit_transform(pd.Series(y).astype(str))


def fingerprint_training_data(X: pd.DataFrame, y) -> str:
    frame = X.reset_index(drop=True).copy()
    frame["__target__"] = pd.Series(y).astype(str).to_numpy()
    hashed = pd.util.hash_pandas_object(frame, index=False).to_numpy()
    return hashlib.sha256(hashed.tobytes()).hexdigest()


def _cv_splitter(cv_folds, random_state):
    return StratifiedKFold(n_splits=cv_folds, shuffle=True, random_state=random_state)


def _cache_key(name, fingerprint, cv_folds, n_iter, random_state):
    return {
        "model": name,
        "fingerprint": fingerprint,
        "search_space": get_search_space(name),
        "cv_folds": cv_folds,
        "n_iter": n_iter,
        "random_state": random_state
    }


def load_tuning_cache(path: str) -> dict:
    if not path or not os.path.exists(path):
        return {}

    try:
        cache = joblib.load(path)
    except Exception as e:
        logger.warning(f"Ignoring unreadable tuning cache {path}: {e}")
        return {}

    if not isinstance(cache, dict):
        logger.warning(f"Ignoring malformed tuning cache {path}")
        return {}
    return cache


def save_tuning_cache(cache: dict, path: str):
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    joblib.dump(cache, path)
    logger.info(f"Tuning cache saved: {path}")


# =====================================================
# SINGLE MODEL
# =====================================================
def cross_validate_model(name, X, y, cv_folds=None, n_jobs=None, random_state=None):
    """Mean/std k-fold accuracy of a candidate with its default params."""
    cv_folds = cv_folds or settings.CV_FOLDS
    n_jobs = settings.N_JOBS if n_jobs is None else n_jobs
    random_state = settings.RANDOM_STATE if random_state is None else random_state

    _, y_enc = encode_labels(y)
    start = time.perf_counter()
    scores = cross_val_score(
        build_pipeline(name),
        X,
        y_enc,
        cv=_cv_splitter(cv_folds, random_state),
        scoring="accuracy",
        n_jobs=n_jobs
    )

    return {
        "model": name,
        "search": "cv",
        "best_params": {},
        "cv_accuracy_mean": float(scores.mean()),
        "cv_accuracy_std": float(scores.std()),
        "fit_seconds": round(time.perf_counter() - start, 2)
    }


def tune_model(name, X, y, cv_folds=None, n_iter=None, n_jobs=None, random_state=None):
    """
    Grid or randomized search over the candidate's search space.
    Selection is by highest mean cross-validated accuracy.
    """
    space = get_search_space(name)
    if space["search"] is None:
        return cross_validate_model(name, X, y, cv_folds, n_jobs, random_state)

    cv_folds = cv_folds or settings.CV_FOLDS
    n_iter = n_iter or settings.RANDOM_SEARCH_ITER
    n_jobs = settings.N_JOBS if n_jobs is None else n_jobs
    random_state = settings.RANDOM_STATE if random_state is None else random_state

    _, y_enc = encode_labels(y)
    common = dict(
        scoring="accuracy",
        cv=_cv_splitter(cv_folds, random_state),
        n_jobs=n_jobs,
        refit=False
    )

    if space["search"] == GRID:
        search = GridSearchCV(build_pipeline(name), space["params"], **common)
    else:
        search = RandomizedSearchCV(
            build_pipeline(name),
            space["params"],
            n_iter=min(n_iter, len(ParameterGrid(space["params"]))),
            random_state=random_state,
            **common
        )

    start = time.perf_counter()
    search.fit(X, y_enc)

    return {
        "model": name,
        "search": space["search"],
        "best_params": dict(search.best_params_),
        "cv_accuracy_mean": float(search.best_score_),
        "cv_accuracy_std": float(search.cv_results_["std_test_score"][search.best_index_]),
        "fit_seconds": round(time.perf_counter() - start, 2)
    }


# =====================================================
# ALL MODELS
# =====================================================
def comparison_table(results) -> pd.DataFrame:
    table = pd.DataFrame(results)
    return table.sort_values(
        ["cv_accuracy_mean", "model"],
        ascending=[False, True]
    ).reset_index(drop=True)


def tune_all_models(X, y, model_names=None, cache_path=None, use_cache=None,
                    cv_folds=None, n_iter=None, n_jobs=None, random_state=None):
    logger.info("========== MODEL TUNING STARTED ==========")

    model_names = model_names or MODEL_NAMES
    use_cache = settings.USE_TUNING_CACHE if use_cache is None else use_cache
    cache_path = cache_path or settings.TUNING_CACHE_PATH
    cv_folds = cv_folds or settings.CV_FOLDS
    n_iter = n_iter or settings.RANDOM_SEARCH_ITER
    random_state = settings.RANDOM_STATE if random_state is None else random_state

    fingerprint = fingerprint_training_data(X, y)
    cache = load_tuning_cache(cache_path) if use_cache else {}
    cache_dirty = False

    results = []
    for name in model_names:
        key = _cache_key(name, fingerprint, cv_folds, n_iter, random_state)
        entry = cache.get(name)

        if isinstance(entry, dict) and entry.get("key") == key:
            logger.info(f"{name} | cached result reused")
            result = entry["result"]
        else:
            logger.info(f"--- Tuning {name} ---")
            result = tune_model(name, X, y, cv_folds, n_iter, n_jobs, random_state)
            cache[name] = {"key": key, "result": result}
            cache_dirty = True

        logger.info(
            f"{name} | cv accuracy={result['cv_accuracy_mean']:.3f} "
            f"(+/- {result['cv_accuracy_std']:.3f}) | params={result['best_params']}"
        )
        results.append(result)

    if use_cache and cache_dirty:
        save_tuning_cache(cache, cache_path)

    logger.info("========== MODEL TUNING COMPLETED ==========")
    return comparison_table(results)
