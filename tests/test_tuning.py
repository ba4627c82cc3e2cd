import joblib
import pytest

import models.tuning as tuning
from models.preprocessing import split_features_target
from models.tuning import (
    comparison_table,
    cross_validate_model,
    encode_labels,
    fingerprint_training_data,
    load_tuning_cache,
    tune_all_models,
    tune_model
)

FAST = dict(cv_folds=3, n_iter=2, n_jobs=1, random_state=0)


@pytest.fixture
def xy(modeling_frame):
    return split_features_target(modeling_frame)


def test_encode_labels_round_trip():
    encoder, codes = encode_labels(["Moderate", "Good", "Moderate"])
    assert sorted(set(codes)) == [0, 1]
    assert list(encoder.inverse_transform(codes)) == ["Moderate", "Good", "Moderate"]


def test_fingerprint_changes_with_data(xy):
    X, y = xy
    assert fingerprint_training_data(X, y) == fingerprint_training_data(X.copy(), y.copy())

    changed = X.copy()
    changed.loc[0, "hour"] = (changed.loc[0, "hour"] + 1) % 24
    assert fingerprint_training_data(changed, y) != fingerprint_training_data(X, y)


def test_cross_validate_untuned_model(xy):
    X, y = xy
    result = cross_validate_model("naive_bayes", X, y, cv_folds=3, n_jobs=1, random_state=0)

    assert result["search"] == "cv"
    assert result["best_params"] == {}
    assert 0.0 <= result["cv_accuracy_mean"] <= 1.0


def test_grid_search_picks_param_from_grid(xy):
    X, y = xy
    result = tune_model("decision_tree", X, y, **FAST)

    assert result["search"] == "grid"
    assert result["best_params"]["model__max_depth"] in [3, 5, 8, 12, None]
    # hour alone separates the classes
    assert result["cv_accuracy_mean"] > 0.9


def test_random_search_uses_n_iter(xy):
    X, y = xy
    result = tune_model("random_forest", X, y, **FAST)

    assert result["search"] == "random"
    assert set(result["best_params"]) == {
        "model__n_estimators", "model__max_depth", "model__min_samples_leaf", "model__max_features"
    }


def test_comparison_table_sorted_with_name_tiebreak():
    table = comparison_table([
        {"model": "svm", "cv_accuracy_mean": 0.5},
        {"model": "decision_tree", "cv_accuracy_mean": 0.7},
        {"model": "naive_bayes", "cv_accuracy_mean": 0.5},
    ])
    assert table["model"].tolist() == ["decision_tree", "naive_bayes", "svm"]


def test_tune_all_models_reuses_cache(xy, tmp_path, monkeypatch):
    X, y = xy
    cache_path = str(tmp_path / "cache" / "tuning.joblib")
    names = ["naive_bayes", "decision_tree"]

    first = tune_all_models(X, y, model_names=names, cache_path=cache_path, use_cache=True, **FAST)
    assert set(first["model"]) == set(names)
    assert set(joblib.load(cache_path)) == set(names)

    def fail(*args, **kwargs):
        raise AssertionError("cache should have been used")

    monkeypatch.setattr(tuning, "tune_model", fail)
    second = tune_all_models(X, y, model_names=names, cache_path=cache_path, use_cache=True, **FAST)

    assert second["cv_accuracy_mean"].tolist() == first["cv_accuracy_mean"].tolist()


def test_stale_cache_entry_is_refit(xy, tmp_path, monkeypatch):
    X, y = xy
    cache_path = str(tmp_path / "tuning.joblib")
    tune_all_models(X, y, model_names=["naive_bayes"], cache_path=cache_path, use_cache=True, **FAST)

    calls = []
    real = tuning.tune_model

    def spy(name, *args, **kwargs):
        calls.append(name)
        return real(name, *args, **kwargs)

    monkeypatch.setattr(tuning, "tune_model", spy)
    tune_all_models(X.iloc[10:], y.iloc[10:], model_names=["naive_bayes"],
                    cache_path=cache_path, use_cache=True, **FAST)

    assert calls == ["naive_bayes"]


def test_corrupt_cache_is_ignored(tmp_path):
    path = tmp_path / "tuning.joblib"
    path.write_bytes(b"not a joblib file")
    assert load_tuning_cache(str(path)) == {}


def test_cache_disabled_writes_nothing(xy, tmp_path):
    X, y = xy
    cache_path = tmp_path / "tuning.joblib"
    tune_all_models(X, y, model_names=["naive_bayes"], cache_path=str(cache_path), use_cache=False, **FAST)
    assert not cache_path.exists()


def test_malformed_cache_entry_is_refit(xy, tmp_path):
    X, y = xy
    cache_path = tmp_path / "tuning.joblib"
    joblib.dump({"naive_bayes": "stale"}, cache_path)

    table = tune_all_models(X, y, model_names=["naive_bayes"], cache_path=str(cache_path),
                            use_cache=True, **FAST)

    assert table["model"].tolist() == ["naive_bayes"]
    assert isinstance(joblib.load(cache_path)["naive_bayes"], dict)
