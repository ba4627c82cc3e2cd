import pandas as pd
import pytest

from models.candidates import MODEL_NAMES, build_pipeline, get_search_space
from models.preprocessing import build_preprocessor, split_features_target


def test_preprocessor_scales_and_one_hot_encodes(modeling_frame):
    X, _ = split_features_target(modeling_frame)
    transformed = build_preprocessor().fit_transform(X)

    # 3 scaled numeric columns + one column per weekday present
    assert transformed.shape == (len(X), 3 + X["weekday"].nunique())
    assert abs(transformed[:, 0].mean()) < 1e-9


def test_preprocessor_ignores_unknown_weekday(modeling_frame):
    X, _ = split_features_target(modeling_frame[modeling_frame["weekday"] != "Sunday"])
    pre = build_preprocessor().fit(X)

    unseen = X.head(1).assign(weekday="Sunday")
    assert pre.transform(unseen)[0, 3:].sum() == 0


def test_split_features_target_requires_columns(modeling_frame):
    with pytest.raises(ValueError, match="Missing modeling columns"):
        split_features_target(modeling_frame.drop(columns=["hour"]))


def test_split_features_target_returns_strings(modeling_frame):
    frame = modeling_frame.assign(aqi_category=pd.Categorical(modeling_frame["aqi_category"]))
    X, y = split_features_target(frame)

    assert list(X.columns) == ["hour", "latitude", "longitude", "weekday"]
    assert all(isinstance(v, str) for v in y)


def test_seven_candidates_five_tuned():
    assert len(MODEL_NAMES) == 7
    tuned = [name for name in MODEL_NAMES if get_search_space(name)["search"] is not None]
    assert sorted(tuned) == sorted([
        "decision_tree", "random_forest", "gradient_boosting", "lasso_multinomial", "svm"
    ])


def test_unknown_model_name():
    with pytest.raises(ValueError, match="Unknown model"):
        build_pipeline("knn")


def test_build_pipeline_applies_params():
    pipe = build_pipeline("lasso_multinomial", {"model__C": 0.1})
    assert pipe.named_steps["model"].C == 0.1
    assert pipe.named_steps["model"].penalty == "l1"


@pytest.mark.parametrize("name", MODEL_NAMES)
def test_every_candidate_fits(name, modeling_frame):
    X, y = split_features_target(modeling_frame)
    pipe = build_pipeline(name)
    codes = pd.Series(y).astype("category").cat.codes

    pipe.fit(X, codes)
    assert len(pipe.predict(X.head(5))) == 5


def test_lasso_zeroes_weak_coefficients(modeling_frame):
    X, y = split_features_target(modeling_frame)
    pipe = build_pipeline("lasso_multinomial", {"model__C": 0.05})
    pipe.fit(X, pd.Series(y).astype("category").cat.codes)

    assert (pipe.named_steps["model"].coef_ == 0).any()
