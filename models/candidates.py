# =====================================================
# CANDIDATE CLASSIFIERS + SEARCH SPACES
# =====================================================

from sklearn.base import clone
from sklearn.pipeline import Pipeline
from sklearn.linear_model import LogisticRegression
from sklearn.tree import DecisionTreeClassifier
from sklearn.ensemble import RandomForestClassifier
from sklearn.naive_bayes import GaussianNB
from sklearn.svm import SVC
from xgboost import XGBClassifier

from config.settings import settings
from models.preprocessing import build_preprocessor

GRID = "grid"
RANDOM = "random"

# search=None -> scored with plain cross-validation, no tuning
SEARCH_SPACES = {
    "logistic_regression": {"search": None, "params": {}},
    "naive_bayes": {"search": None, "params": {}},
    "decision_tree": {
        "search": GRID,
        "params": {
            "model__max_depth": [3, 5, 8, 12, None],
            "model__min_samples_leaf": [1, 5, 20],
            "model__criterion": ["gini", "entropy"]
        }
    },
    "random_forest": {
        "search": RANDOM,
        "params": {
            "model__n_estimators": [100, 200, 300],
            "model__max_depth": [None, 8, 12, 18],
            "model__min_samples_leaf": [1, 2, 5, 10],
            "model__max_features": ["sqrt", 0.5, None]
        }
    },
    "gradient_boosting": {
        "search": RANDOM,
        "params": {
            "model__n_estimators": [100, 200, 300],
            "model__learning_rate": [0.03, 0.05, 0.1, 0.2],
            "model__max_depth": [3, 4, 6, 8],
            "model__subsample": [0.7, 0.85, 1.0],
            "model__colsample_bytree": [0.7, 1.0]
        }
    },
    "lasso_multinomial": {
        "search": GRID,
        "params": {
            "model__C": [0.01, 0.1, 1.0, 10.0]
        }
    },
    "svm": {
        "search": GRID,
        "params": {
            "model__C": [0.1, 1.0, 10.0],
            "model__gamma": ["scale", 0.1, 1.0]
        }
    }
}

MODEL_NAMES = list(SEARCH_SPACES)


def _estimators():
    rs = settings.RANDOM_STATE
    return {
        "logistic_regression": LogisticRegression(max_iter=1000),
        "naive_bayes": GaussianNB(),
        "decision_tree": DecisionTreeClassifier(random_state=rs),
        "random_forest": RandomForestClassifier(random_state=rs, n_jobs=1),
        "gradient_boosting": XGBClassifier(
            eval_metric="mlogloss",
            random_state=rs,
            n_jobs=1
        ),
        "lasso_multinomial": LogisticRegression(
            penalty="l1",
            solver="saga",
            max_iter=2000
        ),
        "svm": SVC(kernel="rbf")
    }


def get_search_space(name: str) -> dict:
    if name not in SEARCH_SPACES:
        raise ValueError(f"Unknown model: {name}. Choose from {MODEL_NAMES}")
    return SEARCH_SPACES[name]


def build_pipeline(name: str, params: dict = None) -> Pipeline:
    """Fresh preprocess + classifier pipeline, optionally with tuned params."""
    get_search_space(name)

    pipe = Pipeline(steps=[
        ("preprocess", build_preprocessor()),
        ("model", clone(_estimators()[name]))
    ])

    if params:
        pipe.set_params(**params)
    return pipe
