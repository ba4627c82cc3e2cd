# =====================================================
# FINAL EVALUATION ON THE HELD-OUT PARTITION
# =====================================================

import json
import os
from datetime import datetime

import joblib
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.inspection import permutation_importance
from sklearn.metrics import (
    accuracy_score,
    classification_report,
    confusion_matrix,
    f1_score
)

from config.settings import settings
from config.logging import logger
from config.constants import (
    AQI_CATEGORIES,
    FEATURE_COLUMNS,
    MODEL_ARTIFACT,
    METRICS_FILE,
    COMPARISON_FILE,
    CONFUSION_MATRIX_FIGURE,
    IMPORTANCE_FIGURE
)
from models.candidates import build_pipeline
from models.tuning import encode_labels


def select_best_model(comparison: pd.DataFrame):
    """Highest mean CV accuracy wins; ties go to the alphabetically first model."""
    if comparison.empty:
        raise ValueError("Model comparison table is empty")

    ranked = comparison.sort_values(["cv_accuracy_mean", "model"], ascending=[False, True])
    best = ranked.iloc[0]
    return best["model"], dict(best["best_params"] or {})


def ordered_labels(*label_sets):
    seen = set()
    for labels in label_sets:
        seen.update(pd.Series(labels).astype(str))
    return [c for c in AQI_CATEGORIES if c in seen] + sorted(seen - set(AQI_CATEGORIES))


def evaluate_best_model(name, params, X_train, y_train, X_test, y_test,
                        n_repeats=10, n_jobs=None, random_state=None):
    """
    Refit `name` with `params` on the full training partition and
    score it once on the test partition.
    """
    n_jobs = settings.N_JOBS if n_jobs is None else n_jobs
    random_state = settings.RANDOM_STATE if random_state is None else random_state

    logger.info(f"========== FINAL EVALUATION: {name} ==========")

    encoder, y_train_enc = encode_labels(y_train)
    y_test = pd.Series(y_test).astype(str)

    unseen = sorted(set(y_test) - set(encoder.classes_))
    if unseen:
        raise ValueError(f"Test labels not present in training data: {unseen}")

    pipeline = build_pipeline(name, params)
    pipeline.fit(X_train, y_train_enc)

    preds = encoder.inverse_transform(pipeline.predict(X_test))

    labels = ordered_labels(y_train, y_test)
    cm = pd.DataFrame(
        confusion_matrix(y_test, preds, labels=labels),
        index=pd.Index(labels, name="true"),
        columns=pd.Index(labels, name="predicted")
    )

    accuracy = accuracy_score(y_test, preds)
    f1 = f1_score(y_test, preds, average="weighted")
    report = classification_report(y_test, preds, labels=labels, output_dict=True, zero_division=0)

    # Permutation importance on the raw input columns (before one-hot encoding)
    perm = permutation_importance(
        pipeline,
        X_test,
        encoder.transform(y_test),
        scoring="accuracy",
        n_repeats=n_repeats,
        random_state=random_state,
        n_jobs=n_jobs
    )
    importance = pd.DataFrame({
        "feature": list(X_test.columns),
        "importance_mean": perm.importances_mean,
        "importance_std": perm.importances_std
    }).sort_values("importance_mean", ascending=False).reset_index(drop=True)

    logger.info(f"Held-out accuracy: {accuracy:.3f} | weighted F1: {f1:.3f}")
    logger.info(f"Top features: {importance['feature'].tolist()}")

    return {
        "model_name": name,
        "params": dict(params or {}),
        "pipeline": pipeline,
        "label_encoder": encoder,
        "accuracy": float(accuracy),
        "f1_weighted": float(f1),
        "labels": labels,
        "confusion_matrix": cm,
        "classification_report": report,
        "feature_importance": importance
    }


# =====================================================
# CHARTS
# =====================================================
def plot_confusion_matrix(cm: pd.DataFrame):
    fig, ax = plt.subplots(figsize=(9, 7))
    values = cm.to_numpy()
    im = ax.imshow(values, cmap="Blues")
    fig.colorbar(im, ax=ax)

    ax.set_xticks(np.arange(len(cm.columns)))
    ax.set_yticks(np.arange(len(cm.index)))
    ax.set_xticklabels(cm.columns, rotation=30, ha="right")
    ax.set_yticklabels(cm.index)

    threshold = values.max() / 2 if values.size else 0
    for i in range(values.shape[0]):
        for j in range(values.shape[1]):
            ax.text(
                j, i, str(values[i, j]),
                ha="center", va="center",
                color="white" if values[i, j] > threshold else "black"
            )

    ax.set_xlabel("Predicted AQI category")
    ax.set_ylabel("True AQI category")
    ax.set_title("Confusion Matrix (held-out test set)", fontsize=14, weight="bold")
    fig.tight_layout()
    return fig


def plot_feature_importance(importance: pd.DataFrame):
    data = importance.sort_values("importance_mean")

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.barh(
        data["feature"],
        data["importance_mean"],
        xerr=data["importance_std"],
        color="#1abc9c"
    )
    ax.set_xlabel("Mean accuracy drop when permuted")
    ax.set_title("Variable Importance", fontsize=14, weight="bold")
    ax.grid(axis="x", alpha=0.35)
    fig.tight_layout()
    return fig


# =====================================================
# SAVE
# =====================================================
def _json_default(value):
    if isinstance(value, np.generic):
        return value.item()
    raise TypeError(f"Not JSON serializable: {type(value).__name__}")


def _comparison_for_csv(comparison: pd.DataFrame) -> pd.DataFrame:
    out = comparison.copy()
    out["best_params"] = out["best_params"].apply(lambda p: json.dumps(p or {}, default=_json_default))
    return out


def save_evaluation_artifacts(result: dict, comparison: pd.DataFrame, out_dir: str = None):
    out_dir = out_dir or settings.ARTIFACT_DIR
    os.makedirs(out_dir, exist_ok=True)

    trained_at = datetime.utcnow().isoformat()

    metrics = {
        "model_name": result["model_name"],
        "params": result["params"],
        "accuracy": result["accuracy"],
        "f1_weighted": result["f1_weighted"],
        "labels": result["labels"],
        "confusion_matrix": result["confusion_matrix"].to_numpy().tolist(),
        "classification_report": result["classification_report"],
        "feature_importance": result["feature_importance"].to_dict(orient="records"),
        "features": FEATURE_COLUMNS,
        "trained_at": trained_at
    }

    paths = {
        "model": os.path.join(out_dir, MODEL_ARTIFACT),
        "metrics": os.path.join(out_dir, METRICS_FILE),
        "comparison": os.path.join(out_dir, COMPARISON_FILE),
        "confusion_matrix": os.path.join(out_dir, CONFUSION_MATRIX_FIGURE),
        "feature_importance": os.path.join(out_dir, IMPORTANCE_FIGURE)
    }

    joblib.dump({
        "pipeline": result["pipeline"],
        "label_encoder": result["label_encoder"],
        "model_name": result["model_name"],
        "params": result["params"],
        "features": FEATURE_COLUMNS,
        "metrics": {"accuracy": result["accuracy"], "f1_weighted": result["f1_weighted"]},
        "trained_at": trained_at
    }, paths["model"])

    with open(paths["metrics"], "w") as f:
        json.dump(metrics, f, indent=4, default=_json_default)

    _comparison_for_csv(comparison).to_csv(paths["comparison"], index=False)

    for key, fig in [
        ("confusion_matrix", plot_confusion_matrix(result["confusion_matrix"])),
        ("feature_importance", plot_feature_importance(result["feature_importance"]))
    ]:
        fig.savefig(paths[key], dpi=120)
        plt.close(fig)

    logger.info(f"Evaluation artifacts saved to {out_dir}")
    return paths
