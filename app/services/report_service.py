import json
import os

import pandas as pd

from config.settings import settings
from config.constants import (
    METRICS_FILE,
    COMPARISON_FILE,
    CONFUSION_MATRIX_FIGURE,
    IMPORTANCE_FIGURE
)


class ReportService:
    """
    Read-only access to the artifacts written by the training pipeline.
    Every getter returns None when its artifact has not been produced yet.
    """

    artifact_dir = settings.ARTIFACT_DIR
    figure_dir = settings.FIGURE_DIR

    @classmethod
    def _path(cls, filename):
        return os.path.join(cls.artifact_dir, filename)

    # =================================================
    # FINAL EVALUATION METRICS
    # =================================================
    @classmethod
    def get_metrics(cls):
        path = cls._path(METRICS_FILE)
        if not os.path.exists(path):
            return None

        with open(path) as f:
            return json.load(f)

    # =================================================
    # CROSS-VALIDATED MODEL COMPARISON
    # =================================================
    @classmethod
    def get_model_comparison(cls):
        path = cls._path(COMPARISON_FILE)
        if not os.path.exists(path):
            return None

        df = pd.read_csv(path)
        if "best_params" in df.columns:
            df["best_params"] = df["best_params"].fillna("{}").apply(json.loads)
        return df

    # =================================================
    # CONFUSION MATRIX (labelled frame)
    # =================================================
    @classmethod
    def get_confusion_matrix(cls):
        metrics = cls.get_metrics()
        if not metrics:
            return None

        labels = metrics["labels"]
        return pd.DataFrame(
            metrics["confusion_matrix"],
            index=pd.Index(labels, name="true"),
            columns=pd.Index(labels, name="predicted")
        )

    @classmethod
    def get_feature_importance(cls):
        metrics = cls.get_metrics()
        if not metrics:
            return None
        return pd.DataFrame(metrics["feature_importance"])

    # =================================================
    # FIGURES
    # =================================================
    @classmethod
    def get_evaluation_figures(cls):
        return {
            name: path
            for name, path in [
                ("Confusion Matrix", cls._path(CONFUSION_MATRIX_FIGURE)),
                ("Variable Importance", cls._path(IMPORTANCE_FIGURE))
            ]
            if os.path.exists(path)
        }

    @classmethod
    def get_eda_figures(cls):
        if not os.path.isdir(cls.figure_dir):
            return []

        return sorted(
            os.path.join(cls.figure_dir, f)
            for f in os.listdir(cls.figure_dir)
            if f.endswith(".png")
        )
