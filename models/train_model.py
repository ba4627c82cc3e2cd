# =====================================================
# PM2.5 AQI CATEGORY MODELING PIPELINE
# load -> label -> EDA -> sample -> split -> tune -> evaluate
# =====================================================

import warnings

from sklearn.exceptions import ConvergenceWarning

from config.settings import settings
from config.logging import logger
from data_pipeline.load_measurements import load_measurements
from data_pipeline.aqi_labels import add_aqi_labels
from data_pipeline.build_training_sample import build_training_sample
from eda.exploratory_plots import generate_eda_report
from models.preprocessing import split_features_target
from models.tuning import tune_all_models
from models.evaluate import (
    evaluate_best_model,
    save_evaluation_artifacts,
    select_best_model
)

warnings.filterwarnings("ignore", category=UserWarning)
warnings.filterwarnings("ignore", category=FutureWarning)
warnings.filterwarnings("ignore", category=ConvergenceWarning)


def run_training_pipeline(csv_path=None, artifact_dir=None, figure_dir=None, make_plots=True):
    logger.info("========== TRAINING PIPELINE STARTED ==========")

    artifact_dir = artifact_dir or settings.ARTIFACT_DIR
    figure_dir = figure_dir or settings.FIGURE_DIR

    # -------------------------------------------------
    # LOAD + LABEL
    # -------------------------------------------------
    df = add_aqi_labels(load_measurements(csv_path))
    logger.info(f"Category counts: {df['aqi_category'].value_counts().to_dict()}")

    # -------------------------------------------------
    # EDA
    # -------------------------------------------------
    figures = generate_eda_report(df, figure_dir) if make_plots else []

    # -------------------------------------------------
    # SAMPLE + SPLIT
    # -------------------------------------------------
    train_df, test_df = build_training_sample(df)
    X_train, y_train = split_features_target(train_df)
    X_test, y_test = split_features_target(test_df)

    # -------------------------------------------------
    # TUNE + COMPARE
    # -------------------------------------------------
    comparison = tune_all_models(X_train, y_train)
    logger.info("Cross-validated accuracy by model:\n" + comparison[
        ["model", "search", "cv_accuracy_mean", "cv_accuracy_std"]
    ].to_string(index=False))

    # -------------------------------------------------
    # FINAL EVALUATION
    # -------------------------------------------------
    best_name, best_params = select_best_model(comparison)
    result = evaluate_best_model(best_name, best_params, X_train, y_train, X_test, y_test)
    paths = save_evaluation_artifacts(result, comparison, artifact_dir)

    logger.info(
        f"BEST MODEL: {best_name} | Test accuracy={result['accuracy']:.3f} | "
        f"F1={result['f1_weighted']:.3f}"
    )
    logger.info("========== TRAINING PIPELINE COMPLETED ==========")

    return {
        "rows_loaded": len(df),
        "train_rows": len(train_df),
        "test_rows": len(test_df),
        "best_model": best_name,
        "best_params": best_params,
        "test_accuracy": result["accuracy"],
        "comparison": comparison,
        "artifacts": paths,
        "figures": figures
    }


if __name__ == "__main__":
    summary = run_training_pipeline()

    print("\n===== TRAINING SUMMARY =====")
    print(summary["comparison"][["model", "cv_accuracy_mean", "cv_accuracy_std"]].to_string(index=False))
    print(f"\nBest model: {summary['best_model']}")
    print(f"Held-out accuracy: {summary['test_accuracy']:.3f}")
    print("============================")
