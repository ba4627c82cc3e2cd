import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import altair as alt
import streamlit as st

from app.app_config import APP_CONFIG, DATA_CONFIG
from app.services.report_service import ReportService
from app.services.aqi_utils import category_color, category_info

# =====================================================
# PAGE CONFIG
# =====================================================
st.set_page_config(
    page_title=APP_CONFIG["title"],
    page_icon=APP_CONFIG["icon"],
    layout=APP_CONFIG["layout"]
)

MODEL_LABELS = {
    "logistic_regression": "Logistic Regression",
    "naive_bayes": "Naive Bayes",
    "decision_tree": "Decision Tree",
    "random_forest": "Random Forest",
    "gradient_boosting": "Gradient Boosting (XGBoost)",
    "lasso_multinomial": "Lasso Multinomial",
    "svm": "Support Vector Machine"
}


def chip(label: str, bg: str):
    return f"""
    <span style="
        display:inline-block;
        padding:4px 10px;
        margin:2px;
        border-radius:999px;
        font-size:13px;
        font-weight:700;
        background:{bg};
        color:white;
    ">
        {label}
    </span>
    """


# =====================================================
# HEADER
# =====================================================
st.title("🌫️ PM2.5 AQI Category Models")
st.caption(f"Data: **{DATA_CONFIG['csv']}** | Artifacts: **{DATA_CONFIG['artifact_dir']}**")
st.divider()

# =====================================================
# LOAD ARTIFACTS
# =====================================================
metrics = ReportService.get_metrics()
comparison = ReportService.get_model_comparison()

if comparison is None or metrics is None:
    st.error("❌ No model artifacts found. Run `python -m models.train_model` first.")
    st.stop()

# =====================================================
# MODEL COMPARISON
# =====================================================
st.subheader("Cross-Validated Accuracy by Model")

comparison["label"] = comparison["model"].map(MODEL_LABELS).fillna(comparison["model"])

chart = alt.Chart(comparison).mark_bar().encode(
    x=alt.X("cv_accuracy_mean", title="Mean CV Accuracy", scale=alt.Scale(domain=[0, 1])),
    y=alt.Y("label", sort="-x", title="Model"),
    tooltip=["label", "search", "cv_accuracy_mean", "cv_accuracy_std"]
)
st.altair_chart(chart, use_container_width=True)

st.dataframe(
    comparison[["label", "search", "cv_accuracy_mean", "cv_accuracy_std", "fit_seconds", "best_params"]]
    .astype({"best_params": str}),
    use_container_width=True
)

st.divider()

# =====================================================
# FINAL EVALUATION
# =====================================================
st.subheader("Held-Out Evaluation")

c1, c2, c3 = st.columns(3)
c1.metric("Best Model", MODEL_LABELS.get(metrics["model_name"], metrics["model_name"]))
c2.metric("Test Accuracy", f"{metrics['accuracy']:.3f}")
c3.metric("Weighted F1", f"{metrics['f1_weighted']:.3f}")

st.markdown(
    "".join(chip(f"{lbl} ({category_info(lbl)['range']})", category_color(lbl)) for lbl in metrics["labels"]),
    unsafe_allow_html=True
)

st.markdown("**Confusion matrix** (rows = true, columns = predicted)")
st.dataframe(ReportService.get_confusion_matrix(), use_container_width=True)

importance = ReportService.get_feature_importance()
if importance is not None and not importance.empty:
    st.markdown("**Variable importance** (permutation, held-out set)")
    imp_chart = alt.Chart(importance).mark_bar().encode(
        x=alt.X("importance_mean", title="Mean accuracy drop"),
        y=alt.Y("feature", sort="-x", title="Feature"),
        tooltip=["feature", "importance_mean", "importance_std"]
    )
    st.altair_chart(imp_chart, use_container_width=True)

for name, path in ReportService.get_evaluation_figures().items():
    st.image(path, caption=name)

st.divider()

# =====================================================
# EXPLORATORY FIGURES
# =====================================================
st.subheader("Exploratory Analysis")

eda_figures = ReportService.get_eda_figures()
if not eda_figures:
    st.info("No EDA figures found.")
else:
    cols = st.columns(2)
    for i, path in enumerate(eda_figures):
        with cols[i % 2]:
            st.image(path, caption=os.path.basename(path))

st.caption(f"Model trained at: {metrics.get('trained_at', 'N/A')}")
