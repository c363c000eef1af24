"""
Evaluation core for binary classifiers.

Provides:
- ConfusionMatrix and its accumulation from labels, one threshold, or a sorted threshold sweep
- Threshold generation and rate inversion (threshold at a given TPR/TNR/FPR/FNR)
- Metrics derived from confusion matrices
- ROC / PR curves and trapezoidal AUC
- Bootstrap confidence intervals

All functions are pure (numpy + pydantic only).
"""

from domain.evaluation.bootstrap import bootstrap_ci
from domain.evaluation.confusion import (
    ConfusionMatrix,
    confusion_at_threshold,
    confusion_at_thresholds,
    confusion_from_predictions,
    confusion_matrix,
)
from domain.evaluation.curves import (
    PR,
    ROC,
    CurveSpec,
    apply_curve,
    au_prcurve,
    au_roccurve,
    auc,
    auc_trapezoidal,
    curve_points,
    get_curve,
    prcurve,
    register_curve,
    roccurve,
)
from domain.evaluation.errors import (
    DimensionMismatchError,
    EncodingError,
    EvalMetricsError,
    OrderingError,
    SingleClassError,
    UnreachableRateWarning,
)
from domain.evaluation.metrics import ALIASES, METRICS, compute_metric, get_metric
from domain.evaluation.thresholds import (
    threshold_at_fnr,
    threshold_at_fpr,
    threshold_at_k,
    threshold_at_rate,
    threshold_at_tnr,
    threshold_at_tpr,
    thresholds,
)

__all__ = [
    # Confusion matrices
    "ConfusionMatrix",
    "confusion_matrix",
    "confusion_from_predictions",
    "confusion_at_threshold",
    "confusion_at_thresholds",
    # Thresholds
    "thresholds",
    "threshold_at_k",
    "threshold_at_rate",
    "threshold_at_tpr",
    "threshold_at_tnr",
    "threshold_at_fpr",
    "threshold_at_fnr",
    # Metrics
    "METRICS",
    "ALIASES",
    "compute_metric",
    "get_metric",
    # Curves
    "CurveSpec",
    "ROC",
    "PR",
    "register_curve",
    "get_curve",
    "curve_points",
    "apply_curve",
    "roccurve",
    "prcurve",
    "auc",
    "auc_trapezoidal",
    "au_roccurve",
    "au_prcurve",
    # Statistics
    "bootstrap_ci",
    # Errors
    "EvalMetricsError",
    "DimensionMismatchError",
    "EncodingError",
    "OrderingError",
    "SingleClassError",
    "UnreachableRateWarning",
]
