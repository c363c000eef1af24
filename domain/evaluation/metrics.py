"""
Binary classification metrics derived from a confusion matrix.

Every metric is a plain function of a ConfusionMatrix registered in METRICS.
`compute_metric` applies one to a matrix, a list of matrices, or to the arguments
accepted by `confusion_matrix` (targets + predictions / scores + thresholds).
"""

import math
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from domain.encodings import TwoClassEncoding
from domain.evaluation.confusion import ConfusionMatrix, confusion_matrix

MetricFn = Callable[..., float]


def _div(a: float, b: float) -> float:
    """IEEE division: 0/0 is NaN and x/0 is ±inf instead of raising."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a)
    return a / b


def _tpr(x: ConfusionMatrix) -> float:
    return _div(x.tp, x.p)


def _tnr(x: ConfusionMatrix) -> float:
    return _div(x.tn, x.n)


def _fpr(x: ConfusionMatrix) -> float:
    return _div(x.fp, x.n)


def _fnr(x: ConfusionMatrix) -> float:
    return _div(x.fn, x.p)


def _precision(x: ConfusionMatrix) -> float:
    # no sample classified positive: precision is 1 by convention
    val = _div(x.tp, x.tp + x.fp)
    return 1.0 if math.isnan(val) else val


def _accuracy(x: ConfusionMatrix) -> float:
    return _div(x.tp + x.tn, x.p + x.n)


def _balanced_accuracy(x: ConfusionMatrix) -> float:
    return (_tpr(x) + _tnr(x)) / 2


def _fbeta(x: ConfusionMatrix, beta: float = 1.0) -> float:
    prec, rec = _precision(x), _tpr(x)
    b2 = beta**2
    return _div((1 + b2) * prec * rec, b2 * prec + rec)


def _mcc(x: ConfusionMatrix) -> float:
    denom = (x.tp + x.fp) * (x.tp + x.fn) * (x.tn + x.fp) * (x.tn + x.fn)
    return _div(x.tp * x.tn - x.fp * x.fn, math.sqrt(denom))


def _quant(x: ConfusionMatrix) -> float:
    return _div(x.fn + x.tn, x.p + x.n)


METRICS: dict[str, MetricFn] = {
    "true_positive": lambda x: x.tp,
    "true_negative": lambda x: x.tn,
    "false_positive": lambda x: x.fp,
    "false_negative": lambda x: x.fn,
    "true_positive_rate": _tpr,
    "true_negative_rate": _tnr,
    "false_positive_rate": _fpr,
    "false_negative_rate": _fnr,
    "precision": _precision,
    "negative_predictive_value": lambda x: _div(x.tn, x.tn + x.fn),
    "false_discovery_rate": lambda x: _div(x.fp, x.fp + x.tp),
    "false_omission_rate": lambda x: _div(x.fn, x.fn + x.tn),
    "threat_score": lambda x: _div(x.tp, x.tp + x.fn + x.fp),
    "accuracy": _accuracy,
    "balanced_accuracy": _balanced_accuracy,
    "error_rate": lambda x: 1 - _accuracy(x),
    "balanced_error_rate": lambda x: 1 - _balanced_accuracy(x),
    "f1_score": lambda x: _fbeta(x, 1.0),
    "fbeta_score": _fbeta,
    "matthews_correlation_coefficient": _mcc,
    "quant": _quant,
    "topquant": lambda x: 1 - _quant(x),
    "positive_likelihood_ratio": lambda x: _div(_tpr(x), _fpr(x)),
    "negative_likelihood_ratio": lambda x: _div(_fnr(x), _tnr(x)),
    "diagnostic_odds_ratio": lambda x: _div(_tpr(x) * _tnr(x), _fpr(x) * _fnr(x)),
    "prevalence": lambda x: _div(x.p, x.p + x.n),
}

ALIASES: dict[str, str] = {
    "sensitivity": "true_positive_rate",
    "recall": "true_positive_rate",
    "hit_rate": "true_positive_rate",
    "specificity": "true_negative_rate",
    "selectivity": "true_negative_rate",
    "fall_out": "false_positive_rate",
    "type_I_error": "false_positive_rate",
    "miss_rate": "false_negative_rate",
    "type_II_error": "false_negative_rate",
    "positive_predictive_value": "precision",
    "critical_success_index": "threat_score",
    "mcc": "matthews_correlation_coefficient",
}


def get_metric(name: str) -> MetricFn:
    """Look up a metric by name or alias."""
    key = ALIASES.get(name, name)
    try:
        return METRICS[key]
    except KeyError as e:
        raise KeyError(f"Unknown metric '{name}'. Available: {sorted(METRICS) + sorted(ALIASES)}") from e


def compute_metric(
    name: str,
    *args: Any,
    encoding: TwoClassEncoding | None = None,
    **kwargs: Any,
) -> float | np.ndarray:
    """
    Evaluate a metric.

    `args` is either a single ConfusionMatrix, a sequence of them, or the positional
    arguments of `confusion_matrix`. Extra keyword arguments go to the metric
    (e.g. `beta` for fbeta_score).

    Returns:
        A float for a single matrix, a numpy array for several

    Examples:
        >>> targets = [0, 1, 1, 0, 1, 0, 1, 1, 0, 1]
        >>> predicts = [0, 1, 0, 1, 1, 0, 0, 0, 1, 1]
        >>> compute_metric("precision", targets, predicts)
        0.6
    """
    fn = get_metric(name)

    if len(args) == 1:
        source = args[0]
    else:
        source = confusion_matrix(*args, encoding=encoding)

    if isinstance(source, ConfusionMatrix):
        return fn(source, **kwargs)
    if isinstance(source, Sequence) and all(isinstance(cm, ConfusionMatrix) for cm in source):
        return np.array([fn(cm, **kwargs) for cm in source], dtype=float)
    raise TypeError(
        "Expected a ConfusionMatrix, a sequence of ConfusionMatrix, or (targets, predicts/scores[, thresholds])."
    )


def _bind(name: str) -> Callable[..., float | np.ndarray]:
    def metric(*args: Any, encoding: TwoClassEncoding | None = None, **kwargs: Any) -> float | np.ndarray:
        return compute_metric(name, *args, encoding=encoding, **kwargs)

    metric.__name__ = name
    metric.__doc__ = f"Compute `{ALIASES.get(name, name)}`; see `compute_metric` for accepted arguments."
    return metric


true_positive = _bind("true_positive")
true_negative = _bind("true_negative")
false_positive = _bind("false_positive")
false_negative = _bind("false_negative")
true_positive_rate = _bind("true_positive_rate")
true_negative_rate = _bind("true_negative_rate")
false_positive_rate = _bind("false_positive_rate")
false_negative_rate = _bind("false_negative_rate")
precision = _bind("precision")
negative_predictive_value = _bind("negative_predictive_value")
false_discovery_rate = _bind("false_discovery_rate")
false_omission_rate = _bind("false_omission_rate")
threat_score = _bind("threat_score")
accuracy = _bind("accuracy")
balanced_accuracy = _bind("balanced_accuracy")
error_rate = _bind("error_rate")
balanced_error_rate = _bind("balanced_error_rate")
f1_score = _bind("f1_score")
fbeta_score = _bind("fbeta_score")
matthews_correlation_coefficient = _bind("matthews_correlation_coefficient")
quant = _bind("quant")
topquant = _bind("topquant")
positive_likelihood_ratio = _bind("positive_likelihood_ratio")
negative_likelihood_ratio = _bind("negative_likelihood_ratio")
diagnostic_odds_ratio = _bind("diagnostic_odds_ratio")
prevalence = _bind("prevalence")

sensitivity = recall = hit_rate = true_positive_rate
specificity = selectivity = true_negative_rate
fall_out = type_I_error = false_positive_rate
miss_rate = type_II_error = false_negative_rate
positive_predictive_value = precision
critical_success_index = threat_score
mcc = matthews_correlation_coefficient
