"""Two-class confusion matrix and its accumulation from labels or scores."""

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, computed_field, model_validator

from domain.encodings import TwoClassEncoding, resolve_encoding
from domain.evaluation.errors import EncodingError, OrderingError, check_lengths

logger = logging.getLogger(__name__)

Number = int | float


class ConfusionMatrix(BaseModel):
    """
    Counts of classification outcomes at a fixed decision threshold.

    Only tp, tn, fp and fn are stored; `p = tp + fn` and `n = tn + fp` are derived.
    All four counts share one numeric type: ints stay ints unless any count is a float.

    Examples:
        >>> cm = ConfusionMatrix(3, 2, 2, 3)
        >>> (cm.p, cm.n)
        (6, 4)
        >>> cm + cm == ConfusionMatrix(6, 4, 4, 6)
        True
    """

    model_config = ConfigDict(frozen=True)

    tp: Number
    tn: Number
    fp: Number
    fn: Number

    def __init__(self, tp: Number, tn: Number, fp: Number, fn: Number) -> None:
        super().__init__(tp=tp, tn=tn, fp=fp, fn=fn)

    @model_validator(mode="before")
    @classmethod
    def _promote(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = {k: (v.item() if isinstance(v, np.generic) else v) for k, v in data.items()}
        counts = [values.get(k) for k in ("tp", "tn", "fp", "fn")]
        if any(isinstance(v, float) for v in counts):
            values = {k: (float(v) if k in ("tp", "tn", "fp", "fn") else v) for k, v in values.items()}
        return values

    @computed_field
    @property
    def p(self) -> Number:
        """Number of positive samples."""
        return self.tp + self.fn

    @computed_field
    @property
    def n(self) -> Number:
        """Number of negative samples."""
        return self.tn + self.fp

    def __add__(self, other: object) -> "ConfusionMatrix":
        if not isinstance(other, ConfusionMatrix):
            return NotImplemented
        return ConfusionMatrix(
            self.tp + other.tp,
            self.tn + other.tn,
            self.fp + other.fp,
            self.fn + other.fn,
        )

    def __radd__(self, other: object) -> "ConfusionMatrix":
        # lets sum() start from its integer 0
        if isinstance(other, int) and other == 0:
            return self
        return self.__add__(other)


def positive_class_mask(encoding: TwoClassEncoding, values: Sequence[Any], name: str) -> np.ndarray:
    """Return the positive-class mask of `values`, raising if any value fits neither class."""
    pos = encoding.positive_mask(values)
    neg = encoding.negative_mask(values)
    if not np.all(pos | neg):
        bad = [v for v, ok in zip(values, pos | neg, strict=False) if not ok][:5]
        raise EncodingError(f"`{name}` vector uses incorrect label encoding ({encoding}); offending values: {bad}")
    return pos


def _counts(pos_target: np.ndarray, pos_pred: np.ndarray) -> ConfusionMatrix:
    tp = int(np.count_nonzero(pos_target & pos_pred))
    fn = int(np.count_nonzero(pos_target & ~pos_pred))
    fp = int(np.count_nonzero(~pos_target & pos_pred))
    tn = int(np.count_nonzero(~pos_target & ~pos_pred))
    return ConfusionMatrix(tp, tn, fp, fn)


def confusion_from_predictions(
    targets: Sequence[Any],
    predicts: Sequence[Any],
    encoding: TwoClassEncoding | None = None,
) -> ConfusionMatrix:
    """
    Confusion matrix from true and predicted labels.

    Args:
        targets: True labels
        predicts: Predicted labels, encoded like `targets`
        encoding: Label encoding (default: current encoding)

    Raises:
        DimensionMismatchError: If lengths differ
        EncodingError: If a target or prediction fits neither class
    """
    enc = resolve_encoding(encoding)
    check_lengths("targets", targets, "predicts", predicts)
    pos_target = positive_class_mask(enc, targets, "targets")
    pos_pred = positive_class_mask(enc, predicts, "predicts")
    return _counts(pos_target, pos_pred)


def confusion_at_threshold(
    targets: Sequence[Any],
    scores: Sequence[float],
    threshold: float,
    encoding: TwoClassEncoding | None = None,
) -> ConfusionMatrix:
    """Confusion matrix when samples with `score >= threshold` are classified positive."""
    enc = resolve_encoding(encoding)
    check_lengths("targets", targets, "scores", scores)
    pos_target = positive_class_mask(enc, targets, "targets")
    s = np.asarray(scores, dtype=float)
    return _counts(pos_target, s >= threshold)


def _ascending(values: np.ndarray, name: str) -> tuple[np.ndarray, bool]:
    """Return `values` in non-decreasing order and whether they had to be reversed."""
    steps = np.diff(values)
    if np.all(steps >= 0):
        return values, False
    if np.all(steps <= 0):
        return values[::-1], True
    raise OrderingError(f"`{name}` must be sorted (ascending or descending).")


def confusion_at_thresholds(
    targets: Sequence[Any],
    scores: Sequence[float],
    thresholds: Sequence[float],
    encoding: TwoClassEncoding | None = None,
) -> list[ConfusionMatrix]:
    """
    Confusion matrices for a sorted sequence of thresholds in a single pass over the scores.

    Each sample falls into the bucket `count(thresholds <= score)`. A running sum of the
    per-class bucket counts then gives, for threshold i, the positives (fn_i) and
    negatives (tn_i) scoring below it. Cost is O(n log t + t) instead of O(n * t).

    Args:
        targets: True labels
        scores: Classifier scores, aligned with `targets`
        thresholds: Thresholds sorted ascending or descending
        encoding: Label encoding (default: current encoding)

    Returns:
        One ConfusionMatrix per threshold, in the order given

    Raises:
        DimensionMismatchError: If `targets` and `scores` lengths differ
        EncodingError: If a target fits neither class
        OrderingError: If thresholds are not monotonic
    """
    enc = resolve_encoding(encoding)
    check_lengths("targets", targets, "scores", scores)
    pos_target = positive_class_mask(enc, targets, "targets")

    ts = np.asarray(thresholds, dtype=float).ravel()
    if ts.size == 0:
        return []
    ts, flipped = _ascending(ts, "thresholds")

    s = np.asarray(scores, dtype=float)
    buckets = np.searchsorted(ts, s, side="right")
    # NaN scores never reach a threshold
    buckets[np.isnan(s)] = 0

    nt = ts.size
    bins_p = np.bincount(buckets[pos_target], minlength=nt + 1)
    bins_n = np.bincount(buckets[~pos_target], minlength=nt + 1)
    p = int(np.count_nonzero(pos_target))
    n = int(pos_target.size - p)

    fns = np.cumsum(bins_p)[:nt]
    tns = np.cumsum(bins_n)[:nt]
    cms = [ConfusionMatrix(p - int(fn), int(tn), n - int(tn), int(fn)) for fn, tn in zip(fns, tns, strict=True)]

    logger.debug("Accumulated %d confusion matrices over %d samples (p=%d, n=%d)", nt, s.size, p, n)
    return cms[::-1] if flipped else cms


def confusion_matrix(
    targets: Sequence[Any],
    values: Sequence[Any],
    thresholds: float | Sequence[float] | None = None,
    *,
    encoding: TwoClassEncoding | None = None,
) -> ConfusionMatrix | list[ConfusionMatrix]:
    """
    Build confusion matrices from labels or scores.

    - `thresholds is None`: `values` are predicted labels, returns one matrix
    - scalar `thresholds`: `values` are scores, returns one matrix
    - sequence of `thresholds`: `values` are scores, returns one matrix per threshold

    Examples:
        >>> targets = [0, 1, 1, 0, 1, 0, 1, 1, 0, 1]
        >>> scores = [0.4, 0.7, 0.2, 0.6, 0.8, 0.4, 0.5, 0.3, 0.9, 0.7]
        >>> confusion_matrix(targets, scores, 0.6) == ConfusionMatrix(3, 2, 2, 3)
        True
    """
    if thresholds is None:
        return confusion_from_predictions(targets, values, encoding)
    if np.ndim(thresholds) == 0:
        return confusion_at_threshold(targets, values, float(thresholds), encoding)  # ty: ignore
    return confusion_at_thresholds(targets, values, thresholds, encoding)  # ty: ignore
