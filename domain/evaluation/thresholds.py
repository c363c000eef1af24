"""Decision-threshold generation and rate inversion (threshold achieving a target TPR/TNR/FPR/FNR)."""

import logging
import warnings
from collections.abc import Sequence
from typing import Any

import numpy as np

from domain.encodings import TwoClassEncoding, resolve_encoding
from domain.evaluation.confusion import positive_class_mask
from domain.evaluation.errors import (
    OrderingError,
    SingleClassError,
    UnreachableRateWarning,
    check_lengths,
)

logger = logging.getLogger(__name__)

Rates = float | Sequence[float] | np.ndarray


def thresholds(
    scores: Sequence[float],
    n: int | None = None,
    *,
    reduced: bool = True,
    zerorecall: bool = True,
) -> np.ndarray:
    """
    Return `n` thresholds placed at evenly spaced quantiles of `scores`.

    Quantiles use linear interpolation between order statistics (Hyndman-Fan type 7,
    numpy's default "linear" method). When the quantile grid matches the sample size
    the thresholds are exactly the sorted scores. NaN scores are ignored.

    Args:
        scores: Classifier scores
        n: Number of quantiles (default: len(scores))
        reduced: Cap the count at min(len(scores), n)
        zerorecall: Append the next float above the largest threshold, where no sample
            is classified positive

    Examples:
        >>> thresholds([0, 1, 2, 3], 5).tolist()
        [0.0, 1.0, 2.0, 3.0, 3.0000000000000004]
        >>> thresholds([0, 1, 2, 3], 5, reduced=False, zerorecall=False).tolist()
        [0.0, 0.75, 1.5, 2.25, 3.0]
        >>> thresholds([0.1, float("nan"), 0.3], zerorecall=False).tolist()
        [0.1, 0.3]
    """
    s = np.asarray(scores, dtype=float).ravel()
    s = np.sort(s[~np.isnan(s)])
    if s.size == 0:
        raise ValueError("`scores` must hold at least one non-NaN value.")
    n = s.size if n is None else int(n)
    if n < 1:
        raise ValueError(f"Number of thresholds must be positive, got {n}.")

    count = min(s.size, n) if reduced else n
    positions = np.linspace(0, s.size - 1, count)
    thres = np.interp(positions, np.arange(s.size), s)

    if zerorecall:
        thres = np.append(thres, np.nextafter(thres[-1], np.inf))
    return thres


def threshold_at_k(scores: Sequence[float], k: int, *, rev: bool = True) -> float:
    """
    Return the k-th largest score (or the k-th smallest with `rev=False`).

    Examples:
        >>> threshold_at_k(range(11), 3)
        8.0
        >>> threshold_at_k(range(11), 3, rev=False)
        2.0
    """
    s = np.sort(np.asarray(scores, dtype=float).ravel())
    if not 1 <= k <= s.size:
        raise ValueError(f"`k` must be between 1 and `len(scores) = {s.size}`, got {k}.")
    return float(s[-k] if rev else s[k - 1])


def threshold_at_rate(
    sorted_scores: np.ndarray,
    rates: np.ndarray,
    *,
    descending: bool,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Sweep one class's sorted scores and pick, for each rate, the boundary threshold.

    Walking the scores in order, the swept rate at position i is `i / len(scores)`,
    evaluated only where the score value changes so ties never yield a threshold
    between equal scores. Each requested rate gets the boundary just before the swept
    rate first exceeds it.

    Descending sweeps return the next float above the boundary score and the last
    score itself for rate 1; ascending sweeps return the boundary score. Rates only
    reachable at a swept rate of 0 are flagged.

    Args:
        sorted_scores: Scores of one class, sorted descending if `descending` else ascending
        rates: Target rates in [0, 1], sorted ascending
        descending: Direction of `sorted_scores`

    Returns:
        Tuple of (thresholds, unreachable flags), both aligned with `rates`
    """
    s = np.asarray(sorted_scores, dtype=float)
    r = np.asarray(rates, dtype=float)
    if s.size == 0:
        raise SingleClassError("Cannot invert a rate over an empty set of scores.")
    if np.any(np.isnan(r)) or np.any((r < 0) | (r > 1)):
        raise ValueError("Input rates out of [0, 1].")
    if np.any(np.diff(r) < 0):
        raise OrderingError("Input rates must be sorted.")

    n_rates, n_scores = r.size, s.size
    unreachable = np.zeros(n_rates, dtype=bool)

    last = s[-1]
    if descending:
        thresh = np.full(n_rates, np.nextafter(last, np.inf))
        thresh[r == 1] = last
    else:
        thresh = np.full(n_rates, last)

    rate_last = 0.0
    t_last = s[0]
    j = 0
    for i, score in enumerate(s):
        if score == t_last:
            continue
        rate = i / n_scores

        while j < n_rates and rate > r[j]:
            if rate_last == 0 and r[j] != 0:
                unreachable[j] = True
            thresh[j] = np.nextafter(t_last, np.inf) if descending else t_last
            j += 1
        if j == n_rates:
            break

        rate_last = rate
        t_last = score

    return thresh, unreachable


def _normalize_rates(alpha: Rates) -> tuple[np.ndarray, bool, bool]:
    """Return (ascending rates, scalar input?, reversed?)."""
    if np.ndim(alpha) == 0:
        return np.array([float(alpha)]), True, False  # ty: ignore

    a = np.asarray(alpha, dtype=float).ravel()
    steps = np.diff(a)
    if np.all(steps >= 0):
        return a, False, False
    if np.all(steps <= 0):
        return a[::-1], False, True
    raise OrderingError("Input rates must be sorted (ascending or descending).")


def _finish(ts: np.ndarray, scalar: bool, flipped: bool) -> float | np.ndarray:
    if flipped:
        ts = ts[::-1]
    return float(ts[0]) if scalar else ts.copy()


def _class_scores(
    targets: Sequence[Any],
    scores: Sequence[float],
    encoding: TwoClassEncoding | None,
    *,
    positive: bool,
) -> np.ndarray:
    enc = resolve_encoding(encoding)
    check_lengths("targets", targets, "scores", scores)
    pos = positive_class_mask(enc, targets, "targets")
    s = np.asarray(scores, dtype=float)
    selected = s[pos] if positive else s[~pos]
    if selected.size == 0:
        which = "positive" if positive else "negative"
        raise SingleClassError(f"No {which} samples in `targets` with encoding {enc}.")
    return selected


def _warn_unreachable(kind: str, bound: str, limit: float, alpha: np.ndarray) -> None:
    values = ", ".join(f"{a:g}" for a in alpha)
    message = f"The closest {bound} feasible {kind} to some of the required values ({values}) is {limit:.1f}!"
    logger.debug(message)
    warnings.warn(message, UnreachableRateWarning, stacklevel=3)


def threshold_at_tpr(
    targets: Sequence[Any],
    scores: Sequence[float],
    alpha: Rates,
    encoding: TwoClassEncoding | None = None,
) -> float | np.ndarray:
    """
    Largest threshold t with true positive rate `tpr(t) >= alpha`.

    Args:
        targets: True labels
        scores: Classifier scores; `score >= t` is classified positive
        alpha: A rate or a sorted sequence of rates in [0, 1]
        encoding: Label encoding (default: current encoding)

    Returns:
        One threshold (scalar `alpha`) or an array aligned with `alpha`

    Examples:
        >>> targets = [0, 1, 1, 0, 1, 0, 1, 1, 0, 1]
        >>> scores = [0.2, 0.7, 0.3, 0.6, 0.8, 0.4, 0.3, 0.5, 0.7, 0.9]
        >>> threshold_at_tpr(targets, scores, 0.5)
        0.7
    """
    scores_pos = np.sort(_class_scores(targets, scores, encoding, positive=True))
    a, scalar, flipped = _normalize_rates(alpha)

    rates = np.round(1 - a[::-1], 14)
    ts, unreachable = threshold_at_rate(scores_pos, rates, descending=False)

    if unreachable.any():
        _warn_unreachable("true positive rate", "higher", 1.0, a[unreachable[::-1]])
    return _finish(ts[::-1], scalar, flipped)


def threshold_at_tnr(
    targets: Sequence[Any],
    scores: Sequence[float],
    alpha: Rates,
    encoding: TwoClassEncoding | None = None,
) -> float | np.ndarray:
    """
    Smallest threshold t with true negative rate `tnr(t) >= alpha`.

    Examples:
        >>> targets = [0, 1, 1, 0, 1, 0, 1, 1, 0, 1]
        >>> scores = [0.2, 0.7, 0.3, 0.6, 0.8, 0.4, 0.3, 0.5, 0.7, 0.9]
        >>> threshold_at_tnr(targets, scores, 0.5)
        0.4000000000000001
    """
    scores_neg = np.sort(_class_scores(targets, scores, encoding, positive=False))[::-1]
    a, scalar, flipped = _normalize_rates(alpha)

    rates = np.round(1 - a[::-1], 14)
    ts, unreachable = threshold_at_rate(scores_neg, rates, descending=True)

    if unreachable.any():
        _warn_unreachable("true negative rate", "higher", 1.0, a[unreachable[::-1]])
    return _finish(ts[::-1], scalar, flipped)


def threshold_at_fpr(
    targets: Sequence[Any],
    scores: Sequence[float],
    alpha: Rates,
    encoding: TwoClassEncoding | None = None,
) -> float | np.ndarray:
    """
    Smallest threshold t with false positive rate `fpr(t) <= alpha`.

    Examples:
        >>> targets = [0, 1, 1, 0, 1, 0, 1, 1, 0, 1]
        >>> scores = [0.2, 0.7, 0.3, 0.6, 0.8, 0.4, 0.3, 0.5, 0.7, 0.9]
        >>> threshold_at_fpr(targets, scores, 0.5)
        0.4000000000000001
    """
    scores_neg = np.sort(_class_scores(targets, scores, encoding, positive=False))[::-1]
    a, scalar, flipped = _normalize_rates(alpha)

    ts, unreachable = threshold_at_rate(scores_neg, a, descending=True)

    if unreachable.any():
        _warn_unreachable("false positive rate", "lower", 0.0, a[unreachable])
    return _finish(ts, scalar, flipped)


def threshold_at_fnr(
    targets: Sequence[Any],
    scores: Sequence[float],
    alpha: Rates,
    encoding: TwoClassEncoding | None = None,
) -> float | np.ndarray:
    """
    Largest threshold t with false negative rate `fnr(t) <= alpha`.

    Examples:
        >>> targets = [0, 1, 1, 0, 1, 0, 1, 1, 0, 1]
        >>> scores = [0.2, 0.7, 0.3, 0.6, 0.8, 0.4, 0.3, 0.5, 0.7, 0.9]
        >>> threshold_at_fnr(targets, scores, 0.5)
        0.7
    """
    scores_pos = np.sort(_class_scores(targets, scores, encoding, positive=True))
    a, scalar, flipped = _normalize_rates(alpha)

    ts, unreachable = threshold_at_rate(scores_pos, a, descending=False)

    if unreachable.any():
        _warn_unreachable("false negative rate", "lower", 0.0, a[unreachable])
    return _finish(ts, scalar, flipped)
