"""ROC / precision-recall curve assembly and trapezoidal AUC."""

import logging
import warnings
from collections.abc import Callable, Sequence
from typing import Any, Literal

import numpy as np
from pydantic import BaseModel, ConfigDict

from domain.encodings import TwoClassEncoding, resolve_encoding
from domain.evaluation.confusion import ConfusionMatrix, confusion_at_thresholds, positive_class_mask
from domain.evaluation.errors import OrderingError, SingleClassError, UnreachableRateWarning, check_lengths
from domain.evaluation.metrics import false_positive_rate, precision, true_positive_rate
from domain.evaluation.thresholds import threshold_at_fpr, threshold_at_tpr
from domain.evaluation.thresholds import thresholds as score_thresholds

logger = logging.getLogger(__name__)

Points = tuple[np.ndarray, np.ndarray]
XScale = Literal["identity", "log"]


class CurveSpec(BaseModel):
    """
    A curve kind, described by the functions it needs rather than by its type.

    - points: maps confusion matrices to (x, y) arrays
    - sampler: rate-inversion function used to pick thresholds for evenly spaced x values
    - sampling_lims: (encoding, targets) -> (lo, hi) range of feasible x values
    """

    model_config = ConfigDict(frozen=True)

    name: str
    points: Callable[[Sequence[ConfusionMatrix]], Points]
    sampler: Callable[..., Any]
    sampling_lims: Callable[[TwoClassEncoding, Sequence[Any]], tuple[float, float]]


def _roc_points(cms: Sequence[ConfusionMatrix]) -> Points:
    return false_positive_rate(list(cms)), true_positive_rate(list(cms))  # ty: ignore


def _pr_points(cms: Sequence[ConfusionMatrix]) -> Points:
    return true_positive_rate(list(cms)), precision(list(cms))  # ty: ignore


def _roc_lims(encoding: TwoClassEncoding, targets: Sequence[Any]) -> tuple[float, float]:
    return 1 / int(np.count_nonzero(encoding.negative_mask(targets))), 1.0


# TODO: estimate the smallest feasible recall from tied top scores instead of 1/p
def _pr_lims(encoding: TwoClassEncoding, targets: Sequence[Any]) -> tuple[float, float]:
    return 1 / int(np.count_nonzero(encoding.positive_mask(targets))), 1.0


ROC = CurveSpec(name="roc", points=_roc_points, sampler=threshold_at_fpr, sampling_lims=_roc_lims)
PR = CurveSpec(name="pr", points=_pr_points, sampler=threshold_at_tpr, sampling_lims=_pr_lims)

_CURVE_REGISTRY: dict[str, CurveSpec] = {}


def register_curve(spec: CurveSpec, *, override: bool = False) -> None:
    """Register a curve kind under `spec.name` so it can be requested by name."""
    if spec.name in _CURVE_REGISTRY and not override:
        raise RuntimeError(f"Curve already registered under name={spec.name!r}. Use override=True to replace.")
    _CURVE_REGISTRY[spec.name] = spec
    logger.debug("Registered curve %s", spec.name)


def get_curve(curve: CurveSpec | str) -> CurveSpec:
    if isinstance(curve, CurveSpec):
        return curve
    try:
        return _CURVE_REGISTRY[curve]
    except KeyError as e:
        raise KeyError(f"Unknown curve '{curve}'. Available: {sorted(_CURVE_REGISTRY)}") from e


register_curve(ROC)
register_curve(PR)


def logrange(lo: float, hi: float, num: int) -> np.ndarray:
    """`num` points evenly spaced in log10 between `lo` and `hi`."""
    return np.logspace(np.log10(lo), np.log10(hi), num)


def curve_points(curve: CurveSpec | str, cms: Sequence[ConfusionMatrix]) -> Points:
    return get_curve(curve).points(cms)


def apply_curve(
    curve: CurveSpec | str,
    targets: Sequence[Any],
    scores: Sequence[float],
    thresholds: Sequence[float] | None = None,
    *,
    encoding: TwoClassEncoding | None = None,
    npoints: int = 300,
    xscale: XScale = "identity",
    xlims: tuple[float, float] | None = None,
) -> Points:
    """
    Compute curve points from targets and scores.

    Threshold selection:
    - explicit `thresholds` are used as given;
    - `npoints <= 0` or `npoints >= len(targets) + 1` uses every quantile of the scores;
    - otherwise `npoints` x values are spread over `xlims` (linearly or in log10) and
      turned into thresholds by the curve's rate-inversion sampler.

    Raises:
        SingleClassError: If `targets` hold only one class
    """
    spec = get_curve(curve)
    enc = resolve_encoding(encoding)
    check_lengths("targets", targets, "scores", scores)

    n_pos = int(np.count_nonzero(positive_class_mask(enc, targets, "targets")))
    if not 0 < n_pos < len(targets):
        raise SingleClassError(f"Only one class present in `targets` with encoding {enc}.")

    if thresholds is None:
        if npoints <= 0 or npoints >= len(targets) + 1:
            thresholds = score_thresholds(scores)
        else:
            lo, hi = xlims if xlims is not None else spec.sampling_lims(enc, targets)
            if xscale == "identity":
                quantiles = np.linspace(lo, hi, npoints)
            elif xscale == "log":
                quantiles = logrange(lo, hi, npoints)
            else:
                raise ValueError(f"Unsupported xscale {xscale!r}; expected 'identity' or 'log'.")

            with warnings.catch_warnings():
                warnings.simplefilter("ignore", UnreachableRateWarning)
                thresholds = spec.sampler(targets, scores, quantiles, enc)

    cms = confusion_at_thresholds(targets, scores, thresholds, enc)
    logger.debug("%s curve: %d points", spec.name, len(cms))
    return spec.points(cms)


def _dispatch(curve: CurveSpec | str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Points:
    if len(args) == 1:
        return curve_points(curve, args[0])
    return apply_curve(curve, *args, **kwargs)


def roccurve(*args: Any, **kwargs: Any) -> Points:
    """
    False positive rates and true positive rates.

    Accepts a sequence of ConfusionMatrix, or the arguments of `apply_curve`
    (targets, scores[, thresholds]) with its keyword options.

    Examples:
        >>> targets = [0, 1, 1, 0, 1, 0, 1, 1, 0, 1]
        >>> scores = [0.4, 0.7, 0.2, 0.6, 0.8, 0.4, 0.5, 0.3, 0.9, 0.7]
        >>> fpr, tpr = roccurve(targets, scores, [0.5])
        >>> fpr.tolist(), tpr.round(4).tolist()
        ([0.5], [0.6667])
    """
    return _dispatch(ROC, args, kwargs)


def prcurve(*args: Any, **kwargs: Any) -> Points:
    """Recalls and precisions; arguments as for `roccurve`."""
    return _dispatch(PR, args, kwargs)


def auc_trapezoidal(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Area under the curve (x, y) by the trapezoidal rule.

    `x` may be sorted either way. Segments with zero width or a NaN contribution
    add nothing.

    Raises:
        DimensionMismatchError: If `x` and `y` lengths differ
        OrderingError: If `x` is not monotonic
    """
    check_lengths("x", x, "y", y)
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    if xs.size < 2:
        return 0.0

    steps = np.diff(xs)
    if np.all(steps >= 0):
        pass
    elif np.all(steps <= 0):
        xs, ys = xs[::-1], ys[::-1]
    else:
        raise OrderingError("`x` must be sorted.")

    dx = np.diff(xs)
    dy = (ys[1:] + ys[:-1]) / 2
    keep = ~(np.isnan(dx) | np.isnan(dy) | (dx == 0))
    return float(np.sum(dx[keep] * dy[keep]))


def auc(curve: CurveSpec | str, *args: Any, npoints: int = -1, **kwargs: Any) -> float:
    """Area under a curve; by default built from every threshold (`npoints=-1`)."""
    if len(args) == 1:
        return auc_trapezoidal(*curve_points(curve, args[0]))
    return auc_trapezoidal(*apply_curve(curve, *args, npoints=npoints, **kwargs))


def au_roccurve(*args: Any, **kwargs: Any) -> float:
    """Area under the ROC curve."""
    return auc(ROC, *args, **kwargs)


def au_prcurve(*args: Any, **kwargs: Any) -> float:
    """Area under the precision-recall curve."""
    return auc(PR, *args, **kwargs)
