"""Bootstrap confidence interval computation."""

import logging
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from domain.evaluation.errors import SingleClassError, check_lengths

logger = logging.getLogger(__name__)


def bootstrap_ci(
    targets: Sequence[Any],
    scores: Sequence[float],
    stat_fn: Callable[[np.ndarray, np.ndarray], float],
    n_boot: int,
    alpha: float,
    seed: int,
) -> tuple[float, float]:
    """
    Non-parametric bootstrap CI for a score-based statistic (e.g., AUROC, AUPRC).

    Resamples holding a single class are skipped, since curve statistics are undefined
    there; the interval is taken over the remaining resamples.

    Args:
        targets: True labels
        scores: Classifier scores
        stat_fn: Function that computes a statistic from (targets, scores)
        n_boot: Number of bootstrap samples
        alpha: Significance level (e.g., 0.05 for 95% CI)
        seed: Random seed for reproducibility

    Returns:
        Tuple of (lower, upper) confidence interval bounds; (nan, nan) if no resample was usable
    """
    check_lengths("targets", targets, "scores", scores)
    y = np.asarray(targets, dtype=object)
    s = np.asarray(scores, dtype=float)

    rng = np.random.default_rng(seed)
    n = len(y)
    idx = np.arange(n)
    stats = np.full(n_boot, np.nan, dtype=float)

    for b in range(n_boot):
        sample_idx = rng.choice(idx, size=n, replace=True)
        try:
            stats[b] = stat_fn(y[sample_idx], s[sample_idx])
        except SingleClassError:
            continue

    skipped = int(np.isnan(stats).sum())
    if skipped:
        logger.debug("Bootstrap: %d of %d resamples skipped (single class or undefined)", skipped, n_boot)
    if skipped == n_boot:
        return float("nan"), float("nan")

    lower = float(np.nanpercentile(stats, 100 * (alpha / 2)))
    upper = float(np.nanpercentile(stats, 100 * (1 - alpha / 2)))
    return lower, upper
