"""Evaluation workflow and summary logging."""

import logging
import warnings
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from opik import track

from application.constants import (
    ALL_GROUPS_KEY,
    CURVE_GROUP_COL,
    CURVE_NAME_COL,
    CURVE_X_COL,
    CURVE_Y_COL,
    EXPORTED_CURVES,
)
from domain.encodings import TwoClassEncoding
from domain.evaluation import (
    SingleClassError,
    UnreachableRateWarning,
    apply_curve,
    au_prcurve,
    au_roccurve,
    bootstrap_ci,
    compute_metric,
    confusion_at_threshold,
    threshold_at_fnr,
    threshold_at_fpr,
    threshold_at_tnr,
    threshold_at_tpr,
    thresholds,
)
from infrastructure.config import build_encoding
from infrastructure.config.models import RunConfig
from infrastructure.observability import clear_group_context, set_log_context
from infrastructure.utils import derive_seed

logger = logging.getLogger(__name__)

RATE_INVERSIONS = {
    "tpr": threshold_at_tpr,
    "tnr": threshold_at_tnr,
    "fpr": threshold_at_fpr,
    "fnr": threshold_at_fnr,
}


def iter_groups(cfg: RunConfig, df: pd.DataFrame) -> Iterator[tuple[str, pd.DataFrame]]:
    """Yield (group key, frame) pairs; the whole frame under 'all' when no group column is set."""
    group_col = cfg.columns.group_col
    if group_col is None:
        yield ALL_GROUPS_KEY, df
        return

    if group_col not in df.columns:
        raise KeyError(f"Group column '{group_col}' not found in data. Available: {list(df.columns)}")

    for key, frame in df.groupby(group_col, sort=True):
        yield str(key), frame


def _rate_thresholds(
    kind: str,
    rates: list[float],
    targets: list[Any],
    scores: np.ndarray,
    encoding: TwoClassEncoding,
    report_metrics: list[str],
) -> list[dict[str, Any]]:
    """Thresholds reaching each requested rate, with the confusion matrix and headline metrics there."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", UnreachableRateWarning)
        ts = RATE_INVERSIONS[kind](targets, scores, rates, encoding)

    for w in caught:
        if issubclass(w.category, UnreachableRateWarning):
            logger.warning("%s", w.message)

    rows: list[dict[str, Any]] = []
    for rate, threshold in zip(rates, np.atleast_1d(ts), strict=True):
        cm = confusion_at_threshold(targets, scores, float(threshold), encoding)
        row: dict[str, Any] = {
            "rate": float(rate),
            "threshold": float(threshold),
            "confusion_matrix": cm.model_dump(),
        }
        for name in report_metrics:
            row[name] = float(compute_metric(name, cm))
        rows.append(row)
    return rows


def evaluate_group(
    cfg: RunConfig,
    frame: pd.DataFrame,
    encoding: TwoClassEncoding,
    seed: int,
) -> tuple[dict[str, Any], pd.DataFrame]:
    """
    Evaluate one group of scored samples.

    Raises:
        SingleClassError: If the group holds a single class
    """
    target_col = cfg.columns.target_col
    score_col = cfg.columns.score_col

    n_missing = int(frame[target_col].isna().sum())
    if n_missing:
        logger.warning("Dropping %d rows with a missing target", n_missing)
        frame = frame.dropna(subset=[target_col])

    n_unscored = int(frame[score_col].isna().sum())
    if n_unscored:
        logger.warning("Dropping %d rows with a missing score", n_unscored)
        frame = frame.dropna(subset=[score_col])

    targets = frame[target_col].tolist()
    scores = frame[score_col].astype(float).to_numpy()
    n_pos = int(np.count_nonzero(encoding.positive_mask(targets)))
    if not 0 < n_pos < len(targets):
        raise SingleClassError(f"Only one class present in {len(targets)} scored samples with encoding {encoding}.")

    ths = thresholds(
        scores,
        cfg.thresholds.n,
        reduced=cfg.thresholds.reduced,
        zerorecall=cfg.thresholds.zerorecall,
    )
    auroc = au_roccurve(targets, scores, ths, encoding=encoding)
    auprc = au_prcurve(targets, scores, ths, encoding=encoding)
    logger.info("AUROC=%.4f AUPRC=%.4f (%d thresholds)", auroc, auprc, len(ths))

    def _auroc(y: np.ndarray, s: np.ndarray) -> float:
        return au_roccurve(y, s, encoding=encoding)

    def _auprc(y: np.ndarray, s: np.ndarray) -> float:
        return au_prcurve(y, s, encoding=encoding)

    stats = cfg.stats
    auroc_ci = bootstrap_ci(targets, scores, _auroc, stats.n_boot, stats.alpha, seed)
    auprc_ci = bootstrap_ci(targets, scores, _auprc, stats.n_boot, stats.alpha, seed)

    metrics: dict[str, Any] = {
        "n_samples": len(targets),
        "n_positive": n_pos,
        "n_negative": len(targets) - n_pos,
        "auroc": auroc,
        "auroc_ci": list(auroc_ci),
        "auprc": auprc,
        "auprc_ci": list(auprc_ci),
        "ci_level": 1 - stats.alpha,
        "thresholds": {},
    }

    for kind, rates in cfg.rates.requested():
        metrics["thresholds"][kind] = _rate_thresholds(
            kind, rates, targets, scores, encoding, cfg.report_metrics
        )

    curve_frames = []
    for name in EXPORTED_CURVES:
        x, y = apply_curve(
            name,
            targets,
            scores,
            encoding=encoding,
            npoints=cfg.curves.npoints,
            xscale=cfg.curves.xscale,
            xlims=cfg.curves.xlims,
        )
        curve_frames.append(pd.DataFrame({CURVE_NAME_COL: name, CURVE_X_COL: x, CURVE_Y_COL: y}))

    return metrics, pd.concat(curve_frames, ignore_index=True)


@track(
    name="Classifier.evaluation",
    type="general",
    metadata={"task": "binary_classifier_evaluation"},
    capture_input=False,
)
def run_evaluation(cfg: RunConfig, df: pd.DataFrame) -> tuple[dict[str, Any], pd.DataFrame]:
    """
    Evaluate scored samples, per group when a group column is configured.

    Groups holding a single class cannot be evaluated; they are logged and reported
    with an `error` entry instead of metrics.

    Args:
        cfg: RunConfig instance
        df: Scored dataset with target and score columns

    Returns:
        Tuple of (metrics dict keyed by group, curve points DataFrame)
    """
    for col in (cfg.columns.target_col, cfg.columns.score_col):
        if col not in df.columns:
            raise KeyError(f"Column '{col}' not found in data. Available: {list(df.columns)}")

    encoding = build_encoding(cfg.encoding)
    logger.info("Evaluating %d rows with encoding %s", len(df), encoding)

    metrics: dict[str, Any] = {}
    curve_frames: list[pd.DataFrame] = []

    for key, frame in iter_groups(cfg, df):
        set_log_context(group=key)
        try:
            group_metrics, group_curves = evaluate_group(cfg, frame, encoding, derive_seed(cfg.stats.seed, key))
        except SingleClassError as e:
            logger.warning("Skipping group: %s", e)
            metrics[key] = {"n_samples": len(frame), "error": str(e)}
            continue
        finally:
            clear_group_context()

        metrics[key] = group_metrics
        group_curves.insert(0, CURVE_GROUP_COL, key)
        curve_frames.append(group_curves)

    if curve_frames:
        curves_df = pd.concat(curve_frames, ignore_index=True)
    else:
        curves_df = pd.DataFrame(columns=[CURVE_GROUP_COL, CURVE_NAME_COL, CURVE_X_COL, CURVE_Y_COL])

    return metrics, curves_df


def log_evaluation_summary(
    metrics: dict[str, Any],
    metrics_path: Path,
    curves_path: Path,
) -> None:
    """
    Log a concise, human-readable evaluation summary.

    Args:
        metrics: Dictionary of computed metrics keyed by group
        metrics_path: Path to metrics JSON file
        curves_path: Path to curve points CSV file
    """
    logger.info("=== Evaluation Summary ===")

    for key, group in metrics.items():
        logger.info("--- Group: %s ---", key)
        if "error" in group:
            logger.info("Not evaluated (%d samples): %s", group["n_samples"], group["error"])
            continue

        logger.info(
            "Samples: %d (positive=%d, negative=%d)",
            group["n_samples"],
            group["n_positive"],
            group["n_negative"],
        )
        level = 100 * group["ci_level"]
        logger.info(
            "AUROC: %.4f (%.0f%% CI [%.4f, %.4f])",
            group["auroc"],
            level,
            group["auroc_ci"][0],
            group["auroc_ci"][1],
        )
        logger.info(
            "AUPRC: %.4f (%.0f%% CI [%.4f, %.4f])",
            group["auprc"],
            level,
            group["auprc_ci"][0],
            group["auprc_ci"][1],
        )

        for kind, rows in group["thresholds"].items():
            for row in rows:
                extras = ", ".join(
                    f"{k}={v:.4f}" for k, v in row.items() if k not in ("rate", "threshold", "confusion_matrix")
                )
                logger.info("%s=%.3f -> threshold=%.6g (%s)", kind, row["rate"], row["threshold"], extras)

    logger.info("--- Artifacts ---")
    logger.info("Metrics JSON: %s", metrics_path)
    logger.info("Curve points CSV: %s", curves_path)
