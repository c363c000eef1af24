"""Metrics and curve-point serialization utilities."""

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)


def save_metrics(metrics: dict[str, Any], metrics_path: Path) -> Path:
    """Write the metrics dict as indented JSON (NaN kept as a JSON NaN literal)."""
    metrics_path.parent.mkdir(parents=True, exist_ok=True)
    with metrics_path.open("w", encoding="utf-8") as f:
        json.dump(metrics, f, ensure_ascii=False, indent=2)

    logger.info("Saved metrics JSON: %s", metrics_path)
    return metrics_path


def save_curves(curves_df: pd.DataFrame, curves_path: Path) -> Path:
    """Write curve points (group, curve, x, y) as CSV."""
    curves_path.parent.mkdir(parents=True, exist_ok=True)
    curves_df.to_csv(curves_path, index=False)

    logger.info("Saved curve points CSV: %s (%d rows)", curves_path, len(curves_df))
    return curves_path
