"""
CLI entrypoint for the classifier evaluation pipeline.

This script performs the following steps:
- loads .env (when present) and configs/experiment.yaml
- creates a per-run output folder under outputs/
- reads the scored dataset (CSV or Excel)
- evaluates each group: AUROC/AUPRC with bootstrap CIs, thresholds at target rates, curve points
- saves metrics to JSON and curve points to CSV
- logs a human-readable summary of results
"""

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from opik import track

from application import log_evaluation_summary, run_evaluation, save_curves, save_metrics
from application.constants import (
    CONFIG_SNAPSHOT_FILENAME,
    CURVES_FILENAME,
    DATA_FINGERPRINT_FILENAME,
    LOG_FILENAME,
    METRICS_FILENAME,
    OUTPUT_ROOT,
)
from infrastructure.config import load_run_config
from infrastructure.constants import EXPERIMENT_FILE
from infrastructure.io import ensure_exists, make_run_dir, read_scored_table
from infrastructure.observability import configure_logging, make_run_tag, set_log_context
from infrastructure.utils import set_seed

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Evaluate a scored binary classifier")
    p.add_argument(
        "--experiment",
        type=str,
        default=str(EXPERIMENT_FILE),
        help="Path to experiment.yaml (default: configs/experiment.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file, loaded when it exists (default: .env)",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level",
    )
    p.add_argument(
        "--file-level",
        type=str,
        default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="File log level",
    )
    return p.parse_args()


@track(
    name="Classifier.evaluation.run",
    type="general",
    metadata={"task": "binary_classifier_evaluation"},
    capture_input=False,
    capture_output=False,
    flush=True,
)
def main() -> None:
    args = _parse_args()

    # Optional: opik credentials
    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    experiment_path = Path(args.experiment)
    ensure_exists(experiment_path, "experiment.yaml")

    cfg = load_run_config(experiment_path)
    set_seed(cfg.stats.seed)

    # ---- Per-run output folder ----
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_id = (
        f"{ts}_"
        f"{cfg.data_file_path.stem}_"
        f"{cfg.encoding.kind.value}_"
        f"boot{cfg.stats.n_boot}"
    )

    run_dir = make_run_dir(OUTPUT_ROOT, run_id)

    log_path = run_dir / LOG_FILENAME
    configure_logging(
        log_file=log_path,
        console_level=getattr(logging, args.console_level),
        file_level=getattr(logging, args.file_level),
    )

    set_log_context(run_id_full=run_id, dataset=cfg.data_file_path.name)

    logger.info("Starting run: run_id=%s (run_tag=%s)", run_id, make_run_tag(run_id))
    logger.info("Run output directory: %s", run_dir)

    # Load scored data
    logger.info("Loading scored data from %s...", cfg.data_file_path)
    df = read_scored_table(cfg.data_file_path, cfg.columns)
    logger.info("Scored data loaded: %d rows, %d columns", df.shape[0], df.shape[1])

    # Save snapshot config + data fingerprint
    (run_dir / CONFIG_SNAPSHOT_FILENAME).write_text(
        json.dumps(cfg.model_dump(mode="json"), ensure_ascii=False, indent=2, default=str),
        encoding="utf-8",
    )
    (run_dir / DATA_FINGERPRINT_FILENAME).write_text(
        json.dumps(
            {
                "data_file": str(cfg.data_file_path),
                "rows": int(df.shape[0]),
                "columns": list(df.columns),
            },
            ensure_ascii=False,
            indent=2,
        ),
        encoding="utf-8",
    )

    metrics, curves_df = run_evaluation(cfg, df)

    metrics_path = save_metrics(metrics, run_dir / METRICS_FILENAME)
    curves_path = save_curves(curves_df, run_dir / CURVES_FILENAME)

    # Human-readable summary
    log_evaluation_summary(
        metrics=metrics,
        metrics_path=metrics_path,
        curves_path=curves_path,
    )

    logger.info("Detailed log: %s", log_path)


if __name__ == "__main__":
    main()
