"""Configuration loading from YAML files."""

from pathlib import Path
from typing import Any

import yaml

from domain.encodings import TwoClassEncoding
from infrastructure.config.models import (
    DataColumnsConfig,
    EncodingConfig,
    EncodingKind,
    RunConfig,
)
from infrastructure.constants import DATA_DIR

from .registry import ENCODING_BY_KIND


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def build_encoding(cfg: EncodingConfig) -> TwoClassEncoding:
    """
    Instantiate the label encoding described by an EncodingConfig.

    Raises:
        ValueError: If no encoding class is registered for the kind
    """
    encoding_cls = ENCODING_BY_KIND.get(cfg.kind)
    if encoding_cls is None:
        raise ValueError(f"No encoding registered for kind: {cfg.kind.value}")

    if cfg.kind in (EncodingKind.ONE_VS_ONE, EncodingKind.ONE_VS_REST, EncodingKind.REST_VS_ONE):
        return encoding_cls(cfg.positive, cfg.negative)  # ty: ignore
    return encoding_cls()


def load_run_config(experiment_path: Path) -> RunConfig:
    """
    Load experiment.yaml and construct a fully-resolved RunConfig.

    Required keys: data_file, target_col, score_col.
    Optional sections: encoding, thresholds, curves, rates, stats, report_metrics.
    The data file is resolved relative to `data_dir` (default: dataset/).
    """
    exp = _load_yaml(experiment_path)

    for key in ("data_file", "target_col", "score_col"):
        if not exp.get(key):
            raise ValueError(f"experiment.yaml missing required key: {key}")

    data_dir = Path(exp.get("data_dir", str(DATA_DIR)))
    data_file_path = data_dir / exp["data_file"]

    columns = DataColumnsConfig(
        target_col=str(exp["target_col"]),
        score_col=str(exp["score_col"]),
        group_col=exp.get("group_col"),
    )

    optional: dict[str, Any] = {}
    for section in ("encoding", "thresholds", "curves", "rates", "stats"):
        block = exp.get(section)
        if block is None:
            continue
        if not isinstance(block, dict):
            raise ValueError(f"experiment.yaml section '{section}' must be a mapping, got {type(block).__name__}")
        optional[section] = block

    if exp.get("report_metrics") is not None:
        optional["report_metrics"] = list(exp["report_metrics"])

    return RunConfig(
        data_dir=data_dir,
        data_file_path=data_file_path,
        columns=columns,
        **optional,
    )
