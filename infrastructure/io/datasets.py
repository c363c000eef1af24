"""Scored dataset loading utilities."""

import logging
from collections.abc import Callable
from pathlib import Path

import pandas as pd

from infrastructure.config.models import DataColumnsConfig

logger = logging.getLogger(__name__)

_READERS: dict[str, Callable[[Path], pd.DataFrame]] = {
    ".csv": pd.read_csv,
    ".tsv": lambda p: pd.read_csv(p, sep="\t"),
    ".xlsx": pd.read_excel,
}


def read_table(path: Path) -> pd.DataFrame:
    """
    Read a tabular data file based on its extension (.csv, .tsv, .xlsx).

    Raises:
        FileNotFoundError: If file does not exist
        ValueError: If file format is not supported
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"Unsupported file format: {path.suffix}. Supported formats: {', '.join(_READERS)}")
    return reader(path)


def read_scored_table(path: Path, columns: DataColumnsConfig) -> pd.DataFrame:
    """
    Read a scored dataset and check the configured columns.

    Scores are coerced to float; unparsable scores become NaN and are never
    classified positive.

    Raises:
        KeyError: If a configured column is missing
    """
    df = read_table(path)

    required = [columns.target_col, columns.score_col]
    if columns.group_col is not None:
        required.append(columns.group_col)
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise KeyError(f"Columns {missing} not found in {path.name}. Available: {list(df.columns)}")

    scores = pd.to_numeric(df[columns.score_col], errors="coerce")
    n_bad = int(scores.isna().sum() - df[columns.score_col].isna().sum())
    if n_bad:
        logger.warning("%d non-numeric values in score column '%s' set to NaN", n_bad, columns.score_col)
    df[columns.score_col] = scores.astype(float)

    return df
