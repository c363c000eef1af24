"""Configuration models (Pydantic classes)."""

from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.evaluation.metrics import ALIASES, METRICS
from infrastructure.constants import DATA_DIR


class EncodingKind(str, Enum):
    """Supported two-class label encodings."""

    ONE_ZERO = "one_zero"
    ONE_MINUS_ONE = "one_minus_one"
    ONE_TWO = "one_two"
    ONE_VS_ONE = "one_vs_one"
    ONE_VS_REST = "one_vs_rest"
    REST_VS_ONE = "rest_vs_one"


class EncodingConfig(BaseModel):
    """
    Label encoding of the target column.

    `positive` / `negative` are only used by the parametric kinds; one_vs_rest takes a
    list of negatives and rest_vs_one a list of positives.
    """

    kind: EncodingKind = EncodingKind.ONE_ZERO
    positive: Any = None
    negative: Any = None

    @model_validator(mode="after")
    def _validate(self) -> "EncodingConfig":
        if self.kind in (EncodingKind.ONE_VS_ONE, EncodingKind.ONE_VS_REST, EncodingKind.REST_VS_ONE):
            if self.positive is None or self.negative is None:
                raise ValueError(f"encoding.positive and encoding.negative are required for kind={self.kind.value}")
        if self.kind is EncodingKind.ONE_VS_REST and not isinstance(self.negative, list):
            raise ValueError("encoding.negative must be a list for kind=one_vs_rest")
        if self.kind is EncodingKind.REST_VS_ONE and not isinstance(self.positive, list):
            raise ValueError("encoding.positive must be a list for kind=rest_vs_one")
        return self


class DataColumnsConfig(BaseModel):
    """Column name mapping for the scored dataset."""

    target_col: str
    score_col: str
    group_col: str | None = None


class ThresholdConfig(BaseModel):
    """Quantile thresholds used for full-resolution curves and AUC."""

    n: int | None = Field(default=None, ge=1, description="Number of quantiles (default: number of samples).")
    reduced: bool = True
    zerorecall: bool = True


class CurveConfig(BaseModel):
    """Sampling of the exported ROC / PR curve points."""

    npoints: int = Field(default=300, description="Points per curve; <= 0 exports every threshold.")
    xscale: Literal["identity", "log"] = "identity"
    xlims: tuple[float, float] | None = None

    @model_validator(mode="after")
    def _validate(self) -> "CurveConfig":
        if self.xlims is not None:
            lo, hi = self.xlims
            if not 0 <= lo <= hi <= 1:
                raise ValueError(f"curves.xlims must satisfy 0 <= lo <= hi <= 1, got {self.xlims}")
            if self.xscale == "log" and lo <= 0:
                raise ValueError("curves.xlims lower bound must be positive when xscale=log")
        return self


class RateTargets(BaseModel):
    """Target rates for which decision thresholds are reported."""

    tpr: list[float] = Field(default_factory=list)
    tnr: list[float] = Field(default_factory=list)
    fpr: list[float] = Field(default_factory=list)
    fnr: list[float] = Field(default_factory=list)

    @field_validator("tpr", "tnr", "fpr", "fnr")
    @classmethod
    def _in_unit_interval(cls, v: list[float]) -> list[float]:
        bad = [r for r in v if not 0 <= r <= 1]
        if bad:
            raise ValueError(f"rates must lie in [0, 1], got {bad}")
        return sorted(v)

    def requested(self) -> list[tuple[str, list[float]]]:
        return [(kind, rates) for kind, rates in self.model_dump().items() if rates]


class StatsConfig(BaseModel):
    """Configuration for bootstrap statistics."""

    seed: int = 42
    n_boot: int = Field(default=1000, ge=0)
    alpha: float = Field(default=0.05, gt=0, lt=1)


class RunConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from experiment.yaml
    - Validated and enriched by configuration loader
    - Consumed by the evaluation workflow
    """

    data_dir: Path = Field(default_factory=lambda: DATA_DIR)
    data_file_path: Path = Field(..., description="Path to the scored dataset file (Excel or CSV).")
    columns: DataColumnsConfig

    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    curves: CurveConfig = Field(default_factory=CurveConfig)
    rates: RateTargets = Field(default_factory=RateTargets)
    stats: StatsConfig = Field(default_factory=StatsConfig)

    report_metrics: list[str] = Field(
        default_factory=lambda: ["precision", "recall", "false_positive_rate", "f1_score", "accuracy"],
        description="Metrics reported for the confusion matrix at each selected threshold.",
    )

    @field_validator("report_metrics")
    @classmethod
    def _known_metrics(cls, v: list[str]) -> list[str]:
        unknown = [m for m in v if m not in METRICS and m not in ALIASES]
        if unknown:
            raise ValueError(f"Unknown metrics in report_metrics: {unknown}")
        return v

    @model_validator(mode="after")
    def _validate(self) -> "RunConfig":
        if self.columns.group_col is not None and not str(self.columns.group_col).strip():
            self.columns.group_col = None
        if self.columns.target_col == self.columns.score_col:
            raise ValueError("columns.target_col and columns.score_col must differ")
        return self
