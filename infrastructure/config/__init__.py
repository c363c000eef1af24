"""
Configuration management: models, loading, and validation.

Handles:
- RunConfig: Main experiment configuration
- Encoding, threshold, curve, rate and stats sections
- YAML loading and encoding construction

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import build_encoding, load_run_config
from infrastructure.config.models import (
    CurveConfig,
    # Column mapping
    DataColumnsConfig,
    # Encodings
    EncodingConfig,
    EncodingKind,
    RateTargets,
    # Main config
    RunConfig,
    # Stats config
    StatsConfig,
    ThresholdConfig,
)

__all__ = [
    # Main config (most commonly used)
    "RunConfig",
    "load_run_config",
    # Encodings
    "EncodingKind",
    "EncodingConfig",
    "build_encoding",
    # Sections
    "DataColumnsConfig",
    "ThresholdConfig",
    "CurveConfig",
    "RateTargets",
    "StatsConfig",
]
