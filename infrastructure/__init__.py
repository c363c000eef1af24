"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Configuration loading (YAML, environment)
- Dataset reading (CSV, Excel)
- Observability (logging, tracing)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import (
    RunConfig,
    StatsConfig,
    build_encoding,
    load_run_config,
)

__all__ = [
    # Configuration (most commonly used)
    "load_run_config",
    "build_encoding",
    "RunConfig",
    "StatsConfig",
]
