"""Application-level constants."""

from pathlib import Path

# Group key used when no group column is configured
ALL_GROUPS_KEY = "all"

# Columns of the exported curve points
CURVE_GROUP_COL = "group"
CURVE_NAME_COL = "curve"
CURVE_X_COL = "x"
CURVE_Y_COL = "y"

# Curves exported for every group
EXPORTED_CURVES = ("roc", "pr")

# Output filenames
METRICS_FILENAME = "metrics.json"
CURVES_FILENAME = "curve_points.csv"
CONFIG_SNAPSHOT_FILENAME = "config.resolved.json"
DATA_FINGERPRINT_FILENAME = "data_fingerprint.json"

# Output directory structure
OUTPUT_ROOT = Path("outputs")
LOG_FILENAME = "run.log"
