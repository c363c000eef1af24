"""I/O utilities: filesystem operations and dataset loading."""

from infrastructure.io.datasets import read_scored_table, read_table
from infrastructure.io.fs import ensure_exists, make_run_dir

__all__ = [
    "ensure_exists",
    "make_run_dir",
    "read_table",
    "read_scored_table",
]
