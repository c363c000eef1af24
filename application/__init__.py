"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the evaluation workflow for scored binary classifiers.
"""

from application.evaluation import evaluate_group, iter_groups, log_evaluation_summary, run_evaluation
from application.serialize import save_curves, save_metrics

__all__ = [
    # Main workflows
    "run_evaluation",
    "evaluate_group",
    "log_evaluation_summary",
    # Data utilities
    "iter_groups",
    "save_metrics",
    "save_curves",
]
