"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- encodings: two-class label encodings and the default-encoding register
- evaluation: confusion matrices, thresholds, rate inversion, metrics, curves
"""

from domain.encodings import TwoClassEncoding, current_encoding, set_encoding
from domain.evaluation import ConfusionMatrix

__all__ = [
    "ConfusionMatrix",
    "TwoClassEncoding",
    "current_encoding",
    "set_encoding",
]
