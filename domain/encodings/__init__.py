"""
Label encodings for two-class problems.

An encoding decides which raw label values are positive and which are negative,
so metric code never compares raw labels directly.
"""

from domain.encodings.current import current_encoding, reset_encoding, resolve_encoding, set_encoding
from domain.encodings.twoclass import (
    OneMinusOne,
    OneTwo,
    OneVsOne,
    OneVsRest,
    OneZero,
    RestVsOne,
    TwoClassEncoding,
)

__all__ = [
    "TwoClassEncoding",
    "OneZero",
    "OneMinusOne",
    "OneTwo",
    "OneVsOne",
    "OneVsRest",
    "RestVsOne",
    "current_encoding",
    "set_encoding",
    "reset_encoding",
    "resolve_encoding",
]
