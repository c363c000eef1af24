"""Exceptions and warnings raised by the evaluation core."""


class EvalMetricsError(ValueError):
    """Base class for invalid-input errors in metric computation."""


class DimensionMismatchError(EvalMetricsError):
    """Paired input arrays have different lengths."""


class EncodingError(EvalMetricsError):
    """A label matches neither the positive nor the negative class."""


class OrderingError(EvalMetricsError):
    """Thresholds, rates or curve x-values are not monotonic."""


class SingleClassError(EvalMetricsError):
    """Targets contain only one class where both are required."""


class UnreachableRateWarning(UserWarning):
    """A requested rate cannot be achieved; a boundary threshold is returned instead."""


def check_lengths(a_name: str, a, b_name: str, b) -> None:
    if len(a) != len(b):
        raise DimensionMismatchError(f"Inconsistent lengths of `{a_name}` ({len(a)}) and `{b_name}` ({len(b)}).")
