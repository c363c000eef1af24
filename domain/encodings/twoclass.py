"""Two-class label encodings (which raw label values count as positive / negative)."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, field_validator


class TwoClassEncoding(BaseModel, ABC):
    """
    Base class for label encodings of two-class problems.

    Subclasses only define which labels belong to the positive and negative class;
    membership tests, validation, recoding and classification are shared.
    """

    model_config = ConfigDict(frozen=True)

    @property
    @abstractmethod
    def positives(self) -> tuple[Any, ...]:
        """Labels representing the positive class."""

    @property
    @abstractmethod
    def negatives(self) -> tuple[Any, ...]:
        """Labels representing the negative class."""

    @property
    def positive_label(self) -> Any:
        return self.positives[0]

    @property
    def negative_label(self) -> Any:
        return self.negatives[0]

    def ispositive(self, value: Any) -> bool:
        return any(value == label for label in self.positives)

    def isnegative(self, value: Any) -> bool:
        return any(value == label for label in self.negatives)

    def is_valid(self, value: Any) -> bool:
        return self.ispositive(value) or self.isnegative(value)

    def check_encoding(self, values: Iterable[Any]) -> bool:
        """Return True if every value belongs to exactly one of the two classes."""
        return all(self.is_valid(v) for v in values)

    def positive_mask(self, values: Iterable[Any]) -> np.ndarray:
        return np.fromiter((self.ispositive(v) for v in values), dtype=bool)

    def negative_mask(self, values: Iterable[Any]) -> np.ndarray:
        return np.fromiter((self.isnegative(v) for v in values), dtype=bool)

    def recode(self, new: "TwoClassEncoding", value: Any) -> Any:
        """
        Translate a label from this encoding into `new`.

        Examples:
            >>> OneZero().recode(OneVsOne("pos", "neg"), 0)
            'neg'
        """
        return new.positive_label if self.ispositive(value) else new.negative_label

    def classify(self, score: float, threshold: float) -> Any:
        """Positive label if `score >= threshold`, negative label otherwise."""
        return self.positive_label if score >= threshold else self.negative_label

    def __str__(self) -> str:
        return (
            f"{type(self).__name__}: positive class: {', '.join(map(str, self.positives))}; "
            f"negative class: {', '.join(map(str, self.negatives))}"
        )


class OneZero(TwoClassEncoding):
    """`1` is positive, `0` is negative."""

    @property
    def positives(self) -> tuple[Any, ...]:
        return (1,)

    @property
    def negatives(self) -> tuple[Any, ...]:
        return (0,)


class OneMinusOne(TwoClassEncoding):
    """`1` is positive, `-1` is negative."""

    @property
    def positives(self) -> tuple[Any, ...]:
        return (1,)

    @property
    def negatives(self) -> tuple[Any, ...]:
        return (-1,)


class OneTwo(TwoClassEncoding):
    """`1` is positive, `2` is negative."""

    @property
    def positives(self) -> tuple[Any, ...]:
        return (1,)

    @property
    def negatives(self) -> tuple[Any, ...]:
        return (2,)


class OneVsOne(TwoClassEncoding):
    """One arbitrary label per class."""

    positive: Any
    negative: Any

    def __init__(self, positive: Any, negative: Any, **data: Any) -> None:
        super().__init__(positive=positive, negative=negative, **data)

    @property
    def positives(self) -> tuple[Any, ...]:
        return (self.positive,)

    @property
    def negatives(self) -> tuple[Any, ...]:
        return (self.negative,)


class OneVsRest(TwoClassEncoding):
    """A single positive label against several negative labels."""

    positive: Any
    negative: tuple[Any, ...]

    def __init__(self, positive: Any, negative: Iterable[Any], **data: Any) -> None:
        super().__init__(positive=positive, negative=tuple(negative), **data)

    @field_validator("negative")
    @classmethod
    def _non_empty(cls, v: tuple[Any, ...]) -> tuple[Any, ...]:
        if not v:
            raise ValueError("OneVsRest needs at least one negative label")
        return v

    @property
    def positives(self) -> tuple[Any, ...]:
        return (self.positive,)

    @property
    def negatives(self) -> tuple[Any, ...]:
        return self.negative


class RestVsOne(TwoClassEncoding):
    """Several positive labels against a single negative label."""

    positive: tuple[Any, ...]
    negative: Any

    def __init__(self, positive: Iterable[Any], negative: Any, **data: Any) -> None:
        super().__init__(positive=tuple(positive), negative=negative, **data)

    @field_validator("positive")
    @classmethod
    def _non_empty(cls, v: tuple[Any, ...]) -> tuple[Any, ...]:
        if not v:
            raise ValueError("RestVsOne needs at least one positive label")
        return v

    @property
    def positives(self) -> tuple[Any, ...]:
        return self.positive

    @property
    def negatives(self) -> tuple[Any, ...]:
        return (self.negative,)
