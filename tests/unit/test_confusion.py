import numpy as np
import pytest
from pydantic import ValidationError
from sklearn.metrics import confusion_matrix as sk_confusion_matrix

from domain.encodings import OneMinusOne, OneVsOne, set_encoding
from domain.evaluation import (
    ConfusionMatrix,
    DimensionMismatchError,
    EncodingError,
    OrderingError,
    confusion_at_threshold,
    confusion_at_thresholds,
    confusion_from_predictions,
    confusion_matrix,
)


def test_counts_are_promoted_to_a_common_type() -> None:
    ints = ConfusionMatrix(np.int64(3), 2, 2, 3)
    assert all(type(v) is int for v in (ints.tp, ints.tn, ints.fp, ints.fn))

    floats = ConfusionMatrix(1, 2, 3.5, 4)
    assert all(type(v) is float for v in (floats.tp, floats.tn, floats.fp, floats.fn))
    assert floats.p == 5.0
    assert floats.n == 5.5


def test_confusion_matrix_is_frozen() -> None:
    cm = ConfusionMatrix(1, 2, 3, 4)
    with pytest.raises(ValidationError):
        cm.tp = 10


def test_add_and_sum() -> None:
    a = ConfusionMatrix(1, 2, 3, 4)
    b = ConfusionMatrix(4, 3, 2, 1)

    assert a + b == ConfusionMatrix(5, 5, 5, 5)
    assert (a + b).p == 10
    assert sum([a, b, a]) == ConfusionMatrix(6, 7, 8, 9)
    assert ConfusionMatrix(3, 2, 1, 4) + ConfusionMatrix(3, 2, 1, 4) == ConfusionMatrix(6, 4, 2, 8)


def test_from_predictions(example_targets, example_predicts) -> None:
    cm = confusion_from_predictions(example_targets, example_predicts)

    assert cm == ConfusionMatrix(3, 2, 2, 3)
    assert (cm.p, cm.n) == (6, 4)


def test_from_predictions_matches_sklearn() -> None:
    rng = np.random.default_rng(0)
    targets = rng.integers(0, 2, size=200).tolist()
    predicts = rng.integers(0, 2, size=200).tolist()

    tn, fp, fn, tp = sk_confusion_matrix(targets, predicts, labels=[0, 1]).ravel()
    assert confusion_from_predictions(targets, predicts) == ConfusionMatrix(tp, tn, fp, fn)


def test_bool_labels_match_one_zero() -> None:
    cm = confusion_from_predictions([True, False, True], [1, 0, 0])
    assert cm == ConfusionMatrix(1, 1, 0, 1)


def test_length_mismatch_raises() -> None:
    with pytest.raises(DimensionMismatchError):
        confusion_from_predictions([0, 1, 1], [0, 1])
    with pytest.raises(DimensionMismatchError):
        confusion_at_thresholds([0, 1, 1], [0.1, 0.2], [0.5])


def test_wrong_encoding_raises() -> None:
    with pytest.raises(EncodingError, match="incorrect label encoding"):
        confusion_from_predictions([0, 1, 2], [0, 1, 1])
    with pytest.raises(EncodingError):
        confusion_at_threshold([0, 1, -1], [0.1, 0.2, 0.3], 0.2)


def test_explicit_and_current_encoding() -> None:
    targets = ["spam", "ham", "spam", "ham"]
    predicts = ["spam", "spam", "ham", "ham"]
    enc = OneVsOne("spam", "ham")

    assert confusion_from_predictions(targets, predicts, enc) == ConfusionMatrix(1, 1, 1, 1)

    set_encoding(OneMinusOne())
    assert confusion_from_predictions([1, -1, 1], [1, 1, 1]) == ConfusionMatrix(2, 0, 1, 0)


def test_at_threshold_uses_greater_or_equal(example_targets, example_scores) -> None:
    cm = confusion_at_threshold(example_targets, example_scores, 0.7)
    # positives >= 0.7: 0.7, 0.8, 0.9 ; negatives >= 0.7: 0.7
    assert cm == ConfusionMatrix(3, 3, 1, 3)


def test_nan_score_is_never_positive() -> None:
    targets = [1, 0, 1]
    scores = [np.nan, 0.2, 0.9]

    assert confusion_at_threshold(targets, scores, 0.0) == ConfusionMatrix(1, 0, 1, 1)
    assert confusion_at_thresholds(targets, scores, [0.0]) == [ConfusionMatrix(1, 0, 1, 1)]


@pytest.mark.parametrize("descending", [False, True])
def test_batch_sweep_matches_single_thresholds(descending: bool) -> None:
    rng = np.random.default_rng(42)
    targets = rng.integers(0, 2, size=300).tolist()
    scores = np.round(rng.random(300), 2)  # rounding creates ties
    ths = np.unique(np.concatenate([scores[:40], [-1.0, 0.5, 2.0]]))
    if descending:
        ths = ths[::-1]

    batch = confusion_at_thresholds(targets, scores, ths)

    assert len(batch) == len(ths)
    assert batch == [confusion_at_threshold(targets, scores, t) for t in ths]
    assert all(cm.p + cm.n == len(targets) for cm in batch)


def test_sweep_is_monotone_in_threshold() -> None:
    rng = np.random.default_rng(1)
    targets = rng.integers(0, 2, size=100).tolist()
    scores = rng.random(100)
    cms = confusion_at_thresholds(targets, scores, np.linspace(0, 1, 25))

    tps = [cm.tp for cm in cms]
    fps = [cm.fp for cm in cms]
    assert tps == sorted(tps, reverse=True)
    assert fps == sorted(fps, reverse=True)


def test_unsorted_thresholds_raise(example_targets, example_scores) -> None:
    with pytest.raises(OrderingError):
        confusion_at_thresholds(example_targets, example_scores, [0.2, 0.8, 0.5])


def test_empty_thresholds_give_empty_list(example_targets, example_scores) -> None:
    assert confusion_at_thresholds(example_targets, example_scores, []) == []


def test_single_class_targets_are_allowed() -> None:
    cms = confusion_at_thresholds([1, 1, 1], [0.1, 0.5, 0.9], [0.5])
    assert cms == [ConfusionMatrix(2, 0, 0, 1)]


def test_dispatcher(example_targets, example_scores, example_predicts) -> None:
    assert confusion_matrix(example_targets, example_predicts) == ConfusionMatrix(3, 2, 2, 3)
    assert confusion_matrix(example_targets, example_scores, 0.7) == ConfusionMatrix(3, 3, 1, 3)

    cms = confusion_matrix(example_targets, example_scores, [0.5, 0.7])
    assert isinstance(cms, list)
    assert cms[1] == ConfusionMatrix(3, 3, 1, 3)
