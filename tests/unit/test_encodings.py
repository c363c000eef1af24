import contextvars

import numpy as np
import pytest
from pydantic import ValidationError

from domain.encodings import (
    OneMinusOne,
    OneTwo,
    OneVsOne,
    OneVsRest,
    OneZero,
    RestVsOne,
    current_encoding,
    reset_encoding,
    set_encoding,
)


@pytest.mark.parametrize(
    ("encoding", "pos", "neg"),
    [
        (OneZero(), 1, 0),
        (OneMinusOne(), 1, -1),
        (OneTwo(), 1, 2),
        (OneVsOne("yes", "no"), "yes", "no"),
    ],
)
def test_fixed_encodings(encoding, pos, neg) -> None:
    assert encoding.ispositive(pos)
    assert encoding.isnegative(neg)
    assert not encoding.ispositive(neg)
    assert encoding.check_encoding([pos, neg, pos])
    assert not encoding.check_encoding([pos, neg, "other"])


def test_one_vs_rest_and_rest_vs_one() -> None:
    ovr = OneVsRest("cat", ["dog", "bird"])
    assert ovr.negatives == ("dog", "bird")
    assert ovr.isnegative("bird")
    assert ovr.negative_label == "dog"

    rvo = RestVsOne([1, 2, 3], 0)
    assert rvo.positives == (1, 2, 3)
    assert rvo.ispositive(3)
    assert rvo.positive_label == 1


def test_parametric_encodings_need_labels() -> None:
    with pytest.raises(ValidationError):
        OneVsRest("cat", [])
    with pytest.raises(ValidationError):
        RestVsOne([], 0)


def test_masks() -> None:
    enc = OneVsRest(1, [0, 2])
    values = [1, 0, 2, 1, 5]

    np.testing.assert_array_equal(enc.positive_mask(values), [True, False, False, True, False])
    np.testing.assert_array_equal(enc.negative_mask(values), [False, True, True, False, False])


def test_recode_and_classify() -> None:
    assert OneZero().recode(OneMinusOne(), 0) == -1
    assert OneMinusOne().recode(OneVsOne("a", "b"), 1) == "a"
    assert OneVsOne("a", "b").classify(0.5, 0.5) == "a"
    assert OneVsOne("a", "b").classify(0.49, 0.5) == "b"


def test_encodings_are_frozen_and_comparable() -> None:
    enc = OneVsOne("a", "b")
    assert enc == OneVsOne("a", "b")
    with pytest.raises(ValidationError):
        enc.positive = "c"


def test_str_lists_both_classes() -> None:
    assert str(OneVsRest(1, [0, 2])) == "OneVsRest: positive class: 1; negative class: 0, 2"


def test_current_encoding_register() -> None:
    assert current_encoding() == OneZero()

    enc = set_encoding(OneTwo())
    assert enc == OneTwo()
    assert current_encoding() == OneTwo()

    assert reset_encoding() == OneZero()
    assert current_encoding() == OneZero()


def test_set_encoding_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        set_encoding("one_zero")


def test_register_is_context_local() -> None:
    ctx = contextvars.copy_context()
    ctx.run(set_encoding, OneMinusOne())

    assert ctx.run(current_encoding) == OneMinusOne()
    assert current_encoding() == OneZero()
