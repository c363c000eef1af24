import math

import numpy as np
import pytest
from sklearn import metrics as skm

from domain.evaluation import ALIASES, METRICS, ConfusionMatrix, compute_metric, get_metric
from domain.evaluation import metrics as M


def test_example_values(example_targets, example_predicts) -> None:
    assert M.precision(example_targets, example_predicts) == pytest.approx(0.6)
    assert M.recall(example_targets, example_predicts) == pytest.approx(0.5)
    assert M.f1_score(example_targets, example_predicts) == pytest.approx(0.5454545454545454)
    assert M.threat_score(example_targets, example_predicts) == pytest.approx(0.375)
    assert M.accuracy(example_targets, example_predicts) == pytest.approx(0.5)
    assert M.true_positive(example_targets, example_predicts) == 3


@pytest.mark.parametrize(
    ("name", "sk_fn"),
    [
        ("precision", skm.precision_score),
        ("recall", skm.recall_score),
        ("f1_score", skm.f1_score),
        ("accuracy", skm.accuracy_score),
        ("balanced_accuracy", skm.balanced_accuracy_score),
        ("matthews_correlation_coefficient", skm.matthews_corrcoef),
    ],
)
def test_metrics_match_sklearn(name: str, sk_fn) -> None:
    rng = np.random.default_rng(11)
    targets = rng.integers(0, 2, size=150).tolist()
    predicts = rng.integers(0, 2, size=150).tolist()

    assert compute_metric(name, targets, predicts) == pytest.approx(sk_fn(targets, predicts))


def test_fbeta_matches_sklearn() -> None:
    rng = np.random.default_rng(12)
    targets = rng.integers(0, 2, size=150).tolist()
    predicts = rng.integers(0, 2, size=150).tolist()

    expected = skm.fbeta_score(targets, predicts, beta=2.0)
    assert M.fbeta_score(targets, predicts, beta=2.0) == pytest.approx(expected)
    assert M.fbeta_score(targets, predicts) == pytest.approx(M.f1_score(targets, predicts))


def test_aliases_resolve_to_the_same_metric() -> None:
    cm = ConfusionMatrix(5, 7, 2, 3)
    for alias, name in ALIASES.items():
        assert alias not in METRICS
        assert get_metric(alias) is METRICS[name]
        assert compute_metric(alias, cm) == compute_metric(name, cm)

    assert M.sensitivity(cm) == M.true_positive_rate(cm)
    assert M.specificity(cm) == M.true_negative_rate(cm)
    assert M.mcc(cm) == M.matthews_correlation_coefficient(cm)


def test_every_metric_has_a_module_function() -> None:
    cm = ConfusionMatrix(5, 7, 2, 3)
    for name in list(METRICS) + list(ALIASES):
        fn = getattr(M, name)
        assert fn(cm) == pytest.approx(compute_metric(name, cm), nan_ok=True)


def test_rates_and_complements() -> None:
    cm = ConfusionMatrix(5, 7, 2, 3)
    assert M.true_positive_rate(cm) == 5 / 8
    assert M.false_negative_rate(cm) == 3 / 8
    assert M.true_negative_rate(cm) == 7 / 9
    assert M.false_positive_rate(cm) == 2 / 9
    assert M.error_rate(cm) == pytest.approx(1 - M.accuracy(cm))
    assert M.topquant(cm) == pytest.approx(1 - M.quant(cm))
    assert M.prevalence(cm) == 8 / 17


def test_precision_is_one_without_positive_predictions() -> None:
    cm = ConfusionMatrix(0, 4, 0, 3)
    assert M.precision(cm) == 1.0
    assert M.false_discovery_rate(cm) != M.false_discovery_rate(cm)  # NaN


def test_zero_division_follows_ieee() -> None:
    no_positives = ConfusionMatrix(0, 3, 1, 0)
    assert math.isnan(M.true_positive_rate(no_positives))
    assert math.isnan(M.false_negative_rate(no_positives))

    perfect = ConfusionMatrix(4, 4, 0, 0)
    assert M.positive_likelihood_ratio(perfect) == math.inf
    assert M.negative_likelihood_ratio(perfect) == 0.0
    assert math.isinf(M.diagnostic_odds_ratio(perfect))


def test_sequence_of_matrices_returns_array() -> None:
    cms = [ConfusionMatrix(1, 1, 1, 1), ConfusionMatrix(2, 0, 0, 2)]
    out = M.true_positive_rate(cms)

    assert isinstance(out, np.ndarray)
    np.testing.assert_allclose(out, [0.5, 0.5])


def test_thresholded_scores(example_targets, example_scores) -> None:
    out = M.recall(example_targets, example_scores, [0.5, 0.7])
    np.testing.assert_allclose(out, [4 / 6, 3 / 6])


def test_unknown_metric_raises() -> None:
    with pytest.raises(KeyError, match="Unknown metric"):
        get_metric("not_a_metric")


def test_bad_arguments_raise() -> None:
    with pytest.raises(TypeError):
        compute_metric("precision", [1, 2, 3])
