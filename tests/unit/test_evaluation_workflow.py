import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from sklearn.metrics import roc_auc_score

from application import iter_groups, run_evaluation, save_curves, save_metrics
from application.constants import ALL_GROUPS_KEY
from infrastructure.config import RateTargets, StatsConfig
from infrastructure.config.models import DataColumnsConfig, EncodingConfig, RunConfig
from infrastructure.io import read_table

TARGETS = [0, 1, 1, 0, 1, 0, 1, 1, 0, 1]
SCORES = [0.2, 0.7, 0.3, 0.6, 0.8, 0.4, 0.3, 0.5, 0.7, 0.9]


@pytest.fixture
def scored_csv(tmp_path: Path) -> Path:
    df = pd.DataFrame(
        {
            "model": ["a"] * 10 + ["b"] * 4,
            "label": TARGETS + [1, 1, 1, 1],
            "score": SCORES + [0.1, 0.2, 0.3, 0.4],
        }
    )
    path = tmp_path / "scores.csv"
    df.to_csv(path, index=False)
    return path


def _cfg(data_file: Path, group_col: str | None = "model", **kwargs) -> RunConfig:
    return RunConfig(
        data_dir=data_file.parent,
        data_file_path=data_file,
        columns=DataColumnsConfig(target_col="label", score_col="score", group_col=group_col),
        rates=RateTargets(tpr=[0.5], fpr=[0.5]),
        stats=StatsConfig(n_boot=30, seed=1),
        **kwargs,
    )


def test_grouped_evaluation(scored_csv: Path) -> None:
    cfg = _cfg(scored_csv)
    metrics, curves = run_evaluation(cfg, read_table(scored_csv))

    assert set(metrics) == {"a", "b"}

    a = metrics["a"]
    assert a["n_samples"] == 10
    assert (a["n_positive"], a["n_negative"]) == (6, 4)
    assert a["auroc"] == pytest.approx(roc_auc_score(TARGETS, SCORES))
    assert a["auroc_ci"][0] <= a["auroc_ci"][1]

    tpr_row = a["thresholds"]["tpr"][0]
    assert tpr_row["rate"] == 0.5
    assert tpr_row["threshold"] == 0.7
    assert tpr_row["confusion_matrix"]["tp"] == 3
    assert tpr_row["recall"] == 0.5
    assert a["thresholds"]["fpr"][0]["threshold"] == np.nextafter(0.4, np.inf)

    # group b holds positives only
    assert "error" in metrics["b"]
    assert metrics["b"]["n_samples"] == 4

    assert set(curves["group"]) == {"a"}
    assert set(curves["curve"]) == {"roc", "pr"}
    assert list(curves.columns) == ["group", "curve", "x", "y"]


def test_ungrouped_evaluation_with_encoding(tmp_path: Path) -> None:
    df = pd.DataFrame({"label": ["pos" if t else "neg" for t in TARGETS], "score": SCORES})
    encoding = EncodingConfig(kind="one_vs_one", positive="pos", negative="neg")
    cfg = _cfg(tmp_path / "unused.csv", group_col=None, encoding=encoding)

    metrics, curves = run_evaluation(cfg, df)

    assert list(metrics) == [ALL_GROUPS_KEY]
    assert metrics[ALL_GROUPS_KEY]["auroc"] == pytest.approx(roc_auc_score(TARGETS, SCORES))
    assert len(curves) > 0


def test_missing_targets_are_dropped(tmp_path: Path) -> None:
    df = pd.DataFrame({"label": TARGETS + [None], "score": SCORES + [0.5]})
    metrics, _ = run_evaluation(_cfg(tmp_path / "unused.csv", group_col=None), df)

    assert metrics[ALL_GROUPS_KEY]["n_samples"] == 10


def test_missing_columns_raise(tmp_path: Path) -> None:
    df = pd.DataFrame({"label": TARGETS, "prob": SCORES})
    with pytest.raises(KeyError, match="score"):
        run_evaluation(_cfg(tmp_path / "unused.csv", group_col=None), df)

    with pytest.raises(KeyError, match="model"):
        list(iter_groups(_cfg(tmp_path / "unused.csv"), df))


def test_artifacts_are_written(scored_csv: Path, tmp_path: Path) -> None:
    metrics, curves = run_evaluation(_cfg(scored_csv), read_table(scored_csv))

    metrics_path = save_metrics(metrics, tmp_path / "out" / "metrics.json")
    curves_path = save_curves(curves, tmp_path / "out" / "curve_points.csv")

    loaded = json.loads(metrics_path.read_text(encoding="utf-8"))
    assert loaded["a"]["auroc"] == pytest.approx(metrics["a"]["auroc"])
    assert len(pd.read_csv(curves_path)) == len(curves)


def test_blank_scores_are_dropped(tmp_path: Path) -> None:
    path = tmp_path / "scores.csv"
    path.write_text("label,score\n0,0.1\n1,0.9\n1,\n0,0.3\n1,0.8\n0,0.2\n", encoding="utf-8")

    metrics, curves = run_evaluation(_cfg(path, group_col=None), read_table(path))

    group = metrics[ALL_GROUPS_KEY]
    assert group["n_samples"] == 5
    assert (group["n_positive"], group["n_negative"]) == (2, 3)
    assert group["auroc"] == pytest.approx(1.0)
    assert not curves["x"].isna().any()


def test_group_left_with_one_class_after_dropping_reports_error(tmp_path: Path) -> None:
    df = pd.DataFrame({"label": [0, 1, 1, 0], "score": [0.2, np.nan, np.nan, 0.4]})
    metrics, curves = run_evaluation(_cfg(tmp_path / "unused.csv", group_col=None), df)

    assert set(metrics[ALL_GROUPS_KEY]) == {"n_samples", "error"}
    assert metrics[ALL_GROUPS_KEY]["n_samples"] == 4
    assert curves.empty
