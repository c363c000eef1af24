import logging
from pathlib import Path

from infrastructure.observability import (
    clear_group_context,
    configure_logging,
    get_log_context,
    make_run_tag,
    set_log_context,
)


def test_run_tag_is_stable_and_short() -> None:
    assert make_run_tag("20240101_run") == make_run_tag("20240101_run")
    assert len(make_run_tag("20240101_run")) == 8
    assert make_run_tag("a") != make_run_tag("b")


def test_context_is_injected_into_log_lines(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    configure_logging(log_file=log_file, console_level=logging.WARNING)
    try:
        set_log_context(run_id_full="run-1", group="model_a", dataset="scores.csv")
        logging.getLogger("tests.logging").info("evaluating")
        clear_group_context()
        logging.getLogger("tests.logging").info("done")

        for handler in logging.getLogger().handlers:
            handler.flush()
        lines = log_file.read_text(encoding="utf-8").splitlines()
    finally:
        logging.getLogger().handlers.clear()

    tag = make_run_tag("run-1")
    assert any(f"r={tag} g=model_a | evaluating" in line for line in lines)
    assert any(f"r={tag} g=- | done" in line for line in lines)
    assert get_log_context()["dataset"] == "scores.csv"
