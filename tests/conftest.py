import os

# Workflow functions are wrapped with opik.track; keep tests offline
os.environ.setdefault("OPIK_TRACK_DISABLE", "true")

import pytest  # noqa: E402

from domain.encodings import reset_encoding  # noqa: E402


@pytest.fixture(autouse=True)
def _default_encoding():
    reset_encoding()
    yield
    reset_encoding()


@pytest.fixture
def example_targets() -> list[int]:
    return [0, 1, 1, 0, 1, 0, 1, 1, 0, 1]


@pytest.fixture
def example_predicts() -> list[int]:
    return [0, 1, 0, 1, 1, 0, 0, 0, 1, 1]


@pytest.fixture
def example_scores() -> list[float]:
    return [0.2, 0.7, 0.3, 0.6, 0.8, 0.4, 0.3, 0.5, 0.7, 0.9]
