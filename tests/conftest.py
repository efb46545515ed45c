"""Shared test fixtures and configuration."""

import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


# Settings that tests rely on; anything else with the prefix is cleared
TEST_ENV = {
    "MATCH_SORTER_LOG_LEVEL": "info",
    "MATCH_SORTER_METRICS_ENABLED": "true",
    "MATCH_SORTER_TRACING_ENABLED": "false",
}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop ambient MATCH_SORTER_* variables and apply test defaults."""
    for key in list(os.environ):
        if key.startswith("MATCH_SORTER_"):
            monkeypatch.delenv(key, raising=False)
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def tea_items():
    return [
        {"tea": "Milk", "alias": "moo"},
        {"tea": "Oolong", "alias": "B"},
        {"tea": "Green", "alias": "C"},
    ]


@pytest.fixture(autouse=True)
def restore_metrics_switch():
    """Re-enable metric recording after tests that turn it off."""
    from match_sorter.observability.metrics import set_metrics_enabled

    yield
    set_metrics_enabled(True)
