# ./tests/conftest.py
"""Pytest fixtures shared by the ExpiringMap suites.

This module ensures local `src/` imports resolve without editable installation
and provides a manual clock so no test ever sleeps.

Run path: auto-loaded by `pytest` in this repository.
Inputs: repository filesystem layout.
Outputs: import path setup, `clock` and `expiring` fixtures.
"""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from expiringmap import ExpiringMap, ManualClock  # noqa: E402

TTL = timedelta(milliseconds=100)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def expiring(clock: ManualClock) -> ExpiringMap:
    return ExpiringMap(TTL, clock=clock)


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory with no EXPIRINGMAP_* overrides."""
    for name in (
        "EXPIRINGMAP_TTL_SECONDS",
        "EXPIRINGMAP_LOG_LEVEL",
        "EXPIRINGMAP_LOGGER_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
