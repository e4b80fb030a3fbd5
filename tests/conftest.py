"""Shared test fixtures for kanbanflow.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from kanbanflow.config.settings import API_KEY_ENV_VAR, HOME_ENV_VAR
from kanbanflow.model.defaults import default_board, sample_board
from kanbanflow.model.entities import BoardState

NOW = "2025-02-01T10:00:00.000Z"
LATER = "2025-02-02T12:30:00.000Z"


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "kanbanflow"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def now() -> str:
    return NOW


@pytest.fixture()
def later() -> str:
    return LATER


@pytest.fixture()
def empty_board() -> BoardState:
    return default_board()


@pytest.fixture()
def board() -> BoardState:
    """The seeded seven-card demo board."""
    return sample_board()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``$KANBANFLOW_HOME`` at a temporary directory for every test."""
    home = tmp_path / "kanbanflow-home"
    monkeypatch.setenv(HOME_ENV_VAR, str(home))
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    return home


@pytest.fixture(autouse=True)
def fresh_card_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with no card ids handed out yet."""
    monkeypatch.setattr("kanbanflow.engine.mutations._issued_ids", set())
