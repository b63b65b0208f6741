"""Shared fixtures for pkupdates tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pkupdates.core.config import UpdatesConfig
from pkupdates.updates.coordinator import TransactionCoordinator
from pkupdates.updates.state import StateStore
from tests.fakes import FakeDaemon

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real ~/.config/pkupdates."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("PKUPDATES_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def daemon() -> FakeDaemon:
    return FakeDaemon()


@pytest.fixture
def state_store(tmp_path: Path) -> StateStore:
    return StateStore(tmp_path / "state.json")


@pytest.fixture
def config() -> UpdatesConfig:
    return UpdatesConfig()


@pytest.fixture
def coordinator(
    daemon: FakeDaemon,
    config: UpdatesConfig,
    state_store: StateStore,
) -> TransactionCoordinator:
    return TransactionCoordinator(daemon, config=config, state_store=state_store)
