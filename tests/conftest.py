"""Pytest configuration and fixtures for configvault tests."""

import json
import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from configvault.core.backups import BackupManager
from configvault.core.store import ConfigStore


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Isolate tests from the real working directory and environment.

    Changes CWD to tmp_path (so default ./config.json, ./backups and .env
    resolve there) and swaps os.environ for a copy without PORT, so values
    loaded from .env files never leak between tests.
    """
    monkeypatch.chdir(tmp_path)
    env = {k: v for k, v in os.environ.items() if k != "PORT"}
    monkeypatch.setattr(os, "environ", env)


class StepClock:
    """Deterministic clock advancing by a fixed step on every call."""

    def __init__(
        self,
        start: datetime = datetime(2026, 10, 17, 9, 30, 0, tzinfo=UTC),
        step: timedelta = timedelta(seconds=1),
    ) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


@pytest.fixture
def initial_document() -> dict[str, Any]:
    """Document written to the store before each test."""
    return {"theme": "dark", "limits": {"max": 10}}


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    """Write data as pretty-printed JSON to a path."""

    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=4), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_path(tmp_path: Path, initial_document: dict[str, Any], write_json) -> Path:
    """Config document pre-populated with initial_document."""
    return write_json(tmp_path / "data" / "config.json", initial_document)


@pytest.fixture
def store(config_path: Path) -> ConfigStore:
    """ConfigStore over config_path."""
    return ConfigStore(config_path)


@pytest.fixture
def clock() -> StepClock:
    """Clock advancing one second per snapshot."""
    return StepClock()


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    """Backup directory path (not created)."""
    return tmp_path / "data" / "backups"


@pytest.fixture
def backups(store: ConfigStore, backup_dir: Path, clock: StepClock) -> BackupManager:
    """BackupManager with a deterministic clock."""
    return BackupManager(store, backup_dir, clock=clock)
