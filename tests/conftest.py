"""Shared fixtures for astrosched tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from datetime import datetime
from pathlib import Path

import pytest

from astrosched.models import Task
from astrosched.store import TaskStore

DAY = datetime(2025, 3, 14)


def at(hhmm: str) -> datetime:
    """Datetime on the test day for an HH:MM string."""
    hours, minutes = hhmm.split(":")
    return DAY.replace(hour=int(hours), minute=int(minutes))


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_dir)


@pytest.fixture
def temp_app_dir(temp_project: Path) -> Path:
    """Create a temporary .astrosched directory."""
    app_dir = temp_project / ".astrosched"
    app_dir.mkdir()
    return app_dir


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """Factory for tasks on the test day, e.g. make_task("EVA", "09:00", "10:00")."""

    def _make(description: str, start: str, end: str, priority: int = 3) -> Task:
        return Task(description, at(start), at(end), priority)

    return _make


@pytest.fixture
def store() -> TaskStore:
    """Empty store with the default (atomic) edit strategy."""
    return TaskStore()


@pytest.fixture
def sample_config_data() -> dict:
    """Sample configuration data."""
    return {
        "time_format": "%Y-%m-%d %H:%M",
        "default_priority": 2,
        "store": {"edit_strategy": "remove_then_add"},
        "logging": {"level": "INFO", "file": ".astrosched/astrosched.log"},
    }
