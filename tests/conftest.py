# tests/conftest.py

from __future__ import annotations

import time
from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_reminder.tasks.task_store import TaskStore

from .fakes import FakeNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the lifecycle.

    We intentionally use a SimpleNamespace rather than the env-driven config,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "todo"
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=data_dir,
        tasks_path=data_dir / "tasks.json",
        icon_path=data_dir / "icon.png",
        log_dir=data_dir / "logs",
        interactive=False,
        exit_when_idle=False,
        notification_body="Time's up",
        notification_timeout=5,
        default_priority="Medium",
    )


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def berlin_tz(monkeypatch: pytest.MonkeyPatch):
    """Switch the process-local zone to one with DST transitions."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset() is not available on this platform")
    monkeypatch.setenv("TZ", "Europe/Berlin")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
