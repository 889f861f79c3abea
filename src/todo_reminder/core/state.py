# src/todo_reminder/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_scheduler import DeadlineScheduler
from ..tasks.task_store import TaskStore
from .ports import Notifier


@dataclass
class AppState:
    # Settings object (config.Settings or a test double with the same fields).
    settings: Any

    task_store: TaskStore
    notifier: Notifier
    scheduler: DeadlineScheduler
