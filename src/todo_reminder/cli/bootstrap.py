# src/todo_reminder/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- loads the persisted tasks (creating the file on first run),
- wires the store, the notifier and the scheduler into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Notifier
from ..core.state import AppState
from ..notifications.desktop import DesktopNotifier
from ..tasks.persistence import load_tasks
from ..tasks.task_scheduler import DeadlineScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, notifier: Notifier | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the notifier injectable makes the app easier to test.
    If settings is None, falls back to get_settings().

    Raises TaskFileError when the tasks file is malformed; nothing is written
    in that case.
    """
    if settings is None:
        settings = get_settings()

    store = TaskStore(load_tasks(settings.tasks_path))

    if notifier is None:
        notifier = DesktopNotifier(
            app_name=settings.app_name,
            icon_path=settings.icon_path,
            timeout=settings.notification_timeout,
        )

    scheduler = DeadlineScheduler(store, notifier, body=settings.notification_body)

    return AppState(
        settings=settings,
        task_store=store,
        notifier=notifier,
        scheduler=scheduler,
    )
