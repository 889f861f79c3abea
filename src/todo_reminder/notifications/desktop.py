# src/todo_reminder/notifications/desktop.py

from __future__ import annotations

import logging
from pathlib import Path

from plyer import notification

logger = logging.getLogger(__name__)


def resolve_icon(path: str | Path | None) -> str:
    """Icon path if the file exists, else "" (backend default icon)."""
    if path and Path(path).expanduser().is_file():
        return str(Path(path).expanduser())
    logger.info("Icon not set (%s not found); using the default icon.", path)
    return ""


class DesktopNotifier:
    """Notifier backed by plyer (libnotify / Windows toast / macOS)."""

    def __init__(
        self,
        *,
        app_name: str = "todo-reminder",
        icon_path: str | Path | None = None,
        timeout: int = 10,
    ) -> None:
        self._app_name = app_name
        self._icon = resolve_icon(icon_path)
        self._timeout = int(timeout)

    def notify(self, *, summary: str, body: str) -> None:
        notification.notify(
            title=summary,
            message=body,
            app_name=self._app_name,
            app_icon=self._icon,
            timeout=self._timeout,
        )
        logger.debug("Notification shown: %r", summary)
