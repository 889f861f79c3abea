# src/todo_reminder/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) for the external collaborators.

The scheduler and the lifecycle depend on Protocols instead of concrete
implementations, so the desktop backend and the terminal prompt are swappable
and tests can inject fakes.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class Notifier(Protocol):
    """
    Shows one notification. Blocking; may raise on delivery failure.

    The scheduler calls it from a worker thread, once per task.
    """

    def notify(self, *, summary: str, body: str) -> None: ...


class TaskPrompt(Protocol):
    """Interactive source of one new task (None when the user added nothing)."""

    def __call__(self) -> Task | None: ...
