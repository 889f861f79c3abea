# src/todo_reminder/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ..tasks.deadline import DeadlineError
from ..tasks.task_api import new_task
from ..tasks.task_models import Priority, Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def print_tasks(tasks: Iterable[Task]) -> None:
    tasks = list(tasks)
    if not tasks:
        _print_ts("[TASKS] No tasks yet.")
        return

    _print_ts(f"[TASKS] {len(tasks)} task(s):")
    for i, t in enumerate(tasks, start=1):
        state = "done" if t.completed else ("notified" if t.notified else "pending")
        print(f"  {i}. {t.content} | {t.deadline_text()} | {t.priority.value} | {state}")


def prompt_new_task(
    *,
    input_fn: Callable[[str], str] = input,
    priority: Priority | str = Priority.MEDIUM,
    now: float | None = None,
) -> Task | None:
    """
    Ask for a task name and a deadline.

    Returns None when nothing should be added: empty name, EOF / Ctrl+C at the
    prompt, or a rejected deadline (the message is shown and the flow ends).
    """
    try:
        name = input_fn("Task name (empty to skip): ").strip()
        if not name:
            logger.info("No task name given; nothing added.")
            return None
        deadline_text = input_fn("Deadline (dd/mm/yyyy or dd/mm/yyyy HH:MM): ").strip()
    except EOFError:
        logger.info("Console EOF received, nothing added.")
        return None
    except KeyboardInterrupt:
        logger.info("Console KeyboardInterrupt, nothing added.")
        print()
        return None

    try:
        task = new_task(name, deadline_text, priority=priority, now=now)
    except DeadlineError as e:
        logger.error("Task %r rejected: %s", name, e)
        _print_ts(f"[TASKS] Not added: {e}")
        return None

    _print_ts(f"[TASKS] Added {task.content!r} due {task.deadline_text()}.")
    return task
