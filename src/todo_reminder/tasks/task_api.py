# src/todo_reminder/tasks/task_api.py

from __future__ import annotations

from .deadline import parse_deadline
from .task_models import Priority, Task


def new_task(
    content: str,
    deadline_text: str,
    *,
    priority: Priority | str = Priority.MEDIUM,
    now: float | None = None,
) -> Task:
    """
    Build a Task from user input. The deadline must lie in the future.
    Raises DeadlineError subclasses on bad dates.
    """
    return Task(
        content=content.strip(),
        deadline=parse_deadline(deadline_text, now=now),
        priority=priority if isinstance(priority, Priority) else Priority.parse(priority),
    )
