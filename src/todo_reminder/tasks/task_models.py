# src/todo_reminder/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class TaskFileError(ValueError):
    """The tasks file (or one of its records) cannot be decoded."""


class Priority(StrEnum):
    """
    Task priority.

    Informational only: the scheduler fires by deadline, never by priority.
    Values are the exact tags stored in tasks.json.
    """

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, raw: Any) -> Priority:
        if isinstance(raw, str):
            for p in cls:
                if p.value.lower() == raw.strip().lower():
                    return p
        raise TaskFileError(f"unknown priority {raw!r} (expected Low, Medium or High)")


@dataclass(slots=True)
class Task:
    content: str
    deadline: int  # epoch seconds
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    # Set once the deadline notification was delivered; survives restarts.
    notified: bool = False

    def deadline_local(self) -> datetime:
        return datetime.fromtimestamp(self.deadline).astimezone()

    def deadline_text(self, fmt: str = "%d/%m/%Y %H:%M") -> str:
        """Local deadline for display; raw epoch seconds past the datetime range (year 9999)."""
        try:
            return self.deadline_local().strftime(fmt)
        except (ValueError, OverflowError, OSError):
            return f"@{self.deadline}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "deadline": self.deadline,
            "priority": self.priority.value,
            "completed": self.completed,
            "notified": self.notified,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        if not isinstance(raw, dict):
            raise TaskFileError(f"task record must be an object, got {type(raw).__name__}")

        content = raw.get("content")
        if not isinstance(content, str):
            raise TaskFileError("task 'content' must be a string")

        deadline = raw.get("deadline")
        # bool is an int subclass; reject it explicitly.
        if isinstance(deadline, bool) or not isinstance(deadline, int) or deadline < 0:
            raise TaskFileError(f"task {content!r}: 'deadline' must be a non-negative integer")

        completed = raw.get("completed", False)
        notified = raw.get("notified", False)
        if not isinstance(completed, bool) or not isinstance(notified, bool):
            raise TaskFileError(f"task {content!r}: 'completed'/'notified' must be booleans")

        return cls(
            content=content,
            deadline=deadline,
            priority=Priority.parse(raw.get("priority")),
            completed=completed,
            notified=notified,
        )
