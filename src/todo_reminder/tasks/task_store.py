# src/todo_reminder/tasks/task_store.py

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import logging
from collections.abc import AsyncIterator, Iterable

from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory ordered task list behind a single asyncio.Lock.

    Locking discipline:
    - every read or write goes through the lock
    - hold it only for the copy/mutation itself, never across a timer wait
      or a notification call

    Tasks are never removed, so a task's index (insertion position) is stable
    for the lifetime of the store.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: list[Task] = list(tasks)
        self._lock = asyncio.Lock()
        logger.info("TaskStore ready total=%s", len(self._tasks))

    @contextlib.asynccontextmanager
    async def guard(self) -> AsyncIterator[list[Task]]:
        """Yield the live list while the lock is held. Do not await inside."""
        async with self._lock:
            yield self._tasks

    # ---- public API ----

    async def add(self, task: Task) -> int:
        async with self._lock:
            self._tasks.append(task)
            index = len(self._tasks) - 1
        logger.debug("Task added index=%s content=%r deadline=%s", index, task.content, task.deadline)
        return index

    async def snapshot(self) -> list[Task]:
        """Copies of all tasks, in insertion order."""
        async with self._lock:
            return [dataclasses.replace(t) for t in self._tasks]

    async def count(self) -> int:
        async with self._lock:
            return len(self._tasks)

    async def mark_notified(self, index: int) -> None:
        async with self._lock:
            self._tasks[index].notified = True
