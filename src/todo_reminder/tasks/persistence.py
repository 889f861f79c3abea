# src/todo_reminder/tasks/persistence.py

"""
JSON persistence for the task list.

The file is a JSON array of task objects, overwritten in full on every save.
There is no temp-file/rename step: a crash mid-write can corrupt the file,
which is accepted for a single-user, single-writer tool.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from .task_models import Task, TaskFileError
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def load_tasks(path: str | Path) -> list[Task]:
    """
    Read tasks from `path`.

    A missing file is recovered: parent directories and an empty file are
    created and an empty list is returned. Malformed content raises
    TaskFileError and leaves the file untouched.
    """
    path = Path(path)
    try:
        raw = path.read_text("utf-8")
    except FileNotFoundError:
        logger.info("Tasks file %s not found; creating an empty one.", path)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            logger.info("Created missing directories %s", path.parent)
        path.touch()
        return []
    except UnicodeDecodeError as e:
        raise TaskFileError(f"{path}: not valid UTF-8 ({e})") from e

    # An empty file is what the recovery path above leaves behind.
    if not raw.strip():
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise TaskFileError(f"{path}: invalid JSON ({e})") from e

    if not isinstance(data, list):
        raise TaskFileError(f"{path}: expected a JSON array of tasks, got {type(data).__name__}")

    tasks = [Task.from_dict(item) for item in data]
    logger.info("Loaded %d tasks from %s", len(tasks), path)
    return tasks


def write_tasks(tasks: Iterable[Task], path: str | Path) -> None:
    """Overwrite `path` with `tasks`. Missing parent dirs are created and the write retried once."""
    path = Path(path)
    data = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)
    try:
        path.write_text(data, "utf-8")
    except FileNotFoundError:
        logger.info("Parent directory %s missing; creating it and retrying.", path.parent)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(data, "utf-8")


async def save_store(store: TaskStore, path: str | Path) -> int:
    """
    Persist the store's current contents. Returns the number of tasks written.

    The write happens while the guard is held so no task can be added between
    the snapshot and the write; it is synchronous, so nothing is awaited under
    the lock.
    """
    async with store.guard() as tasks:
        write_tasks(tasks, path)
        n = len(tasks)
    logger.info("Saved %d tasks to %s", n, path)
    return n
