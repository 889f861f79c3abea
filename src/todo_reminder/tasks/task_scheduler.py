# src/todo_reminder/tasks/task_scheduler.py

from __future__ import annotations

"""
Deadline scheduler.

One asyncio task ("unit") per pending task:
- compute the remaining time until the deadline,
- sleep without holding the store lock,
- show exactly one notification via the injected Notifier port,
- record that the task was notified.

Units are spawned together from one snapshot of the store. Tasks added later
are not picked up by an already started scheduler.

To stop the scheduler, call stop(): pending units are cancelled and their
notifications are simply never delivered this run.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from ..core.ports import Notifier
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def remaining_seconds(task: Task, now_ts: float) -> float:
    """Time left until the deadline; past deadlines fire immediately."""
    return max(0.0, float(task.deadline) - float(now_ts))


class DeadlineScheduler:
    def __init__(
        self,
        store: TaskStore,
        notifier: Notifier,
        *,
        body: str = "Time's up",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._body = body
        self._clock = clock

        self._units: list[asyncio.Task[None]] = []
        self._fired: set[int] = set()
        self._deliveries: set[asyncio.Task[bool]] = set()
        self._started = False

    @property
    def pending(self) -> int:
        return sum(1 for u in self._units if not u.done())

    async def start(self) -> int:
        """
        Spawn one unit per task that is neither completed nor already notified.
        Returns the number of spawned units.
        """
        if self._started:
            raise RuntimeError("DeadlineScheduler.start() called twice")
        self._started = True

        # Copy under the lock, release it, then spawn.
        tasks = await self._store.snapshot()

        for index, task in enumerate(tasks):
            if task.completed or task.notified:
                logger.debug(
                    "Skipping task %s %r (completed=%s notified=%s)",
                    index,
                    task.content,
                    task.completed,
                    task.notified,
                )
                continue
            unit = asyncio.create_task(self._run_unit(index, task), name=f"deadline-{index}")
            self._units.append(unit)

        logger.info("Scheduled %d of %d tasks", len(self._units), len(tasks))
        return len(self._units)

    async def wait(self) -> None:
        """Join all units. One unit's failure never propagates to the caller or siblings."""
        if not self._units:
            return
        results = await asyncio.gather(*self._units, return_exceptions=True)
        for unit, res in zip(self._units, results):
            if isinstance(res, asyncio.CancelledError):
                continue
            if isinstance(res, BaseException):
                logger.error("Timer %s ended with %r", unit.get_name(), res)

    async def stop(self) -> int:
        """
        Cancel every pending unit. Returns how many were abandoned.

        A notification already being delivered is allowed to finish, so its
        notified flag is in the store before the caller persists it.
        """
        pending = [u for u in self._units if not u.done()]
        for unit in pending:
            unit.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.info("Abandoned %d pending timers", len(pending))
        if self._deliveries:
            await asyncio.gather(*list(self._deliveries), return_exceptions=True)
        return len(pending)

    async def _run_unit(self, index: int, task: Task) -> None:
        delay = remaining_seconds(task, self._clock())
        logger.info(
            "Starting countdown for task %r scheduled for %s (in %.0fs)",
            task.content,
            task.deadline_text("%Y-%m-%d %H:%M"),
            delay,
        )
        await asyncio.sleep(delay)
        await self._fire(index, task)

    async def _fire(self, index: int, task: Task) -> bool:
        if index in self._fired:
            logger.warning("Task %s %r already fired; ignoring", index, task.content)
            return False
        self._fired.add(index)

        # Delivery and the notified flag form one unit: cancelling the timer
        # must not leave a shown notification unrecorded.
        delivery = asyncio.create_task(self._deliver(index, task), name=f"deliver-{index}")
        self._deliveries.add(delivery)
        delivery.add_done_callback(self._deliveries.discard)
        return await asyncio.shield(delivery)

    async def _deliver(self, index: int, task: Task) -> bool:
        try:
            await asyncio.to_thread(self._notifier.notify, summary=task.content, body=self._body)
        except Exception:
            logger.exception("Notification failed for task %s %r", index, task.content)
            return False

        await self._store.mark_notified(index)
        logger.info("Task %s %r -> notified", index, task.content)
        return True
