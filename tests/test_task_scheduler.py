# tests/test_task_scheduler.py

from __future__ import annotations

import asyncio
import threading
import time

import pytest

from todo_reminder.tasks.task_models import Task
from todo_reminder.tasks.task_scheduler import DeadlineScheduler, remaining_seconds
from todo_reminder.tasks.task_store import TaskStore

from .fakes import FakeNotifier


def test_remaining_seconds_clamps_past_deadlines() -> None:
    task = Task(content="x", deadline=100)
    assert remaining_seconds(task, 40.0) == 60.0
    assert remaining_seconds(task, 100.0) == 0.0
    assert remaining_seconds(task, 500.0) == 0.0


@pytest.mark.asyncio
async def test_three_deadlines_fire_once_in_order(notifier: FakeNotifier) -> None:
    base = int(time.time())
    store = TaskStore(
        [
            Task(content="third", deadline=base + 3),
            Task(content="first", deadline=base + 1),
            Task(content="second", deadline=base + 2),
        ]
    )
    scheduler = DeadlineScheduler(store, notifier, body="Time's up")

    assert await scheduler.start() == 3
    await asyncio.wait_for(scheduler.wait(), timeout=6)
    # Still running after everything fired: nothing fires again.
    await asyncio.sleep(0.5)

    assert notifier.summaries == ["first", "second", "third"]
    assert all(n.body == "Time's up" for n in notifier.shown)
    times = [n.at for n in notifier.shown]
    assert times == sorted(times)
    assert scheduler.pending == 0
    assert [t.notified for t in await store.snapshot()] == [True, True, True]


@pytest.mark.asyncio
async def test_past_deadline_fires_immediately(notifier: FakeNotifier) -> None:
    store = TaskStore([Task(content="overdue", deadline=int(time.time()) - 3600)])
    scheduler = DeadlineScheduler(store, notifier)

    await scheduler.start()
    await asyncio.wait_for(scheduler.wait(), timeout=1)

    assert notifier.summaries == ["overdue"]


@pytest.mark.asyncio
async def test_failed_delivery_does_not_affect_siblings() -> None:
    now = int(time.time())
    notifier = FakeNotifier(fail_on={"broken"})
    store = TaskStore(
        [
            Task(content="broken", deadline=now - 1),
            Task(content="fine", deadline=now - 1),
        ]
    )
    scheduler = DeadlineScheduler(store, notifier)

    await scheduler.start()
    await asyncio.wait_for(scheduler.wait(), timeout=1)

    assert notifier.summaries == ["fine"]
    # Undelivered tasks stay un-notified so the next run tries again.
    assert [t.notified for t in await store.snapshot()] == [False, True]


@pytest.mark.asyncio
async def test_completed_and_notified_tasks_are_not_scheduled(notifier: FakeNotifier) -> None:
    now = int(time.time())
    store = TaskStore(
        [
            Task(content="done", deadline=now - 1, completed=True),
            Task(content="already", deadline=now - 1, notified=True),
            Task(content="due", deadline=now - 1),
        ]
    )
    scheduler = DeadlineScheduler(store, notifier)

    assert await scheduler.start() == 1
    await asyncio.wait_for(scheduler.wait(), timeout=1)

    assert notifier.summaries == ["due"]


@pytest.mark.asyncio
async def test_stop_abandons_pending_timers(notifier: FakeNotifier) -> None:
    store = TaskStore([Task(content="later", deadline=int(time.time()) + 60)])
    scheduler = DeadlineScheduler(store, notifier)

    await scheduler.start()
    await asyncio.sleep(0.05)
    assert scheduler.pending == 1

    assert await scheduler.stop() == 1

    assert scheduler.pending == 0
    assert notifier.shown == []
    assert [t.notified for t in await store.snapshot()] == [False]


@pytest.mark.asyncio
async def test_store_lock_is_free_while_timers_wait(notifier: FakeNotifier) -> None:
    store = TaskStore([Task(content="later", deadline=int(time.time()) + 60)])
    scheduler = DeadlineScheduler(store, notifier)
    await scheduler.start()
    await asyncio.sleep(0.05)

    async def grab() -> int:
        async with store.guard() as tasks:
            return len(tasks)

    assert await asyncio.wait_for(grab(), timeout=0.5) == 1
    await scheduler.stop()


@pytest.mark.asyncio
async def test_tasks_added_after_start_are_not_picked_up(notifier: FakeNotifier) -> None:
    store = TaskStore()
    scheduler = DeadlineScheduler(store, notifier)

    assert await scheduler.start() == 0
    await store.add(Task(content="late add", deadline=int(time.time()) - 1))
    await scheduler.wait()

    assert notifier.shown == []
    with pytest.raises(RuntimeError):
        await scheduler.start()


@pytest.mark.asyncio
async def test_countdown_uses_injected_clock(notifier: FakeNotifier) -> None:
    # The clock says the deadline is already here, so no real waiting happens.
    store = TaskStore([Task(content="clocked", deadline=2_000_000_000)])
    scheduler = DeadlineScheduler(store, notifier, clock=lambda: 2_000_000_000.0)

    await scheduler.start()
    await asyncio.wait_for(scheduler.wait(), timeout=1)

    assert notifier.summaries == ["clocked"]


@pytest.mark.asyncio
async def test_stop_during_delivery_still_records_notified() -> None:
    entered = threading.Event()
    release = threading.Event()

    class SlowNotifier(FakeNotifier):
        def notify(self, *, summary: str, body: str) -> None:
            entered.set()
            release.wait(timeout=5)
            super().notify(summary=summary, body=body)

    notifier = SlowNotifier()
    store = TaskStore([Task(content="now", deadline=int(time.time()) - 1)])
    scheduler = DeadlineScheduler(store, notifier)

    await scheduler.start()
    assert await asyncio.to_thread(entered.wait, 2)

    stopper = asyncio.create_task(scheduler.stop())
    await asyncio.sleep(0.05)
    assert not stopper.done()

    release.set()
    await asyncio.wait_for(stopper, timeout=2)

    assert notifier.summaries == ["now"]
    assert [t.notified for t in await store.snapshot()] == [True]
