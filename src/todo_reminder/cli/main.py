# src/todo_reminder/cli/main.py

"""
CLI entrypoint and lifecycle.

Start -> load tasks -> (optional) add one task from the console -> schedule
one timer per pending task -> run until SIGINT/SIGTERM (or until idle) ->
cancel pending timers -> persist under the store lock -> exit.

Signals are handled inside the event loop: the handler only sets an
asyncio.Event, and the coroutine that reacts to it takes the same lock the
timers use.
"""

from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
import signal
import sys
import threading
from collections.abc import Callable
from typing import Any

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import print_tasks, prompt_new_task
from ..core.ports import Notifier, TaskPrompt
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.persistence import save_store
from ..tasks.task_models import Priority, TaskFileError

logger = logging.getLogger(__name__)


def _install_signal_handlers(stop: asyncio.Event) -> Callable[[], None]:
    """Route SIGINT/SIGTERM to `stop`. Returns a callable that restores the previous handlers."""
    loop = asyncio.get_running_loop()
    restorers: list[Callable[[], None]] = []

    def _handle(signum: int) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop.set()

    for sig in (signal.SIGINT, getattr(signal, "SIGTERM", None)):
        if sig is None:
            continue
        try:
            loop.add_signal_handler(sig, _handle, sig)
            restorers.append(functools.partial(loop.remove_signal_handler, sig))
            continue
        except (NotImplementedError, RuntimeError, ValueError):
            pass

        # Loops without add_signal_handler (Windows): plain handler, hop back onto the loop.
        try:
            prev = signal.signal(sig, lambda s, _frame: loop.call_soon_threadsafe(_handle, s))
            restorers.append(functools.partial(signal.signal, sig, prev))
        except (ValueError, OSError):
            logger.debug("Cannot install handler for signal %s", sig, exc_info=True)

    def restore() -> None:
        for r in restorers:
            with contextlib.suppress(Exception):
                r()

    return restore


def _run_in_daemon_thread(fn: Callable[[], Any]) -> asyncio.Future:
    """
    Run a blocking call (terminal input) in a daemon thread.

    Unlike asyncio.to_thread, an unfinished call does not keep the process
    alive on shutdown.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future = loop.create_future()

    def _deliver(setter: Callable[[Any], None], value: Any) -> None:
        if not fut.done():
            setter(value)

    def target() -> None:
        try:
            result = fn()
        except BaseException as e:
            with contextlib.suppress(RuntimeError):  # loop already closed
                loop.call_soon_threadsafe(_deliver, fut.set_exception, e)
        else:
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(_deliver, fut.set_result, result)

    threading.Thread(target=target, name="todo-prompt", daemon=True).start()
    return fut


async def _interact(state: AppState, prompt: TaskPrompt, stop: asyncio.Event) -> None:
    print_tasks(await state.task_store.snapshot())

    prompt_fut = _run_in_daemon_thread(prompt)
    stop_waiter = asyncio.create_task(stop.wait())
    try:
        await asyncio.wait({prompt_fut, stop_waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        stop_waiter.cancel()

    if not prompt_fut.done():
        logger.info("Shutdown requested while waiting for input.")
        return

    try:
        task = prompt_fut.result()
    except Exception:
        logger.exception("Console prompt crashed.")
        return

    if task is not None:
        await state.task_store.add(task)


async def _wait_running(state: AppState, stop: asyncio.Event, exit_when_idle: bool) -> None:
    waiters = {asyncio.create_task(stop.wait())}
    if exit_when_idle:
        waiters.add(asyncio.create_task(state.scheduler.wait()))

    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for w in waiters:
            w.cancel()
        await asyncio.gather(*waiters, return_exceptions=True)


async def _shutdown(state: AppState) -> int:
    """Abandon pending timers, then persist. Never raises."""
    await state.scheduler.stop()

    path = state.settings.tasks_path
    try:
        await save_store(state.task_store, path)
    except Exception:
        logger.exception("Failed to save tasks to %s", path)
        return 1
    return 0


async def run(
    settings,
    *,
    notifier: Notifier | None = None,
    prompt: TaskPrompt | None = None,
    stop_event: asyncio.Event | None = None,
) -> int:
    """
    Full lifecycle. Returns the process exit code.

    `prompt` defaults to the console prompt when `settings.interactive` is set
    and stdin is a terminal. `stop_event` lets callers request shutdown
    without sending a signal.
    """
    try:
        state = create_initial_state(settings=settings, notifier=notifier)
    except (TaskFileError, OSError):
        logger.exception("Failed to load tasks from %s", settings.tasks_path)
        return 1

    if prompt is None and settings.interactive and sys.stdin.isatty():
        try:
            priority = Priority.parse(settings.default_priority)
        except ValueError:
            logger.warning("Unknown default priority %r; using Medium.", settings.default_priority)
            priority = Priority.MEDIUM
        prompt = functools.partial(prompt_new_task, priority=priority)

    stop = stop_event if stop_event is not None else asyncio.Event()
    restore_signals = _install_signal_handlers(stop)

    try:
        if prompt is not None:
            await _interact(state, prompt, stop)

        if not stop.is_set():
            await state.scheduler.start()
            logger.info("Running. Press Ctrl+C to stop.")
            await _wait_running(state, stop, bool(getattr(settings, "exit_when_idle", False)))
    finally:
        restore_signals()
        code = await _shutdown(state)

    return code


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    code = asyncio.run(run(settings))

    logger.info("Bye.")
    sys.exit(code)


if __name__ == "__main__":
    main()
