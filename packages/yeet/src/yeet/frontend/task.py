"""Background work for the frontend: directory loads, previews, file operations.

Every task has a logical identifier (for example ``"preview"``); starting a
task with an identifier that is already running cancels the old one first.
Results come back through :attr:`TaskManager.messages` so the single-threaded
state update loop can pick them up.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)


# ============================================================================
# Messages
# ============================================================================


@dataclass(frozen=True)
class TaskFinished:
    id: int
    identifier: str
    result: Any = None


@dataclass(frozen=True)
class TaskFailed:
    id: int
    identifier: str
    error: BaseException


TaskMessage = Union[TaskFinished, TaskFailed]


class TaskError(Exception):
    """One or more background tasks failed."""

    def __init__(self, failures: list[TaskFailed]) -> None:
        self.failures = list(failures)
        summary = ", ".join(f"{f.identifier}: {f.error}" for f in self.failures)
        super().__init__(f"{len(self.failures)} task(s) failed: {summary}")


@dataclass
class _Running:
    id: int
    task: asyncio.Task[None]


# ============================================================================
# TaskManager
# ============================================================================


class TaskManager:
    def __init__(self, messages: asyncio.Queue[TaskMessage] | None = None) -> None:
        if messages is None:
            messages = asyncio.Queue()
        self.messages = messages
        self._running: dict[str, _Running] = {}
        self._failures: list[TaskFailed] = []

    def run(self, identifier: str, factory: Callable[[], Awaitable[Any]]) -> int:
        """Start ``factory()`` under *identifier* and return its task id.

        Must be called from within a running event loop.
        """
        self.abort(identifier)

        task_id = self._next_id()
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(task_id, identifier, factory))
        self._running[identifier] = _Running(task_id, task)
        return task_id

    def abort(self, identifier: str) -> bool:
        """Cancel the task running under *identifier*. Returns whether one was running."""
        running = self._running.pop(identifier, None)
        if running is None:
            return False

        logger.info("Aborting task %d (%s)", running.id, identifier)
        running.task.cancel()
        return True

    def abort_all(self) -> None:
        for identifier in list(self._running):
            self.abort(identifier)

    def is_running(self, identifier: str) -> bool:
        return identifier in self._running

    def get_id(self, identifier: str) -> int | None:
        running = self._running.get(identifier)
        return running.id if running is not None else None

    async def finishing(self) -> None:
        """Wait for all running tasks.

        Raises :class:`TaskError` listing every failure since the last call.
        """
        while self._running:
            tasks = [running.task for running in self._running.values()]
            await asyncio.gather(*tasks, return_exceptions=True)

        if self._failures:
            failures, self._failures = self._failures, []
            raise TaskError(failures)

    def __len__(self) -> int:
        return len(self._running)

    # ── Internal ─────────────────────────────────────────────────────

    def _next_id(self) -> int:
        used = {running.id for running in self._running.values()}
        task_id = 0
        while task_id in used:
            task_id += 1
        return task_id

    async def _run(
        self, task_id: int, identifier: str, factory: Callable[[], Awaitable[Any]]
    ) -> None:
        logger.info("Task %d started: %s", task_id, identifier)
        try:
            result = await factory()
        except asyncio.CancelledError:
            logger.info("Task %d cancelled: %s", task_id, identifier)
            raise
        except Exception as exc:
            logger.error("Task %d failed: %s: %s", task_id, identifier, exc)
            failure = TaskFailed(task_id, identifier, exc)
            self._failures.append(failure)
            self.messages.put_nowait(failure)
        else:
            logger.info("Task %d finished: %s", task_id, identifier)
            self.messages.put_nowait(TaskFinished(task_id, identifier, result))
        finally:
            running = self._running.get(identifier)
            if running is not None and running.task is asyncio.current_task():
                del self._running[identifier]
