"""Coalescing scheduler that turns bursts of invalidations into one rebuild."""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Callable, Deque, Optional

from tabline_engine.errors import RenderPipelineFailure
from tabline_engine.runtime import telemetry

Task = Callable[[], None]
Defer = Callable[[Task], None]


class SchedulerState(str, Enum):
    IDLE = "idle"
    PENDING_REBUILD = "pending_rebuild"


class UpdateScheduler:
    """Two-state machine: ``IDLE`` -> ``PENDING_REBUILD`` -> ``IDLE``.

    ``request`` defers exactly one task through the injected ``defer``
    primitive; further requests before that task runs are absorbed. The task
    returns to ``IDLE`` before rebuilding so invalidations raised by the
    rebuild itself schedule a fresh pass. A failing rebuild is wrapped in
    ``RenderPipelineFailure`` and handed to ``on_failure``.
    """

    def __init__(
        self,
        defer: Defer,
        rebuild: Task,
        *,
        on_failure: Optional[Callable[[RenderPipelineFailure], None]] = None,
        logger_name: str | None = None,
    ) -> None:
        self._defer = defer
        self._rebuild = rebuild
        self._on_failure = on_failure
        self._logger_name = logger_name
        self._state = SchedulerState.IDLE
        self._token = 0
        self.coalesced = 0
        self.completed = 0
        self.failed = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._state is SchedulerState.PENDING_REBUILD

    def request(self, reason: str = "update") -> bool:
        """Schedule a rebuild; returns ``False`` when one is already queued."""

        if self._state is SchedulerState.PENDING_REBUILD:
            self.coalesced += 1
            return False

        self._state = SchedulerState.PENDING_REBUILD
        self._token += 1
        token = self._token
        telemetry.record_event(
            "scheduler.request",
            level="debug",
            data={"reason": reason, "token": token},
            logger_name=self._logger_name,
        )
        self._defer(lambda: self._run(token))
        return True

    def reset(self) -> None:
        """Drop any queued rebuild; the deferred task will find nothing to do."""

        self._state = SchedulerState.IDLE
        self._token += 1

    def _run(self, token: int) -> None:
        if token != self._token or self._state is not SchedulerState.PENDING_REBUILD:
            return
        self._state = SchedulerState.IDLE

        try:
            with telemetry.span(
                "tabline::rebuild",
                logger_name=self._logger_name,
                component="scheduler",
                metadata={"token": token},
            ):
                self._rebuild()
        except Exception as exc:
            self.failed += 1
            failure = RenderPipelineFailure(exc)
            if self._on_failure is None:
                raise failure from exc
            self._on_failure(failure)
            return
        self.completed += 1


class ManualDeferrer:
    """``defer`` primitive that queues tasks until ``run_pending`` is called.

    Useful for hosts without an event loop and for driving the scheduler one
    tick at a time.
    """

    def __init__(self) -> None:
        self._queue: Deque[Task] = deque()

    def __call__(self, task: Task) -> None:
        self._queue.append(task)

    def __len__(self) -> int:
        return len(self._queue)

    def run_pending(self) -> int:
        """Run the tasks queued so far (not ones they enqueue); return the count."""

        batch = len(self._queue)
        for _ in range(batch):
            self._queue.popleft()()
        return batch

    def drain(self, limit: int = 100) -> int:
        """Run ticks until the queue is empty or ``limit`` ticks have passed."""

        total = 0
        for _ in range(limit):
            if not self._queue:
                break
            total += self.run_pending()
        return total


__all__ = [
    "SchedulerState",
    "UpdateScheduler",
    "ManualDeferrer",
    "Defer",
    "Task",
]
