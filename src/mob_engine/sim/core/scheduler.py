"""Virtual-time task scheduler.

Every delayed thing in the engine -- respawn timers, the creature's
reply after the inter-attack delay, the combat-sync tick, remains decay
-- is a task on this scheduler.  Nothing blocks: callers schedule and
continue, and whoever owns the clock calls :meth:`Scheduler.advance`.

Tests drive time explicitly::

    scheduler = Scheduler()
    scheduler.call_later(15.0, registry.spawn, "meadow", "wolves")
    scheduler.advance(15.0)          # the spawn runs here
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledTask:
    """A pending callback, ordered by due time then insertion order."""

    due: float
    _seq: int = field(compare=True, repr=False)
    callback: Callable[..., Any] = field(compare=False, repr=False)
    args: tuple = field(compare=False, default=(), repr=False)
    interval: float | None = field(compare=False, default=None)
    """Set for periodic tasks; the task re-arms itself after each run."""

    origin: float = field(compare=False, default=0.0, repr=False)
    """Clock time a periodic task was scheduled at; run *n* is due at
    ``origin + n * interval``."""

    runs: int = field(compare=False, default=0, repr=False)
    cancelled: bool = field(compare=False, default=False)

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def periodic(self) -> bool:
        return self.interval is not None


class Scheduler:
    """Single cooperative timeline driven by an explicit virtual clock."""

    def __init__(self, start_time: float = 0.0) -> None:
        self._now = start_time
        self._queue: list[ScheduledTask] = []
        self._seq = 0
        self.tasks_run = 0

    @property
    def now(self) -> float:
        return self._now

    # -- scheduling ----------------------------------------------------------

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        """Run ``callback(*args)`` once, *delay* seconds from now."""
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        return self._push(self._now + delay, callback, args, None)

    def call_every(self, interval: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        """Run ``callback(*args)`` every *interval* seconds until cancelled."""
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        return self._push(self._now + interval, callback, args, interval)

    def cancel(self, task: ScheduledTask | None) -> None:
        """Cancel *task*.  Cancelling ``None`` or a finished task is a no-op."""
        if task is not None:
            task.cancel()

    def _push(
        self,
        due: float,
        callback: Callable[..., Any],
        args: tuple,
        interval: float | None,
    ) -> ScheduledTask:
        self._seq += 1
        task = ScheduledTask(
            due=due, _seq=self._seq, callback=callback, args=args,
            interval=interval, origin=self._now,
        )
        heapq.heappush(self._queue, task)
        return task

    # -- running -------------------------------------------------------------

    def advance(self, seconds: float) -> int:
        """Move the clock forward *seconds*, running every task that falls due.

        Tasks are run in (due time, insertion) order and the clock is set
        to each task's due time while it runs, so callbacks that schedule
        further work see the right ``now``.  Returns the number of tasks run.
        """
        if seconds < 0:
            raise ValueError(f"cannot advance by a negative amount ({seconds})")
        target = self._now + seconds
        count = 0
        while True:
            task = self._pop_due(target)
            if task is None:
                break
            self._now = task.due
            self._run(task)
            count += 1
        self._now = target
        return count

    def run_until_idle(self, limit: int = 10_000) -> int:
        """Run one-shot tasks until none remain (periodic tasks are run
        alongside them but do not keep the loop alive).  Returns tasks run."""
        count = 0
        while count < limit and any(
            not t.cancelled and not t.periodic for t in self._queue
        ):
            nxt = self.peek_time()
            count += self.advance(max(0.0, nxt - self._now))
        return count

    def _pop_due(self, target: float) -> ScheduledTask | None:
        while self._queue:
            if self._queue[0].cancelled:
                heapq.heappop(self._queue)
                continue
            if self._queue[0].due > target:
                return None
            return heapq.heappop(self._queue)
        return None

    def _run(self, task: ScheduledTask) -> None:
        try:
            task.callback(*task.args)
        except Exception:
            logger.exception("Scheduled task %r raised", task.callback)
        self.tasks_run += 1
        if task.periodic and not task.cancelled:
            self._seq += 1
            task.runs += 1
            # Run n is due at origin + n * interval, never at a running sum.
            task.due = task.origin + (task.runs + 1) * task.interval
            task._seq = self._seq
            heapq.heappush(self._queue, task)

    # -- queries -------------------------------------------------------------

    def peek_time(self) -> float:
        """Return the due time of the next live task, or inf if none."""
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
        if self._queue:
            return self._queue[0].due
        return float("inf")

    def pending_count(self) -> int:
        return sum(1 for t in self._queue if not t.cancelled)

    def __repr__(self) -> str:
        return f"Scheduler(now={self._now:.3f}, pending={self.pending_count()})"
