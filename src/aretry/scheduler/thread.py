r"""Thread-pool backed scheduler.

A single daemon timer thread keeps pending registrations in a heap
ordered by deadline and hands each due callable to a
``concurrent.futures.ThreadPoolExecutor``. No thread is held while a
registration waits for its deadline.
"""

from __future__ import annotations

__all__ = ["ThreadPoolScheduler"]

import heapq
import itertools
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from aretry.core.validation import validate_delay
from aretry.scheduler.base import BaseScheduler

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(order=True)
class _Entry:
    deadline: float
    sequence: int
    fn: Callable[[], None] = field(compare=False)
    scheduler: ThreadPoolScheduler = field(compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)
    started: bool = field(default=False, compare=False)

    def cancel(self) -> bool:
        return self.scheduler._cancel(self)

    def run(self) -> None:
        try:
            self.fn()
        except Exception:
            logger.exception(f"Scheduled callable {self.fn!r} raised an exception")


class ThreadPoolScheduler(BaseScheduler):
    """Scheduler running callables on a thread pool after a delay.

    The scheduler can be used as a context manager; leaving the block
    shuts it down and waits for registered callables to finish.

    Args:
        max_workers: The maximum number of worker threads. Defaults to
            the ``ThreadPoolExecutor`` default.
        thread_name_prefix: Prefix for the names of the worker and
            timer threads.

    Example:
        ```pycon
        >>> from aretry.scheduler import ThreadPoolScheduler
        >>> with ThreadPoolScheduler(max_workers=2) as scheduler:
        ...     handle = scheduler.schedule(lambda: print("tick"), 10)
        ...
        tick

        ```
    """

    def __init__(self, max_workers: int | None = None, thread_name_prefix: str = "aretry") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )
        self._queue: list[_Entry] = []
        self._condition = threading.Condition()
        self._counter = itertools.count()
        self._shutdown = False
        self._timer = threading.Thread(
            target=self._run_timer, name=f"{thread_name_prefix}-timer", daemon=True
        )
        self._timer.start()

    def __enter__(self) -> ThreadPoolScheduler:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.shutdown(wait=True)

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def pending(self) -> int:
        """Return the number of registrations waiting for their
        deadline."""
        with self._condition:
            return len(self._queue)

    def schedule(self, fn: Callable[[], None], delay_millis: int) -> _Entry:
        validate_delay("delay_millis", delay_millis)
        with self._condition:
            if self._shutdown:
                msg = "cannot schedule new tasks after shutdown"
                raise RuntimeError(msg)
            entry = _Entry(
                deadline=time.monotonic() + delay_millis / 1000,
                sequence=next(self._counter),
                fn=fn,
                scheduler=self,
            )
            heapq.heappush(self._queue, entry)
            self._condition.notify()
        return entry

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting registrations.

        Registrations made before the call still run at their deadline.

        Args:
            wait: If True, block until every pending registration has
                run and the worker threads are idle.
        """
        with self._condition:
            self._shutdown = True
            self._condition.notify_all()
        if wait:
            self._timer.join()
            self._executor.shutdown(wait=True)

    def _cancel(self, entry: _Entry) -> bool:
        with self._condition:
            if entry.started or entry.cancelled:
                return False
            entry.cancelled = True
            self._queue.remove(entry)
            heapq.heapify(self._queue)
            self._condition.notify()
        return True

    def _run_timer(self) -> None:
        while True:
            with self._condition:
                entry = self._next_due()
                if entry is None:
                    break
                entry.started = True
            try:
                self._executor.submit(entry.run)
            except RuntimeError:
                logger.warning("Worker pool is gone, running scheduled callable on the timer thread")
                entry.run()
        self._executor.shutdown(wait=False)

    def _next_due(self) -> _Entry | None:
        # Must be called with the condition held. Returns None once the
        # scheduler is shut down and the queue is drained.
        while True:
            if not self._queue:
                if self._shutdown:
                    return None
                self._condition.wait()
                continue
            remaining = self._queue[0].deadline - time.monotonic()
            if remaining <= 0:
                return heapq.heappop(self._queue)
            self._condition.wait(min(remaining, threading.TIMEOUT_MAX))
