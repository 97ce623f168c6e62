r"""Scheduler running callables on an ``asyncio`` event loop.

Callables run on the loop thread, so work functions submitted through
this scheduler must not block. The loop is owned by the caller.
"""

from __future__ import annotations

__all__ = ["EventLoopScheduler"]

import logging
import threading
from typing import TYPE_CHECKING

from aretry.core.validation import validate_delay
from aretry.scheduler.base import BaseScheduler

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class _LoopHandle:
    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._lock = threading.Lock()
        self._timer: asyncio.TimerHandle | None = None
        self._cancelled = False
        self._started = False

    def arm(self, fn: Callable[[], None], delay: float) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._timer = self._loop.call_later(delay, self._fire, fn)

    def _fire(self, fn: Callable[[], None]) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._started = True
        fn()

    def cancel(self) -> bool:
        with self._lock:
            if self._cancelled or self._started:
                return False
            self._cancelled = True
            timer = self._timer
        if timer is not None and not self._loop.is_closed():
            # TimerHandle.cancel is not thread-safe
            self._loop.call_soon_threadsafe(timer.cancel)
        return True


class EventLoopScheduler(BaseScheduler):
    """Scheduler backed by ``loop.call_later``.

    Registration is thread-safe: it goes through
    ``loop.call_soon_threadsafe``. The resulting futures can be awaited
    with ``asyncio.wrap_future``.

    Args:
        loop: The event loop that runs the callables.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry import RetryExecutor
        >>> from aretry.scheduler import EventLoopScheduler
        >>> async def main():
        ...     executor = RetryExecutor(EventLoopScheduler(asyncio.get_running_loop()))
        ...     return await asyncio.wrap_future(executor.submit_callable(lambda: 42))
        ...
        >>> asyncio.run(main())
        42

        ```
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop

    def schedule(self, fn: Callable[[], None], delay_millis: int) -> _LoopHandle:
        validate_delay("delay_millis", delay_millis)
        if self.loop.is_closed():
            msg = "cannot schedule new tasks on a closed event loop"
            raise RuntimeError(msg)
        handle = _LoopHandle(self.loop)
        # call_soon_threadsafe raises RuntimeError if the loop closed meanwhile
        self.loop.call_soon_threadsafe(handle.arm, fn, delay_millis / 1000)
        return handle
