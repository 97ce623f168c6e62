r"""Abstract base class for delayed-task schedulers."""

from __future__ import annotations

__all__ = ["BaseScheduler", "ScheduledHandle"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable


class ScheduledHandle(Protocol):
    """A registration returned by ``BaseScheduler.schedule``."""

    def cancel(self) -> bool:
        """Prevent the callable from running if it has not started.

        Returns:
            True if the registration was still pending and is now
            cancelled.
        """
        ...


class BaseScheduler(ABC):
    """Abstract base class for schedulers.

    A scheduler runs a callable once, after a delay, without blocking
    the thread that registered it. Schedulers are shared by many retry
    sequences and are owned by the caller: retry executors never start
    or shut them down.
    """

    @abstractmethod
    def schedule(self, fn: Callable[[], None], delay_millis: int) -> ScheduledHandle:
        """Register ``fn`` to run once after ``delay_millis``.

        Args:
            fn: The callable to run. It takes no argument.
            delay_millis: The delay in milliseconds. 0 means as soon as
                possible.

        Returns:
            A handle that can cancel the registration.

        Raises:
            RuntimeError: If the scheduler no longer accepts work, for
                example after shutdown.
        """
