r"""Shared test helpers for retry sequence tests.

This module contains a deterministic scheduler and small work functions
used across the unit tests, so that retry sequences can be driven step
by step without real timers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from aretry.scheduler.base import BaseScheduler

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.context import RetryContext


class RetryableError(Exception):
    """Failure kind A in the tests."""


class SubRetryableError(RetryableError):
    """A more specific kind of RetryableError."""


class FatalError(Exception):
    """Failure kind B in the tests."""


@dataclass
class ManualHandle:
    """Registration created by ManualScheduler."""

    fn: Callable[[], None]
    delay_millis: int
    cancelled: bool = False
    started: bool = False

    def cancel(self) -> bool:
        if self.cancelled or self.started:
            return False
        self.cancelled = True
        return True


@dataclass(eq=False)
class ManualScheduler(BaseScheduler):
    """Scheduler that runs registrations only when told to.

    Every registration is recorded in ``handles`` so tests can check
    the requested delays.
    """

    handles: list[ManualHandle] = field(default_factory=list)
    fail_after: int | None = None

    def schedule(self, fn: Callable[[], None], delay_millis: int) -> ManualHandle:
        if self.fail_after is not None and len(self.handles) >= self.fail_after:
            msg = "cannot schedule new tasks after shutdown"
            raise RuntimeError(msg)
        handle = ManualHandle(fn=fn, delay_millis=delay_millis)
        self.handles.append(handle)
        return handle

    @property
    def delays(self) -> list[int]:
        return [handle.delay_millis for handle in self.handles]

    def pending(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.started and not h.cancelled]

    def run_next(self) -> bool:
        """Run the oldest pending registration.

        Returns:
            False if nothing was pending.
        """
        pending = self.pending()
        if not pending:
            return False
        handle = pending[0]
        handle.started = True
        handle.fn()
        return True

    def run_all(self, limit: int = 1000) -> int:
        """Run registrations until none is pending and return how many
        ran."""
        count = 0
        while count < limit and self.run_next():
            count += 1
        return count


class FlakyWork:
    """Work function failing ``failures`` times before returning
    ``value``."""

    def __init__(
        self,
        failures: int,
        value: object = 42,
        error_factory: Callable[[int], Exception] = lambda n: RetryableError(f"failure {n}"),
    ) -> None:
        self.failures = failures
        self.value = value
        self.error_factory = error_factory
        self.calls = 0
        self.retry_counts: list[int] = []

    def __call__(self, context: RetryContext) -> object:
        self.calls += 1
        self.retry_counts.append(context.retry_count)
        if self.calls <= self.failures:
            raise self.error_factory(self.calls)
        return self.value
