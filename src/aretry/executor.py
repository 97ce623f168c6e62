r"""Retry executor: submits work and returns a future immediately.

This module provides the RetryExecutor class, an immutable
configuration binding a scheduler, a retry policy and a backoff. Every
``with_*`` method returns a new executor, so one base configuration can
be shared and specialised freely across threads.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, TypeVar

from aretry.backoff import (
    DEFAULT_BACKOFF,
    Backoff,
    ExponentialDelayBackoff,
    FixedIntervalBackoff,
)
from aretry.core.config import (
    DEFAULT_MAX_DELAY_MILLIS,
    DEFAULT_MIN_DELAY_MILLIS,
    DEFAULT_PROPORTIONAL_MULTIPLIER,
    DEFAULT_RANDOM_RANGE_MILLIS,
)
from aretry.policy import RetryPolicy
from aretry.task import RetryTask

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Future

    from aretry.backoff import RandomSource
    from aretry.context import RetryContext
    from aretry.scheduler.base import BaseScheduler

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryExecutor:
    """Runs work on a scheduler, retrying failed attempts.

    ``submit`` returns a ``concurrent.futures.Future`` at once; the
    first attempt and every retry run on the scheduler. The future
    resolves with the value of the first successful attempt, fails with
    the last failure once the policy gives up, or is cancelled by the
    caller.

    Attributes:
        scheduler: The scheduler running the attempts. It is shared by
            every executor derived from this one and is never shut down
            by the executor.
        retry_policy: Decides whether a failed attempt is retried.
        backoff: Computes the delay before each retry.
        fixed_delay: If True, every retry waits the delay the backoff
            gives for the first retry, so the spacing stays constant.
            If False (default), the delay is computed from the current
            retry count.

    Example:
        ```pycon
        >>> from aretry import RetryExecutor
        >>> from aretry.scheduler import ThreadPoolScheduler
        >>> calls = []
        >>> def flaky(context):
        ...     calls.append(context.retry_count)
        ...     if context.retry_count < 2:
        ...         raise ConnectionError("try again")
        ...     return "done"
        ...
        >>> with ThreadPoolScheduler() as scheduler:
        ...     executor = (
        ...         RetryExecutor(scheduler)
        ...         .retry_for(ConnectionError)
        ...         .with_max_retries(3)
        ...         .with_fixed_backoff(10)
        ...     )
        ...     executor.submit(flaky).result()
        ...
        'done'
        >>> calls
        [0, 1, 2]

        ```
    """

    scheduler: BaseScheduler
    retry_policy: RetryPolicy = field(default=RetryPolicy.DEFAULT)
    backoff: Backoff = field(default=DEFAULT_BACKOFF)
    fixed_delay: bool = False

    def __post_init__(self) -> None:
        # Any object with a schedule(fn, delay_millis) method is accepted
        if not callable(getattr(self.scheduler, "schedule", None)):
            msg = (
                "scheduler must provide a schedule(fn, delay_millis) method, "
                f"got {type(self.scheduler).__name__}"
            )
            raise TypeError(msg)
        if not isinstance(self.retry_policy, RetryPolicy):
            msg = f"retry_policy must be a RetryPolicy, got {type(self.retry_policy).__name__}"
            raise TypeError(msg)
        if not isinstance(self.backoff, Backoff):
            msg = f"backoff must be a Backoff, got {type(self.backoff).__name__}"
            raise TypeError(msg)

    def submit(self, work: Callable[[RetryContext], T], user_context: Any = None) -> Future[T]:
        """Run ``work`` with retries.

        Args:
            work: The work function. It receives the ``RetryContext`` of
                the sequence and returns the result.
            user_context: Optional object made available to every
                attempt as ``context.user_context``.

        Returns:
            A future resolved when the sequence ends.
        """
        task = RetryTask(work, self, user_context=user_context)
        logger.debug(f"Submitting {work!r} with {self.retry_policy!r}")
        return task.start()

    def submit_callable(self, work: Callable[[], T], user_context: Any = None) -> Future[T]:
        """Run a work function that takes no argument with retries."""
        return self.submit(lambda _context: work(), user_context=user_context)

    def submit_void(
        self, work: Callable[[RetryContext], object], user_context: Any = None
    ) -> Future[None]:
        """Run ``work`` with retries, discarding its return value.

        The future resolves to ``None`` once an attempt returns.
        """

        def run(context: RetryContext) -> None:
            work(context)

        return self.submit(run, user_context=user_context)

    def compute_delay_millis(self, context: RetryContext) -> int:
        """Compute the delay before the retry described by ``context``.

        Args:
            context: The retry context, with ``retry_count`` already set
                to the number of the upcoming retry.

        Returns:
            The delay in milliseconds.
        """
        if self.fixed_delay:
            return self.backoff.delay_millis(context.copy(retry_count=1))
        return self.backoff.delay_millis(context)

    def with_scheduler(self, scheduler: BaseScheduler) -> RetryExecutor:
        return replace(self, scheduler=scheduler)

    def with_retry_policy(self, retry_policy: RetryPolicy) -> RetryExecutor:
        return replace(self, retry_policy=retry_policy)

    def with_backoff(self, backoff: Backoff) -> RetryExecutor:
        return replace(self, backoff=backoff)

    def with_fixed_delay(self, fixed_delay: bool = True) -> RetryExecutor:
        return replace(self, fixed_delay=fixed_delay)

    def with_fixed_backoff(self, interval_millis: int) -> RetryExecutor:
        return self.with_backoff(FixedIntervalBackoff(interval_millis))

    def with_exponential_backoff(
        self, initial_delay_millis: int, multiplier: float
    ) -> RetryExecutor:
        return self.with_backoff(ExponentialDelayBackoff(initial_delay_millis, multiplier))

    def with_no_delay(self) -> RetryExecutor:
        return self.with_backoff(FixedIntervalBackoff(0))

    def first_retry_no_delay(self) -> RetryExecutor:
        return self.with_backoff(self.backoff.with_first_retry_no_delay())

    def with_uniform_jitter(
        self,
        range_millis: int = DEFAULT_RANDOM_RANGE_MILLIS,
        random: RandomSource | None = None,
    ) -> RetryExecutor:
        return self.with_backoff(self.backoff.with_uniform_jitter(range_millis, random=random))

    def with_proportional_jitter(
        self,
        multiplier: float = DEFAULT_PROPORTIONAL_MULTIPLIER,
        random: RandomSource | None = None,
    ) -> RetryExecutor:
        return self.with_backoff(self.backoff.with_proportional_jitter(multiplier, random=random))

    def with_min_delay(self, min_delay_millis: int = DEFAULT_MIN_DELAY_MILLIS) -> RetryExecutor:
        return self.with_backoff(self.backoff.with_min_delay(min_delay_millis))

    def with_max_delay(self, max_delay_millis: int = DEFAULT_MAX_DELAY_MILLIS) -> RetryExecutor:
        return self.with_backoff(self.backoff.with_max_delay(max_delay_millis))

    def with_max_retries(self, max_retries: int | None) -> RetryExecutor:
        return self.with_retry_policy(self.retry_policy.with_max_retries(max_retries))

    def retry_for(self, *exception_types: type[BaseException]) -> RetryExecutor:
        return self.with_retry_policy(self.retry_policy.retry_for(*exception_types))

    def abort_for(self, *exception_types: type[BaseException]) -> RetryExecutor:
        return self.with_retry_policy(self.retry_policy.abort_for(*exception_types))

    def retry_if(self, predicate: Callable[[Exception], bool]) -> RetryExecutor:
        return self.with_retry_policy(self.retry_policy.retry_if(predicate))

    def abort_if(self, predicate: Callable[[Exception], bool]) -> RetryExecutor:
        return self.with_retry_policy(self.retry_policy.abort_if(predicate))

    def dont_retry(self) -> RetryExecutor:
        return self.with_retry_policy(self.retry_policy.dont_retry())
