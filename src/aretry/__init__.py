r"""aretry - Asynchronous retries on a shared scheduler.

This package runs a unit of work repeatedly until it succeeds, is judged
non-retryable, or exhausts its retry budget, without blocking the
calling thread. Each submission returns a ``concurrent.futures.Future``
immediately; attempts and the delays between them are driven by a
scheduler.

Key Features:
    - Immutable, chainable executor configuration
    - Retry policies with max retries, retry-for/abort-for exception
      types and predicates
    - Fixed and exponential backoff, with min/max bounds and uniform or
      proportional jitter
    - Cancellation through the returned future
    - Thread-pool and asyncio event loop schedulers

Example:
    ```pycon
    >>> from aretry import RetryExecutor
    >>> from aretry.scheduler import ThreadPoolScheduler
    >>> with ThreadPoolScheduler() as scheduler:
    ...     executor = RetryExecutor(scheduler).with_exponential_backoff(100, 2.0)
    ...     future = executor.retry_for(OSError).with_max_retries(5).submit_callable(
    ...         lambda: "pong"
    ...     )
    ...     future.result()
    ...
    'pong'

    ```
"""

from __future__ import annotations

__all__ = [
    "AbortRetryError",
    "RetryContext",
    "RetryExecutor",
    "RetryPolicy",
    "RetryTask",
    "SchedulerError",
    "TaskState",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from aretry.context import RetryContext
from aretry.exceptions import AbortRetryError, SchedulerError
from aretry.executor import RetryExecutor
from aretry.policy import RetryPolicy
from aretry.task import RetryTask, TaskState

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
