r"""Self-rescheduling task driving one retry sequence.

This module provides the RetryTask class. A task runs one attempt each
time the scheduler invokes it, and ends every invocation either by
resolving its future or by registering itself again with the scheduler.
It never loops or recurses, so the stack depth does not grow with the
number of retries.
"""

from __future__ import annotations

__all__ = ["RetryTask", "TaskState"]

import logging
import threading
from concurrent.futures import Future, InvalidStateError
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from aretry.context import RetryContext
from aretry.exceptions import AbortRetryError, SchedulerError

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.executor import RetryExecutor
    from aretry.scheduler.base import ScheduledHandle

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class TaskState(Enum):
    """Retry task states.

    Attributes:
        PENDING: Created, the first attempt is not running yet.
        RUNNING: An attempt is running.
        SCHEDULED_RETRY: An attempt failed and the next one is
            registered with the scheduler.
        SUCCEEDED: An attempt returned; the future holds its value.
        PERMANENTLY_FAILED: The sequence gave up; the future holds the
            failure.
        CANCELLED: The future was cancelled.
    """

    PENDING = "pending"
    RUNNING = "running"
    SCHEDULED_RETRY = "scheduled_retry"
    SUCCEEDED = "succeeded"
    PERMANENTLY_FAILED = "permanently_failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {TaskState.SUCCEEDED, TaskState.PERMANENTLY_FAILED, TaskState.CANCELLED}
)


class RetryTask(Generic[T]):
    """One retry sequence: a work function, its context and its future.

    The task is created by ``RetryExecutor`` and is not meant to be
    reused. Its future stays pending until the sequence ends, so it can
    be cancelled at any point: a registered attempt is then withdrawn
    from the scheduler, and the outcome of an attempt already running
    is discarded.

    Args:
        work: The work function. It receives the retry context.
        executor: The executor providing the scheduler, the retry
            policy and the backoff.
        user_context: Optional object stored in the retry context.

    Attributes:
        context: The retry context shared by all attempts.
        future: The future resolved when the sequence ends.
    """

    def __init__(
        self,
        work: Callable[[RetryContext], T],
        executor: RetryExecutor,
        user_context: Any = None,
    ) -> None:
        self._work = work
        self._executor = executor
        self.context = RetryContext(user_context=user_context)
        self.future: Future[T] = Future()
        self._state = TaskState.PENDING
        self._registration: ScheduledHandle | None = None
        self._arms = 0
        self._lock = threading.Lock()
        self.future.add_done_callback(self._on_future_done)

    @property
    def state(self) -> TaskState:
        return self._state

    def start(self) -> Future[T]:
        """Register the first attempt with no delay and return the
        future."""
        self._schedule(0)
        return self.future

    def run(self) -> None:
        """Run one attempt.

        Called by the scheduler. Does nothing if the sequence already
        ended, for example because the future was cancelled.
        """
        with self._lock:
            if self._state.is_terminal:
                return
            self._state = TaskState.RUNNING
            self._registration = None

        attempt = self.context.retry_count + 1
        logger.debug(f"Running attempt {attempt} of {self._work!r}")
        try:
            result = self._work(self.context)
        except Exception as exc:  # noqa: BLE001
            self._on_failure(exc)
        except BaseException as exc:
            self._resolve(TaskState.PERMANENTLY_FAILED, exc)
            raise
        else:
            logger.debug(f"Attempt {attempt} succeeded")
            self._resolve(TaskState.SUCCEEDED, result)

    def _on_failure(self, failure: Exception) -> None:
        self.context.record_failure(failure)
        if self.future.cancelled():
            logger.warning(
                f"Attempt {self.context.retry_count + 1} failed with "
                f"{type(failure).__name__} after the sequence was cancelled"
            )
            return
        if isinstance(failure, AbortRetryError):
            logger.debug(f"Attempt {self.context.retry_count + 1} aborted the sequence")
            self._resolve(TaskState.PERMANENTLY_FAILED, failure)
            return
        try:
            retry = self._executor.retry_policy.should_retry(self.context)
        except Exception as exc:  # noqa: BLE001
            # exc.__context__ is the work failure
            logger.warning(f"Retry policy failed to classify {type(failure).__name__}: {exc}")
            self._resolve(TaskState.PERMANENTLY_FAILED, exc)
            return
        if not retry:
            logger.debug(
                f"Giving up after {self.context.retry_count + 1} attempts: "
                f"{type(failure).__name__}: {failure}"
            )
            self._resolve(TaskState.PERMANENTLY_FAILED, failure)
            return

        self.context.advance()
        try:
            delay = self._executor.compute_delay_millis(self.context)
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"Backoff failed to compute the next delay: {exc}")
            self._resolve(TaskState.PERMANENTLY_FAILED, exc)
            return
        with self._lock:
            if self._state.is_terminal:
                return
            self._state = TaskState.SCHEDULED_RETRY
        logger.debug(
            f"Attempt {self.context.retry_count} failed with {type(failure).__name__}, "
            f"retrying in {delay}ms"
        )
        self._schedule(delay)

    def _schedule(self, delay_millis: int) -> None:
        with self._lock:
            self._arms += 1
            arm = self._arms
        try:
            registration = self._executor.scheduler.schedule(self.run, delay_millis)
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"Scheduler refused the next attempt: {exc}")
            error = SchedulerError(
                f"failed to schedule attempt {self.context.retry_count + 1}: {exc}",
                retry_count=self.context.retry_count,
            )
            error.__cause__ = exc
            self._resolve(TaskState.PERMANENTLY_FAILED, error)
            return

        with self._lock:
            if self._state is TaskState.CANCELLED:
                registration.cancel()
            elif arm == self._arms and not self._state.is_terminal:
                # A registration that already ran and armed the next
                # attempt is stale
                self._registration = registration

    def _resolve(self, state: TaskState, outcome: Any) -> None:
        with self._lock:
            if self._state.is_terminal:
                return
            self._state = state
            try:
                if state is TaskState.SUCCEEDED:
                    self.future.set_result(outcome)
                else:
                    self.future.set_exception(outcome)
            except InvalidStateError:
                # The future was cancelled while the attempt was running
                self._state = TaskState.CANCELLED
                logger.debug("Discarding the outcome of an attempt of a cancelled sequence")

    def _on_future_done(self, future: Future[T]) -> None:
        if not future.cancelled():
            return
        with self._lock:
            self._state = TaskState.CANCELLED
            registration, self._registration = self._registration, None
        if registration is not None:
            registration.cancel()
        logger.debug(f"Sequence cancelled after {self.context.retry_count} retries")
