"""Integration tests running retry sequences on a real thread pool.

These tests use short real delays, so timing assertions only check lower
bounds.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import CancelledError, wait

import pytest

from aretry import AbortRetryError, RetryExecutor, SchedulerError
from aretry.scheduler import ThreadPoolScheduler
from tests.helpers import FatalError, FlakyWork, RetryableError

TIMEOUT = 10.0


class TimedWork(FlakyWork):
    """FlakyWork recording the monotonic time of each attempt."""

    def __init__(self, failures: int, value: object = 42) -> None:
        super().__init__(failures, value=value)
        self.times: list[float] = []

    def __call__(self, context):
        self.times.append(time.monotonic())
        return super().__call__(context)


def gaps(times: list[float]) -> list[float]:
    return [b - a for a, b in zip(times, times[1:])]


#########################################
#     Integration tests for retries     #
#########################################


def test_executor_threads_success_after_retries(thread_scheduler: ThreadPoolScheduler) -> None:
    work = FlakyWork(2, value="ok")
    future = RetryExecutor(thread_scheduler).with_fixed_backoff(20).submit(work)
    assert future.result(timeout=TIMEOUT) == "ok"
    assert work.retry_counts == [0, 1, 2]


def test_executor_threads_does_not_block_caller(thread_scheduler: ThreadPoolScheduler) -> None:
    started = threading.Event()
    release = threading.Event()

    def work(context) -> str:
        started.set()
        release.wait(TIMEOUT)
        return "released"

    future = RetryExecutor(thread_scheduler).submit(work)
    assert started.wait(TIMEOUT)
    assert not future.done()
    release.set()
    assert future.result(timeout=TIMEOUT) == "released"


def test_executor_threads_fixed_gaps(thread_scheduler: ThreadPoolScheduler) -> None:
    work = TimedWork(3)
    future = RetryExecutor(thread_scheduler).with_fixed_backoff(30).submit(work)
    assert future.result(timeout=TIMEOUT) == 42
    assert all(gap >= 0.025 for gap in gaps(work.times))


def test_executor_threads_exponential_gaps(thread_scheduler: ThreadPoolScheduler) -> None:
    work = TimedWork(3)
    future = RetryExecutor(thread_scheduler).with_exponential_backoff(20, 2.0).submit(work)
    assert future.result(timeout=TIMEOUT) == 42
    observed = gaps(work.times)
    assert len(observed) == 3
    for gap, expected in zip(observed, [0.02, 0.04, 0.08]):
        assert gap >= expected - 0.005


def test_executor_threads_exhausts_retries(thread_scheduler: ThreadPoolScheduler) -> None:
    work = FlakyWork(10)
    future = RetryExecutor(thread_scheduler).with_no_delay().with_max_retries(2).submit(work)
    with pytest.raises(RetryableError, match=r"failure 3"):
        future.result(timeout=TIMEOUT)
    assert work.calls == 3


def test_executor_threads_abort_for(thread_scheduler: ThreadPoolScheduler) -> None:
    work = FlakyWork(10, error_factory=lambda n: FatalError(f"fatal {n}"))
    future = RetryExecutor(thread_scheduler).with_no_delay().abort_for(FatalError).submit(work)
    with pytest.raises(FatalError, match=r"fatal 1"):
        future.result(timeout=TIMEOUT)
    assert work.calls == 1


def test_executor_threads_abort_retry_error(thread_scheduler: ThreadPoolScheduler) -> None:
    def work(context) -> None:
        if context.retry_count == 1:
            msg = "stop here"
            raise AbortRetryError(msg)
        raise RetryableError

    future = RetryExecutor(thread_scheduler).with_no_delay().submit(work)
    with pytest.raises(AbortRetryError, match=r"stop here"):
        future.result(timeout=TIMEOUT)


def test_executor_threads_cancel_before_retry(thread_scheduler: ThreadPoolScheduler) -> None:
    calls = []

    def work(context) -> None:
        calls.append(context.retry_count)
        raise RetryableError

    future = RetryExecutor(thread_scheduler).with_fixed_backoff(500).submit(work)
    # wait until the retry is registered
    deadline = time.monotonic() + TIMEOUT
    while thread_scheduler.pending() == 0 and time.monotonic() < deadline:
        time.sleep(0.001)
    assert future.cancel()
    with pytest.raises(CancelledError):
        future.result(timeout=TIMEOUT)
    start = time.monotonic()
    thread_scheduler.shutdown(wait=True)
    assert time.monotonic() - start < 0.4
    assert calls == [0]


def test_executor_threads_cancel_counts_attempts(thread_scheduler: ThreadPoolScheduler) -> None:
    work = FlakyWork(100)
    future = RetryExecutor(thread_scheduler).with_fixed_backoff(200).submit(work)
    time.sleep(0.05)
    future.cancel()
    thread_scheduler.shutdown(wait=True)
    assert work.calls == 1


def test_executor_threads_many_sequences(thread_scheduler: ThreadPoolScheduler) -> None:
    executor = RetryExecutor(thread_scheduler).with_fixed_backoff(5).with_max_retries(5)
    works = [FlakyWork(n % 4, value=n) for n in range(50)]
    futures = [executor.submit(work) for work in works]
    done, not_done = wait(futures, timeout=TIMEOUT)
    assert not not_done
    assert [future.result() for future in futures] == list(range(50))
    assert [work.calls for work in works] == [n % 4 + 1 for n in range(50)]


def test_executor_threads_scheduler_shut_down_between_attempts() -> None:
    scheduler = ThreadPoolScheduler()
    failed = threading.Event()

    def work(context) -> None:
        # the retry is registered after this attempt, once the scheduler
        # refuses new work
        scheduler.shutdown(wait=False)
        failed.set()
        raise RetryableError

    future = RetryExecutor(scheduler).with_no_delay().submit(work)
    assert failed.wait(TIMEOUT)
    with pytest.raises(SchedulerError, match=r"failed to schedule attempt 2") as exc_info:
        future.result(timeout=TIMEOUT)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    scheduler.shutdown(wait=True)
