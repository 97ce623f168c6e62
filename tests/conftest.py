from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from aretry import RetryExecutor
from aretry.scheduler import ThreadPoolScheduler
from tests.helpers import ManualScheduler

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    """Create a scheduler driven by the test itself."""
    return ManualScheduler()


@pytest.fixture
def executor(manual_scheduler: ManualScheduler) -> RetryExecutor:
    """Create an executor on the manual scheduler with a 100ms fixed
    backoff."""
    return RetryExecutor(manual_scheduler).with_fixed_backoff(100)


@pytest.fixture
def thread_scheduler() -> Generator[ThreadPoolScheduler, None, None]:
    """Create a real thread-pool scheduler, shut down after the test."""
    scheduler = ThreadPoolScheduler(max_workers=4, thread_name_prefix="aretry-test")
    yield scheduler
    scheduler.shutdown(wait=True)
