from __future__ import annotations

import asyncio
import logging
import sys

from aretry import RetryExecutor
from aretry.scheduler import EventLoopScheduler, ThreadPoolScheduler

logger: logging.Logger = logging.getLogger(__name__)


class _Flaky:
    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.calls = 0

    def __call__(self, context) -> str:
        self.calls += 1
        if context.retry_count < self.failures:
            msg = f"attempt {self.calls} failed"
            raise ConnectionError(msg)
        return "ok"


def check_thread_pool() -> None:
    logger.info("Checking thread pool scheduler...")
    work = _Flaky(failures=2)
    with ThreadPoolScheduler(max_workers=2) as scheduler:
        executor = RetryExecutor(scheduler).retry_for(ConnectionError).with_fixed_backoff(10)
        assert executor.submit(work).result(timeout=10) == "ok"
    assert work.calls == 3


def check_event_loop() -> None:
    logger.info("Checking event loop scheduler...")

    async def main() -> str:
        executor = RetryExecutor(EventLoopScheduler(asyncio.get_running_loop()))
        future = executor.with_exponential_backoff(5, 2.0).submit(_Flaky(failures=3))
        return await asyncio.wrap_future(future)

    assert asyncio.run(main()) == "ok"


def main() -> None:
    r"""Run all package checks to validate installation and
    functionality."""
    try:
        check_thread_pool()
        check_event_loop()

        logger.info("✅ All package checks passed successfully!")
    except Exception:
        logger.exception("❌ Package check failed")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
