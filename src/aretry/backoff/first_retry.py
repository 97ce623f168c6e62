r"""Backoff decorator that retries immediately after the first
failure."""

from __future__ import annotations

__all__ = ["FirstRetryNoDelayBackoff"]

from typing import TYPE_CHECKING

from aretry.backoff.base import BackoffWrapper

if TYPE_CHECKING:
    from aretry.context import RetryContext


class FirstRetryNoDelayBackoff(BackoffWrapper):
    """Run the first retry without delay, then defer to the wrapped
    backoff.

    Example:
        ```pycon
        >>> from aretry.backoff import FixedIntervalBackoff
        >>> from aretry.context import RetryContext
        >>> backoff = FixedIntervalBackoff(500).with_first_retry_no_delay()
        >>> backoff.delay_millis(RetryContext().copy(retry_count=1))
        0
        >>> backoff.delay_millis(RetryContext().copy(retry_count=2))
        500

        ```
    """

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(target={self.target!r})"

    def adjust(self, delay: int, context: RetryContext) -> int:
        if context.retry_count <= 1:
            return 0
        return delay
