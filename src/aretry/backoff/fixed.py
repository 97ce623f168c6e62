r"""Fixed interval backoff strategy."""

from __future__ import annotations

__all__ = ["FixedIntervalBackoff"]

from typing import TYPE_CHECKING

from aretry.backoff.base import Backoff
from aretry.core.config import DEFAULT_INTERVAL_MILLIS
from aretry.core.validation import validate_delay

if TYPE_CHECKING:
    from aretry.context import RetryContext


class FixedIntervalBackoff(Backoff):
    """Fixed interval backoff strategy.

    Returns the same delay for every retry, regardless of the retry
    count. This is the default backoff.

    Args:
        interval_millis: The delay in milliseconds to use for all
            retries (default: 1000). Use 0 to retry immediately.

    Example:
        ```pycon
        >>> from aretry.backoff import FixedIntervalBackoff
        >>> from aretry.context import RetryContext
        >>> backoff = FixedIntervalBackoff(interval_millis=250)
        >>> backoff.delay_millis(RetryContext())
        250

        ```
    """

    def __init__(self, interval_millis: int = DEFAULT_INTERVAL_MILLIS) -> None:
        validate_delay("interval_millis", interval_millis)
        self.interval_millis = interval_millis

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(interval_millis={self.interval_millis})"

    def delay_millis(self, context: RetryContext) -> int:  # noqa: ARG002
        return self.interval_millis
