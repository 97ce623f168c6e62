r"""Backoff decorators that bound the delay of another backoff."""

from __future__ import annotations

__all__ = ["BoundedMaxBackoff", "BoundedMinBackoff"]

from typing import TYPE_CHECKING

from aretry.backoff.base import Backoff, BackoffWrapper
from aretry.core.config import DEFAULT_MAX_DELAY_MILLIS, DEFAULT_MIN_DELAY_MILLIS
from aretry.core.validation import validate_delay

if TYPE_CHECKING:
    from aretry.context import RetryContext


class BoundedMinBackoff(BackoffWrapper):
    """Never wait less than ``min_delay_millis``.

    Args:
        target: The wrapped backoff.
        min_delay_millis: The lower bound in milliseconds (default: 100).

    Example:
        ```pycon
        >>> from aretry.backoff import FixedIntervalBackoff
        >>> from aretry.context import RetryContext
        >>> backoff = FixedIntervalBackoff(10).with_min_delay(50)
        >>> backoff.delay_millis(RetryContext())
        50

        ```
    """

    def __init__(self, target: Backoff, min_delay_millis: int = DEFAULT_MIN_DELAY_MILLIS) -> None:
        super().__init__(target)
        validate_delay("min_delay_millis", min_delay_millis)
        self.min_delay_millis = min_delay_millis

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(target={self.target!r}, "
            f"min_delay_millis={self.min_delay_millis})"
        )

    def adjust(self, delay: int, context: RetryContext) -> int:  # noqa: ARG002
        return max(delay, self.min_delay_millis)


class BoundedMaxBackoff(BackoffWrapper):
    """Never wait more than ``max_delay_millis``.

    Args:
        target: The wrapped backoff.
        max_delay_millis: The upper bound in milliseconds
            (default: 10000).

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialDelayBackoff
        >>> from aretry.context import RetryContext
        >>> backoff = ExponentialDelayBackoff(100, 2.0).with_max_delay(1000)
        >>> backoff.delay_millis(RetryContext().copy(retry_count=10))
        1000

        ```
    """

    def __init__(self, target: Backoff, max_delay_millis: int = DEFAULT_MAX_DELAY_MILLIS) -> None:
        super().__init__(target)
        validate_delay("max_delay_millis", max_delay_millis)
        self.max_delay_millis = max_delay_millis

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(target={self.target!r}, "
            f"max_delay_millis={self.max_delay_millis})"
        )

    def adjust(self, delay: int, context: RetryContext) -> int:  # noqa: ARG002
        return min(delay, self.max_delay_millis)
