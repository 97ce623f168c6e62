r"""Exponential delay backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialDelayBackoff"]

from typing import TYPE_CHECKING

from aretry.backoff.base import Backoff
from aretry.core.config import MAX_DELAY_MILLIS
from aretry.core.validation import clamp_delay, validate_delay, validate_multiplier

if TYPE_CHECKING:
    from aretry.context import RetryContext


class ExponentialDelayBackoff(Backoff):
    """Exponential delay backoff strategy.

    Calculates delay as: initial_delay_millis * (multiplier **
    (retry_count - 1)), so the first retry waits exactly
    ``initial_delay_millis``. Delays that do not fit saturate at
    ``MAX_DELAY_MILLIS`` instead of overflowing.

    Args:
        initial_delay_millis: The delay before the first retry, in
            milliseconds.
        multiplier: The growth factor applied for every further retry.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialDelayBackoff
        >>> from aretry.context import RetryContext
        >>> backoff = ExponentialDelayBackoff(initial_delay_millis=100, multiplier=2.0)
        >>> backoff.delay_millis(RetryContext().copy(retry_count=1))
        100
        >>> backoff.delay_millis(RetryContext().copy(retry_count=2))
        200
        >>> backoff.delay_millis(RetryContext().copy(retry_count=3))
        400

        ```
    """

    def __init__(self, initial_delay_millis: int, multiplier: float) -> None:
        validate_delay("initial_delay_millis", initial_delay_millis)
        validate_multiplier("multiplier", multiplier)
        self.initial_delay_millis = initial_delay_millis
        self.multiplier = multiplier

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(initial_delay_millis={self.initial_delay_millis}, "
            f"multiplier={self.multiplier})"
        )

    def delay_millis(self, context: RetryContext) -> int:
        exponent = max(context.retry_count - 1, 0)
        try:
            delay = self.initial_delay_millis * (float(self.multiplier) ** exponent)
        except OverflowError:
            return MAX_DELAY_MILLIS if self.initial_delay_millis > 0 else 0
        return clamp_delay(delay)
