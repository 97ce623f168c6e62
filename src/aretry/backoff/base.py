r"""Abstract base classes for backoff strategies."""

from __future__ import annotations

__all__ = ["Backoff", "BackoffWrapper"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from aretry.core.config import (
    DEFAULT_MAX_DELAY_MILLIS,
    DEFAULT_MIN_DELAY_MILLIS,
    DEFAULT_PROPORTIONAL_MULTIPLIER,
    DEFAULT_RANDOM_RANGE_MILLIS,
)

if TYPE_CHECKING:
    from aretry.backoff.jitter import RandomSource
    from aretry.context import RetryContext


class Backoff(ABC):
    """Abstract base class for backoff strategies.

    A backoff determines how long to wait before the next attempt of a
    retry sequence. It is immutable: every ``with_*`` method returns a
    new backoff wrapping this one, so one instance can be shared by many
    sequences and threads.
    """

    @abstractmethod
    def delay_millis(self, context: RetryContext) -> int:
        """Calculate the delay before the next attempt.

        Args:
            context: The retry context. ``context.retry_count`` is the
                number of the upcoming retry, so it is 1 for the first
                retry, 2 for the second, etc.

        Returns:
            The delay in milliseconds, never negative.
        """

    def with_uniform_jitter(
        self,
        range_millis: int = DEFAULT_RANDOM_RANGE_MILLIS,
        random: RandomSource | None = None,
    ) -> Backoff:
        """Add a random value in ``[-range_millis, +range_millis]``."""
        from aretry.backoff.jitter import UniformRandomBackoff

        return UniformRandomBackoff(self, range_millis=range_millis, random=random)

    def with_proportional_jitter(
        self,
        multiplier: float = DEFAULT_PROPORTIONAL_MULTIPLIER,
        random: RandomSource | None = None,
    ) -> Backoff:
        """Scale the delay by a random factor in ``[1 - multiplier, 1 +
        multiplier]``."""
        from aretry.backoff.jitter import ProportionalRandomBackoff

        return ProportionalRandomBackoff(self, multiplier=multiplier, random=random)

    def with_min_delay(self, min_delay_millis: int = DEFAULT_MIN_DELAY_MILLIS) -> Backoff:
        from aretry.backoff.bounded import BoundedMinBackoff

        return BoundedMinBackoff(self, min_delay_millis=min_delay_millis)

    def with_max_delay(self, max_delay_millis: int = DEFAULT_MAX_DELAY_MILLIS) -> Backoff:
        from aretry.backoff.bounded import BoundedMaxBackoff

        return BoundedMaxBackoff(self, max_delay_millis=max_delay_millis)

    def with_first_retry_no_delay(self) -> Backoff:
        from aretry.backoff.first_retry import FirstRetryNoDelayBackoff

        return FirstRetryNoDelayBackoff(self)


class BackoffWrapper(Backoff):
    """Base class for backoffs that adjust the delay of another backoff.

    Args:
        target: The wrapped backoff.
    """

    def __init__(self, target: Backoff) -> None:
        if not isinstance(target, Backoff):
            msg = f"target must be a Backoff, got {type(target).__name__}"
            raise TypeError(msg)
        self.target = target

    def delay_millis(self, context: RetryContext) -> int:
        return self.adjust(self.target.delay_millis(context), context)

    @abstractmethod
    def adjust(self, delay: int, context: RetryContext) -> int:
        """Adjust the delay computed by the wrapped backoff.

        Args:
            delay: The delay in milliseconds returned by ``target``.
            context: The retry context.

        Returns:
            The adjusted delay in milliseconds, never negative.
        """
