r"""Backoff decorators that add random jitter to another backoff.

Jitter spreads the retries of many sequences that failed at the same
time, so they do not hit the recovering resource in lockstep. The
randomness source is injectable to make delays reproducible in tests.
"""

from __future__ import annotations

__all__ = ["ProportionalRandomBackoff", "RandomSource", "UniformRandomBackoff"]

import logging
import random as _random
from typing import TYPE_CHECKING, Protocol

from aretry.backoff.base import Backoff, BackoffWrapper
from aretry.core.config import DEFAULT_PROPORTIONAL_MULTIPLIER, DEFAULT_RANDOM_RANGE_MILLIS
from aretry.core.validation import clamp_delay, validate_delay, validate_multiplier

if TYPE_CHECKING:
    from aretry.context import RetryContext

logger: logging.Logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything that draws uniform floats, e.g. the ``random`` module
    or a seeded ``random.Random``."""

    def uniform(self, a: float, b: float) -> float: ...


class UniformRandomBackoff(BackoffWrapper):
    """Add a uniformly distributed random value to the delay.

    Calculates delay as: inner + uniform(-range_millis, +range_millis),
    floored at 0.

    Args:
        target: The wrapped backoff.
        range_millis: The jitter range in milliseconds (default: 100).
        random: Optional randomness source. Defaults to the ``random``
            module.

    Example:
        ```pycon
        >>> import random
        >>> from aretry.backoff import FixedIntervalBackoff
        >>> from aretry.context import RetryContext
        >>> backoff = FixedIntervalBackoff(1000).with_uniform_jitter(
        ...     100, random=random.Random(42)
        ... )
        >>> 900 <= backoff.delay_millis(RetryContext()) <= 1100
        True

        ```
    """

    def __init__(
        self,
        target: Backoff,
        range_millis: int = DEFAULT_RANDOM_RANGE_MILLIS,
        random: RandomSource | None = None,
    ) -> None:
        super().__init__(target)
        validate_delay("range_millis", range_millis)
        self.range_millis = range_millis
        self.random: RandomSource = random if random is not None else _random

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(target={self.target!r}, "
            f"range_millis={self.range_millis})"
        )

    def adjust(self, delay: int, context: RetryContext) -> int:  # noqa: ARG002
        jitter = self.random.uniform(-self.range_millis, self.range_millis)
        logger.debug(f"Uniform jitter of {jitter:.1f}ms on a {delay}ms delay")
        return clamp_delay(delay + jitter)


class ProportionalRandomBackoff(BackoffWrapper):
    """Scale the delay by a random factor close to 1.

    Calculates delay as: inner * (1 + uniform(-multiplier,
    +multiplier)), floored at 0.

    Args:
        target: The wrapped backoff.
        multiplier: The maximum relative deviation (default: 0.1, i.e.
            up to 10% shorter or longer).
        random: Optional randomness source. Defaults to the ``random``
            module.

    Example:
        ```pycon
        >>> from unittest.mock import Mock
        >>> from aretry.backoff import FixedIntervalBackoff
        >>> from aretry.context import RetryContext
        >>> backoff = FixedIntervalBackoff(1000).with_proportional_jitter(
        ...     0.2, random=Mock(uniform=Mock(return_value=0.2))
        ... )
        >>> backoff.delay_millis(RetryContext())
        1200

        ```
    """

    def __init__(
        self,
        target: Backoff,
        multiplier: float = DEFAULT_PROPORTIONAL_MULTIPLIER,
        random: RandomSource | None = None,
    ) -> None:
        super().__init__(target)
        validate_multiplier("multiplier", multiplier)
        self.multiplier = multiplier
        self.random: RandomSource = random if random is not None else _random

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(target={self.target!r}, "
            f"multiplier={self.multiplier})"
        )

    def adjust(self, delay: int, context: RetryContext) -> int:  # noqa: ARG002
        factor = 1 + self.random.uniform(-self.multiplier, self.multiplier)
        logger.debug(f"Proportional jitter factor {factor:.3f} on a {delay}ms delay")
        return clamp_delay(delay * factor)
