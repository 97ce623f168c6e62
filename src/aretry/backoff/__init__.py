r"""Backoff strategies for delays between retries.

This package provides the base strategies (fixed interval and
exponential delay) and the decorators that wrap them: lower and upper
bounds, uniform and proportional jitter, and a first-retry-without-delay
rule. Decorators are applied with the ``with_*`` methods every backoff
exposes and may be stacked in any order.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF",
    "Backoff",
    "BackoffWrapper",
    "BoundedMaxBackoff",
    "BoundedMinBackoff",
    "ExponentialDelayBackoff",
    "FirstRetryNoDelayBackoff",
    "FixedIntervalBackoff",
    "ProportionalRandomBackoff",
    "RandomSource",
    "UniformRandomBackoff",
]

from aretry.backoff.base import Backoff, BackoffWrapper
from aretry.backoff.bounded import BoundedMaxBackoff, BoundedMinBackoff
from aretry.backoff.exponential import ExponentialDelayBackoff
from aretry.backoff.first_retry import FirstRetryNoDelayBackoff
from aretry.backoff.fixed import FixedIntervalBackoff
from aretry.backoff.jitter import (
    ProportionalRandomBackoff,
    RandomSource,
    UniformRandomBackoff,
)

DEFAULT_BACKOFF: Backoff = FixedIntervalBackoff()
