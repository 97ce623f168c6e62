r"""Default values for backoff strategies and retry policies.

All delays are expressed in integer milliseconds.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_INTERVAL_MILLIS",
    "DEFAULT_MAX_DELAY_MILLIS",
    "DEFAULT_MIN_DELAY_MILLIS",
    "DEFAULT_PROPORTIONAL_MULTIPLIER",
    "DEFAULT_RANDOM_RANGE_MILLIS",
    "MAX_DELAY_MILLIS",
]

# Delay between retries when no backoff is configured
DEFAULT_INTERVAL_MILLIS = 1000

# Uniform jitter adds a random value in [-range, +range]
DEFAULT_RANDOM_RANGE_MILLIS = 100

# Proportional jitter scales the delay by a random factor in [1 - m, 1 + m]
DEFAULT_PROPORTIONAL_MULTIPLIER = 0.1

# Lower and upper bounds used by with_min_delay() and with_max_delay()
DEFAULT_MIN_DELAY_MILLIS = 100
DEFAULT_MAX_DELAY_MILLIS = 10_000

# Largest delay a backoff can return; growing delays saturate here
MAX_DELAY_MILLIS = 2**63 - 1
