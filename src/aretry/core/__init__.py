r"""Shared defaults and parameter validation for retry sequences.

This package contains the default constants used by backoff strategies
and retry policies, and the validation helpers that check user-supplied
parameters before they reach a running sequence.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_INTERVAL_MILLIS",
    "DEFAULT_MAX_DELAY_MILLIS",
    "DEFAULT_MIN_DELAY_MILLIS",
    "DEFAULT_PROPORTIONAL_MULTIPLIER",
    "DEFAULT_RANDOM_RANGE_MILLIS",
    "MAX_DELAY_MILLIS",
    "clamp_delay",
    "validate_delay",
    "validate_exception_types",
    "validate_max_retries",
    "validate_multiplier",
]

from aretry.core.config import (
    DEFAULT_INTERVAL_MILLIS,
    DEFAULT_MAX_DELAY_MILLIS,
    DEFAULT_MIN_DELAY_MILLIS,
    DEFAULT_PROPORTIONAL_MULTIPLIER,
    DEFAULT_RANDOM_RANGE_MILLIS,
    MAX_DELAY_MILLIS,
)
from aretry.core.validation import (
    clamp_delay,
    validate_delay,
    validate_exception_types,
    validate_max_retries,
    validate_multiplier,
)
