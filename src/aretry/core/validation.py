r"""Parameter validation utilities for retry policies and backoffs.

This module provides validation functions for retry parameters to ensure
they meet the required constraints before being used by a retry
sequence.
"""

from __future__ import annotations

__all__ = [
    "clamp_delay",
    "validate_delay",
    "validate_exception_types",
    "validate_max_retries",
    "validate_multiplier",
]

import math

from aretry.core.config import MAX_DELAY_MILLIS


def validate_delay(name: str, value: int) -> None:
    """Validate a delay expressed in milliseconds.

    Args:
        name: The parameter name, used in the error message.
        value: The delay in milliseconds. Must be >= 0.

    Raises:
        ValueError: If the delay is negative.

    Example:
        ```pycon
        >>> from aretry.core.validation import validate_delay
        >>> validate_delay("interval_millis", 1000)
        >>> validate_delay("interval_millis", -1)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: interval_millis must be >= 0, got -1

        ```
    """
    if value < 0:
        msg = f"{name} must be >= 0, got {value}"
        raise ValueError(msg)


def validate_multiplier(name: str, value: float) -> None:
    """Validate a finite, non-negative multiplier.

    Args:
        name: The parameter name, used in the error message.
        value: The multiplier to check.

    Raises:
        ValueError: If the multiplier is negative, NaN or infinite.
    """
    if math.isnan(value) or math.isinf(value) or value < 0:
        msg = f"{name} must be a finite number >= 0, got {value}"
        raise ValueError(msg)


def validate_max_retries(max_retries: int | None) -> None:
    """Validate the maximum number of retries.

    Args:
        max_retries: Maximum number of retries, or ``None`` for unlimited.
            A value of 0 means no retries (only the initial attempt).

    Raises:
        ValueError: If max_retries is negative.

    Example:
        ```pycon
        >>> from aretry.core.validation import validate_max_retries
        >>> validate_max_retries(3)
        >>> validate_max_retries(None)

        ```
    """
    if max_retries is not None and max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)


def validate_exception_types(types: tuple[type, ...]) -> None:
    """Validate that every entry is an exception class.

    Args:
        types: The classes to check.

    Raises:
        TypeError: If an entry is not a subclass of ``BaseException``.
    """
    for exc_type in types:
        if not isinstance(exc_type, type) or not issubclass(exc_type, BaseException):
            msg = f"expected an exception class, got {exc_type!r}"
            raise TypeError(msg)


def clamp_delay(delay: float) -> int:
    """Round a computed delay and clamp it to ``[0, MAX_DELAY_MILLIS]``.

    Args:
        delay: The raw delay in milliseconds. May be negative, huge or
            infinite after jitter or exponential growth.

    Returns:
        The delay as a non-negative integer number of milliseconds.

    Example:
        ```pycon
        >>> from aretry.core.validation import clamp_delay
        >>> clamp_delay(99.6)
        100
        >>> clamp_delay(-5)
        0
        >>> clamp_delay(float("inf"))
        9223372036854775807

        ```
    """
    if delay >= MAX_DELAY_MILLIS:
        return MAX_DELAY_MILLIS
    # also catches NaN
    if not delay > 0:
        return 0
    return round(delay)
