r"""Unit tests for BoundedMinBackoff and BoundedMaxBackoff."""

from __future__ import annotations

import pytest

from aretry.backoff import (
    BoundedMaxBackoff,
    BoundedMinBackoff,
    ExponentialDelayBackoff,
    FixedIntervalBackoff,
)
from aretry.context import RetryContext
from aretry.core.config import DEFAULT_MAX_DELAY_MILLIS, DEFAULT_MIN_DELAY_MILLIS

#######################################
#     Tests for BoundedMinBackoff     #
#######################################


@pytest.mark.parametrize(("interval", "expected"), [(10, 50), (50, 50), (80, 80)])
def test_min_backoff(interval: int, expected: int) -> None:
    backoff = BoundedMinBackoff(FixedIntervalBackoff(interval), min_delay_millis=50)
    assert backoff.delay_millis(RetryContext()) == expected


def test_min_backoff_default() -> None:
    backoff = FixedIntervalBackoff(0).with_min_delay()
    assert isinstance(backoff, BoundedMinBackoff)
    assert backoff.min_delay_millis == DEFAULT_MIN_DELAY_MILLIS
    assert backoff.delay_millis(RetryContext()) == 100


def test_min_backoff_invalid() -> None:
    with pytest.raises(ValueError, match=r"min_delay_millis must be >= 0"):
        BoundedMinBackoff(FixedIntervalBackoff(), min_delay_millis=-1)


#######################################
#     Tests for BoundedMaxBackoff     #
#######################################


@pytest.mark.parametrize(("interval", "expected"), [(10, 10), (50, 50), (80, 50)])
def test_max_backoff(interval: int, expected: int) -> None:
    backoff = BoundedMaxBackoff(FixedIntervalBackoff(interval), max_delay_millis=50)
    assert backoff.delay_millis(RetryContext()) == expected


def test_max_backoff_default() -> None:
    backoff = FixedIntervalBackoff(60_000).with_max_delay()
    assert isinstance(backoff, BoundedMaxBackoff)
    assert backoff.max_delay_millis == DEFAULT_MAX_DELAY_MILLIS
    assert backoff.delay_millis(RetryContext()) == 10_000


def test_max_backoff_caps_exponential_growth() -> None:
    backoff = ExponentialDelayBackoff(100, 2.0).with_max_delay(1000)
    delays = [backoff.delay_millis(RetryContext().copy(retry_count=n)) for n in range(1, 8)]
    assert delays == [100, 200, 400, 800, 1000, 1000, 1000]


def test_max_backoff_invalid() -> None:
    with pytest.raises(ValueError, match=r"max_delay_millis must be >= 0"):
        BoundedMaxBackoff(FixedIntervalBackoff(), max_delay_millis=-1)


def test_bounded_backoff_rejects_non_backoff_target() -> None:
    with pytest.raises(TypeError, match=r"target must be a Backoff"):
        BoundedMaxBackoff(100)  # type: ignore[arg-type]


##############################
#     Tests for ordering     #
##############################


def test_bounds_apply_in_call_order() -> None:
    """Test that the outermost decorator has the last word."""
    base = FixedIntervalBackoff(50)
    assert base.with_min_delay(100).with_max_delay(80).delay_millis(RetryContext()) == 80
    assert base.with_max_delay(80).with_min_delay(100).delay_millis(RetryContext()) == 100


def test_with_methods_do_not_modify_receiver() -> None:
    base = FixedIntervalBackoff(50)
    bounded = base.with_min_delay(100)
    assert bounded is not base
    assert bounded.target is base
    assert base.delay_millis(RetryContext()) == 50
