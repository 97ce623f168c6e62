r"""Retry decision logic for determining whether to retry a failed
attempt.

This module provides the RetryPolicy class that decides, after each
failed attempt, whether the sequence continues. Failures are classified
by exception type (with ``isinstance`` semantics, so a subclass matches
its registered parent) and by user-supplied predicates.
"""

from __future__ import annotations

__all__ = ["RetryPolicy"]

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, ClassVar

from aretry.core.validation import validate_exception_types, validate_max_retries

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.context import RetryContext

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Decides whether a failed attempt is retried.

    The policy is immutable: ``retry_for``, ``abort_for``, ``retry_if``,
    ``abort_if``, ``with_max_retries`` and ``dont_retry`` return a new
    policy and leave the receiver untouched.

    The checks run in this order, and the first one that applies wins:

    1. No failure recorded yet: retry (the first attempt always runs).
    2. An abort predicate returns True for the failure: abort.
    3. The failure is an instance of an abort-for type: abort.
    4. Retry-for types or retry predicates are registered and none of
       them matches the failure: abort.
    5. ``max_retries`` is set and ``retry_count >= max_retries``: abort.
    6. Otherwise: retry.

    Attributes:
        max_retries: Maximum number of retries, or ``None`` for
            unlimited. The total number of attempts is at most
            ``max_retries + 1``.
        retry_for_types: Exception types that may be retried. Empty
            means every type may be retried.
        abort_for_types: Exception types that are never retried.
        retry_predicates: Predicates that opt a failure into retries.
        abort_predicates: Predicates that abort the sequence.

    Example:
        ```pycon
        >>> from aretry.context import RetryContext
        >>> from aretry.policy import RetryPolicy
        >>> policy = RetryPolicy().retry_for(OSError).with_max_retries(2)
        >>> context = RetryContext()
        >>> context.record_failure(ConnectionError("reset"))
        >>> policy.should_retry(context)
        True
        >>> context.record_failure(ValueError("bad input"))
        >>> policy.should_retry(context)
        False

        ```
    """

    DEFAULT: ClassVar[RetryPolicy]

    max_retries: int | None = None
    retry_for_types: tuple[type[BaseException], ...] = ()
    abort_for_types: tuple[type[BaseException], ...] = ()
    retry_predicates: tuple[Callable[[Exception], bool], ...] = ()
    abort_predicates: tuple[Callable[[Exception], bool], ...] = ()

    def __post_init__(self) -> None:
        validate_max_retries(self.max_retries)
        validate_exception_types(self.retry_for_types)
        validate_exception_types(self.abort_for_types)

    def should_retry(self, context: RetryContext) -> bool:
        """Determine if the sequence should run another attempt.

        Args:
            context: The retry context holding the last failure and the
                number of retries so far.

        Returns:
            True if the failed attempt should be retried.
        """
        failure = context.last_failure
        if failure is None:
            return True
        if any(predicate(failure) for predicate in self.abort_predicates):
            logger.debug(f"Abort predicate matched {type(failure).__name__}")
            return False
        if isinstance(failure, self.abort_for_types):
            logger.debug(f"{type(failure).__name__} is registered as non-retryable")
            return False
        if not self._is_retryable(failure):
            logger.debug(f"{type(failure).__name__} is not registered as retryable")
            return False
        if self.max_retries is not None and context.retry_count >= self.max_retries:
            logger.debug(f"Max retries exhausted ({context.retry_count}/{self.max_retries})")
            return False
        return True

    def _is_retryable(self, failure: Exception) -> bool:
        if not self.retry_for_types and not self.retry_predicates:
            return True
        if isinstance(failure, self.retry_for_types):
            return True
        return any(predicate(failure) for predicate in self.retry_predicates)

    def retry_for(self, *exception_types: type[BaseException]) -> RetryPolicy:
        """Only retry failures of the given types (or their subclasses).

        Calling it again extends the allow-list.
        """
        return replace(self, retry_for_types=self.retry_for_types + exception_types)

    def abort_for(self, *exception_types: type[BaseException]) -> RetryPolicy:
        """Never retry failures of the given types (or their
        subclasses)."""
        return replace(self, abort_for_types=self.abort_for_types + exception_types)

    def retry_if(self, predicate: Callable[[Exception], bool]) -> RetryPolicy:
        """Allow retries for failures matching ``predicate``."""
        return replace(self, retry_predicates=(*self.retry_predicates, predicate))

    def abort_if(self, predicate: Callable[[Exception], bool]) -> RetryPolicy:
        """Stop the sequence on failures matching ``predicate``."""
        return replace(self, abort_predicates=(*self.abort_predicates, predicate))

    def with_max_retries(self, max_retries: int | None) -> RetryPolicy:
        return replace(self, max_retries=max_retries)

    def dont_retry(self) -> RetryPolicy:
        """Return a policy that never retries."""
        return replace(self, max_retries=0)


RetryPolicy.DEFAULT = RetryPolicy()
