r"""Per-sequence retry context handed to work functions."""

from __future__ import annotations

__all__ = ["RetryContext"]

from typing import Any


class RetryContext:
    """Progress of one retry sequence.

    A context is created when work is submitted and passed to every
    attempt, so the work function can see which attempt it is running
    and why the previous one failed. ``retry_count`` and
    ``last_failure`` are updated by the sequence between attempts;
    ``user_context`` belongs to the caller and is carried unchanged
    unless the work function replaces it.

    Args:
        user_context: Optional object carried across attempts.

    Example:
        ```pycon
        >>> from aretry.context import RetryContext
        >>> context = RetryContext(user_context={"id": 7})
        >>> context.retry_count
        0
        >>> context.is_retry
        False
        >>> context.last_failure is None
        True

        ```
    """

    def __init__(self, user_context: Any = None) -> None:
        self._retry_count = 0
        self._last_failure: Exception | None = None
        self.user_context = user_context

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(retry_count={self._retry_count}, "
            f"last_failure={self._last_failure!r})"
        )

    @property
    def retry_count(self) -> int:
        """Number of retries so far; 0 during the first attempt."""
        return self._retry_count

    @property
    def last_failure(self) -> Exception | None:
        """The failure of the previous attempt, or ``None`` on the first
        attempt."""
        return self._last_failure

    @property
    def is_retry(self) -> bool:
        return self._retry_count > 0

    def copy(self, retry_count: int | None = None) -> RetryContext:
        """Return a detached snapshot of this context.

        Args:
            retry_count: Optional retry count to use in the snapshot
                instead of the current one.

        Returns:
            A new context. Changes to it do not affect this one.
        """
        snapshot = RetryContext(user_context=self.user_context)
        snapshot._retry_count = self._retry_count if retry_count is None else retry_count
        snapshot._last_failure = self._last_failure
        return snapshot

    def record_failure(self, failure: Exception) -> None:
        """Store the failure of the attempt that just finished."""
        self._last_failure = failure

    def advance(self) -> None:
        """Move to the next retry."""
        self._retry_count += 1
