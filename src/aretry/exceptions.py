r"""Exceptions raised by retry sequences.

Failures raised by the work function itself are never wrapped: when a
sequence gives up, its future fails with the last failure. The classes
below cover the two cases that do not come from the policy.
"""

from __future__ import annotations

__all__ = ["AbortRetryError", "SchedulerError"]


class AbortRetryError(Exception):
    """Exception raised by a work function to stop retrying at once.

    The sequence fails with this exception after the current attempt,
    whatever the retry policy says.

    Example:
        ```pycon
        >>> from aretry.exceptions import AbortRetryError
        >>> raise AbortRetryError("resource was deleted")
        Traceback (most recent call last):
            ...
        aretry.exceptions.AbortRetryError: resource was deleted

        ```
    """


class SchedulerError(RuntimeError):
    """Exception raised when the scheduler refuses to register an
    attempt.

    The original scheduler error is chained as ``__cause__``.

    Args:
        message: A descriptive error message.
        retry_count: The retry count of the sequence when the
            registration failed.

    Example:
        ```pycon
        >>> from aretry.exceptions import SchedulerError
        >>> error = SchedulerError("scheduler is shut down", retry_count=2)
        >>> error.retry_count
        2

        ```
    """

    def __init__(self, message: str, retry_count: int = 0) -> None:
        super().__init__(message)
        self.retry_count = retry_count
