r"""Schedulers that run retry attempts after a delay.

A retry sequence never sleeps: every attempt, the first one included,
is registered with a scheduler and run when its delay expires. Any
object implementing ``BaseScheduler`` can be used; two implementations
are provided, one backed by a thread pool and one by an ``asyncio``
event loop.
"""

from __future__ import annotations

__all__ = ["BaseScheduler", "EventLoopScheduler", "ScheduledHandle", "ThreadPoolScheduler"]

from aretry.scheduler.base import BaseScheduler, ScheduledHandle
from aretry.scheduler.loop import EventLoopScheduler
from aretry.scheduler.thread import ThreadPoolScheduler
