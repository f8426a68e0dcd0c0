"""Admission gate internals."""

from async_limiter.core.deferred import Deferred
from async_limiter.core.idle import IdleSynchronizer
from async_limiter.core.limiter import Limiter, Task
from async_limiter.core.wait_queue import QueueEntry, WaitQueue

__all__ = ["Deferred", "IdleSynchronizer", "Limiter", "QueueEntry", "Task", "WaitQueue"]
