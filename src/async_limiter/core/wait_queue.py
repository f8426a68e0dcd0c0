"""FIFO wait queue with tombstone-skipping pops."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from contextlib import suppress
from dataclasses import dataclass, field

from async_limiter.core.deferred import Deferred

Cleanup = Callable[[], None]


@dataclass(slots=True, eq=False)
class QueueEntry:
    """One queued submission waiting for a slot."""

    deferred: Deferred
    removed: bool = False
    cleanup: list[Cleanup] = field(default_factory=list)

    def add_cleanup(self, action: Cleanup) -> None:
        self.cleanup.append(action)

    def remove(self) -> bool:
        """Mark the entry removed and run its cleanup actions once."""

        if self.removed:
            return False
        self.removed = True
        actions, self.cleanup = self.cleanup, []
        for action in actions:
            action()
        return True


class WaitQueue:
    """Arrival-ordered queue of ``QueueEntry`` objects.

    Head pops skip entries already marked removed. Out-of-order removal through
    ``discard`` splices the entry out right away so abandoned waits do not pile
    up behind a long-running head.
    """

    def __init__(self) -> None:
        self._entries: deque[QueueEntry] = deque()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[QueueEntry]:
        return iter(self._entries)

    def append(self, entry: QueueEntry) -> None:
        self._entries.append(entry)

    def pop_next(self) -> QueueEntry | None:
        """Pop the oldest entry that is not removed, or ``None``."""

        while self._entries:
            entry = self._entries.popleft()
            if entry.removed:
                continue
            return entry
        return None

    def discard(self, entry: QueueEntry) -> bool:
        """Remove ``entry`` wherever it sits; a second call is a no-op."""

        if not entry.remove():
            return False
        with suppress(ValueError):
            self._entries.remove(entry)
        return True


__all__ = ["Cleanup", "QueueEntry", "WaitQueue"]
