"""Lock-guarded FIFO shared between a producer thread and the processing loop."""

from __future__ import annotations

import threading
from collections import deque
from typing import Generic, TypeVar

from .types import ChatEvent

T = TypeVar("T")


class ConcurrentQueue(Generic[T]):
    """Unbounded FIFO; every operation holds a single lock.

    `push` and `try_pop` are O(1) under the lock, `pop_all` copies the
    pending items out in O(n). Items are delivered once, in arrival order.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: deque[T] = deque()

    def push(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def try_pop(self) -> T | None:
        """Remove and return the oldest item, or None when empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def pop_all(self) -> list[T]:
        """Remove and return every queued item in arrival order."""
        with self._lock:
            items = list(self._items)
            self._items.clear()
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __bool__(self) -> bool:
        return len(self) > 0


MessageQueue = ConcurrentQueue[ChatEvent]
LocalInputBuffer = ConcurrentQueue[str]
