"""Cross-thread hand-off queues between the connection worker and its host."""

from __future__ import annotations

from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class SpscQueue(Generic[T]):
    """Unbounded FIFO for exactly one producer thread and one consumer thread.

    ``deque.append`` and ``deque.popleft`` are atomic, so the producer never
    blocks and the consumer gets ``None`` instead of waiting on an empty queue.
    Items must not be ``None``.
    """

    def __init__(self) -> None:
        self._items: deque[T] = deque()

    def enqueue(self, item: T) -> None:
        if item is None:
            raise ValueError("SpscQueue items must not be None")
        self._items.append(item)

    def dequeue(self) -> T | None:
        try:
            return self._items.popleft()
        except IndexError:
            return None

    def drain(self) -> list[T]:
        """Dequeue everything available right now, oldest first."""
        drained: list[T] = []
        while (item := self.dequeue()) is not None:
            drained.append(item)
        return drained

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)
