"""A first-in first-out queue holding at most a fixed number of items."""

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, Iterator, TypeVar

T = TypeVar("T")


class BoundedQueue(Generic[T]):
    """FIFO queue with a fixed capacity; the oldest item is at the front."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._items: Deque[T] = deque()

    @property
    def capacity(self) -> int:
        """The maximum number of items the queue can hold."""
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self._capacity

    def clear(self) -> None:
        """Remove every item."""
        self._items.clear()

    def enqueue(self, item: T) -> None:
        """Append ``item`` at the back; raises OverflowError when full."""
        if self.is_full:
            raise OverflowError(f"queue is full (capacity {self._capacity})")
        self._items.append(item)

    def dequeue(self) -> T:
        """Remove and return the front item; raises IndexError when empty."""
        if not self._items:
            raise IndexError("dequeue from an empty queue")
        return self._items.popleft()

    def first(self) -> T:
        """Return the front item without removing it; raises IndexError when empty."""
        if not self._items:
            raise IndexError("first of an empty queue")
        return self._items[0]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __str__(self) -> str:
        return ",".join(str(item) for item in self._items)

    def __repr__(self) -> str:
        return f"BoundedQueue(capacity={self._capacity}, items=[{self}])"

    def clone_into(self, other: BoundedQueue[T]) -> None:
        """Make ``other`` hold the same items as this queue.

        Both queues must have the same capacity.
        """
        if other.capacity != self._capacity:
            raise ValueError(
                f"capacity mismatch: {self._capacity} != {other.capacity}"
            )
        other._items = deque(self._items)