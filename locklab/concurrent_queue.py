"""A bounded queue shared by several threads, guarded by a busy-wait semaphore."""

from __future__ import annotations

from typing import Generic, MutableSequence, TypeVar

from .bounded_queue import BoundedQueue
from .logger import Logger
from .mutex import MutexType
from .semaphore import BusyWaitSemaphore

T = TypeVar("T")


class ConcurrentBoundedQueue(Generic[T]):
    """Bounded FIFO queue whose removals are mutually exclusive.

    Filling is expected to happen before readers start, so ``enqueue`` takes
    no lock; ``take`` and ``len`` go through a semaphore used as a mutex.
    """

    def __init__(
        self,
        capacity: int,
        mutex_type: str | MutexType = MutexType.SPIN,
        logger: Logger | None = None,
    ) -> None:
        self.capacity = capacity
        self._queue: BoundedQueue[T] = BoundedQueue(capacity)
        self._mutex = BusyWaitSemaphore()
        self._mutex.initialize(1, mutex_type)
        self.logger = logger

    @property
    def mutex_type(self) -> MutexType:
        return self._mutex.mutex_type

    def _log(self, message: str) -> None:
        if self.logger is not None:
            self.logger.add_message(message)

    def enqueue(self, item: T) -> None:
        """Append ``item``; raises OverflowError when the queue is full."""
        self._queue.enqueue(item)

    def take(self, counts: MutableSequence[int] | None = None) -> T | None:
        """Remove and return the front item, or return None when the queue is empty.

        When ``counts`` is given, ``counts[item]`` is incremented for the
        removed item, inside the critical section.
        """
        self._mutex.wait()
        try:
            self._log(f"firstR,BEGIN_FUNC_PROC,{len(self._queue)}")
            if not len(self._queue):
                return None
            item = self._queue.dequeue()
            if counts is not None:
                counts[item] += 1
            self._log(f"firstR,END_FUNC_PROC,{len(self._queue)}")
            return item
        finally:
            self._mutex.signal()

    def __len__(self) -> int:
        self._mutex.wait()
        try:
            return len(self._queue)
        finally:
            self._mutex.signal()