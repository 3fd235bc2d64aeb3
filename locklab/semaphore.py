"""Counting semaphores with multi-unit wait and signal.

Three flavours share one interface:

* ``BusyWaitSemaphore`` guards its counter with a :class:`~locklab.mutex.Mutex`
  and, while the counter is too small, keeps releasing and re-taking it.
* ``SuspendingSemaphore`` uses the same mutex, but a waiter sleeps on the
  counter word until a signal wakes every sleeper.
* ``ConditionSemaphore`` relies on a library lock and condition variable.

A semaphore built without a value is not ready for use until
:meth:`initialize` is called.
"""

from __future__ import annotations

import threading
import time

from .mutex import FutexWord, Mutex, MutexType, parse_mutex_type

_WAKE_ALL = 2**31 - 1


class SemaphoreError(RuntimeError):
    """Raised when a semaphore is used in a state that does not allow it."""


def _check_value(value: int) -> int:
    if value < 0:
        raise ValueError(f"semaphore value must be non-negative, got {value}")
    return value


def _check_amount(n: int) -> int:
    if n <= 0:
        raise ValueError(f"amount must be positive, got {n}")
    return n


class _MutexGuardedSemaphore:
    """Common logic for semaphores whose counter is protected by a Mutex."""

    def __init__(self, value: int | None = None) -> None:
        self._mutex = Mutex(MutexType.SPIN)
        self._initialized = False
        self._set_count(0)
        if value is not None:
            self._set_count(_check_value(value))
            self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def mutex_type(self) -> MutexType:
        return self._mutex.kind

    @property
    def value(self) -> int:
        """The current counter value."""
        with self._mutex:
            return self._get_count()

    def initialize(
        self, value: int, mutex_type: str | MutexType = MutexType.SPIN
    ) -> None:
        """Give the semaphore its first value and choose its locking strategy."""
        self._mutex.kind = parse_mutex_type(mutex_type)
        with self._mutex:
            if self._initialized:
                raise SemaphoreError("semaphore is already initialized")
            self._set_count(_check_value(value))
            self._initialized = True

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise SemaphoreError("semaphore is not initialized")

    def signal(self, n: int = 1) -> None:
        """Add ``n`` to the counter."""
        _check_amount(n)
        with self._mutex:
            self._require_initialized()
            self._set_count(self._get_count() + n)
            self._after_signal()

    def wait(self, n: int = 1) -> None:
        """Block until the counter is at least ``n``, then subtract ``n``."""
        _check_amount(n)
        with self._mutex:
            self._require_initialized()
            while (current := self._get_count()) < n:
                self._mutex.unlock()
                self._pause(current)
                self._mutex.lock()
            self._set_count(current - n)

    def _get_count(self) -> int:
        raise NotImplementedError

    def _set_count(self, value: int) -> None:
        raise NotImplementedError

    def _after_signal(self) -> None:
        """Hook run after the counter grows, with the mutex held."""

    def _pause(self, seen: int) -> None:
        """Hook run between releasing and re-taking the mutex while waiting."""


class BusyWaitSemaphore(_MutexGuardedSemaphore):
    """Semaphore whose waiters spin, releasing the mutex between checks."""

    def __init__(self, value: int | None = None) -> None:
        self._count = 0
        super().__init__(value)

    def initialize(
        self, value: int, mutex_type: str | MutexType = MutexType.SPIN
    ) -> None:
        super().initialize(value, mutex_type)

    def signal(self, n: int = 1) -> None:
        super().signal(n)

    def wait(self, n: int = 1) -> None:
        super().wait(n)

    def _get_count(self) -> int:
        return self._count

    def _set_count(self, value: int) -> None:
        self._count = value

    def _pause(self, seen: int) -> None:
        time.sleep(0)


class SuspendingSemaphore(_MutexGuardedSemaphore):
    """Semaphore whose waiters sleep on the counter until a signal wakes them."""

    def __init__(self, value: int | None = None) -> None:
        self._word = FutexWord(0)
        super().__init__(value)

    def initialize(
        self, value: int, mutex_type: str | MutexType = MutexType.SPIN
    ) -> None:
        super().initialize(value, mutex_type)

    def signal(self, n: int = 1) -> None:
        super().signal(n)

    def wait(self, n: int = 1) -> None:
        super().wait(n)

    def _get_count(self) -> int:
        return self._word.load()

    def _set_count(self, value: int) -> None:
        self._word.store(value)

    def _after_signal(self) -> None:
        self._word.wake(_WAKE_ALL)

    def _pause(self, seen: int) -> None:
        # Sleeps only if no signal changed the counter since it was read.
        self._word.wait(seen)


class ConditionSemaphore:
    """Semaphore built on a library lock and condition variable."""

    def __init__(self, value: int | None = None) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._count = 0
        self._initialized = False
        self.mutex_type: MutexType | None = None
        if value is not None:
            self._count = _check_value(value)
            self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def value(self) -> int:
        """The current counter value."""
        with self._cond:
            return self._count

    def initialize(
        self, value: int, mutex_type: str | MutexType = MutexType.SPIN
    ) -> None:
        """Give the semaphore its first value; the mutex type is only recorded."""
        kind = parse_mutex_type(mutex_type)
        with self._cond:
            if self._initialized:
                raise SemaphoreError("semaphore is already initialized")
            self._count = _check_value(value)
            self._initialized = True
            self.mutex_type = kind

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise SemaphoreError("semaphore is not initialized")

    def signal(self, n: int = 1) -> None:
        """Add ``n`` to the counter and wake every waiter."""
        _check_amount(n)
        with self._cond:
            self._require_initialized()
            self._count += n
            self._cond.notify_all()

    def wait(self, n: int = 1) -> None:
        """Block until the counter is at least ``n``, then subtract ``n``."""
        _check_amount(n)
        with self._cond:
            self._require_initialized()
            while self._count < n:
                self._cond.wait()
            self._count -= n