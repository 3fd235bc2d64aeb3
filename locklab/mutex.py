"""Mutual exclusion locks built on an emulated futex word.

Three strategies are provided: a pure spin lock, a basic lock that sleeps
on the word while it is taken, and the three-state lock described by
Drepper in which 0 is free, 1 is taken and 2 is taken with waiters.
"""

from __future__ import annotations

import enum
import threading
import time
from types import TracebackType


class MutexType(enum.Enum):
    """Locking strategy, named by the character used on the command line."""

    SPIN = "s"
    BASIC = "b"
    DREPPER = "d"


def parse_mutex_type(text: str | MutexType) -> MutexType:
    """Return the mutex type named by the first character of ``text``."""
    if isinstance(text, MutexType):
        return text
    if not text:
        raise ValueError("empty mutex type")
    try:
        return MutexType(text[0])
    except ValueError:
        raise ValueError(
            f"unknown mutex type {text!r}: expected one of s, b, d"
        ) from None


class FutexWord:
    """An integer with atomic operations and futex-style wait and wake."""

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._cond = threading.Condition(threading.Lock())
        self._waiters = 0

    def load(self) -> int:
        with self._cond:
            return self._value

    def store(self, value: int) -> None:
        with self._cond:
            self._value = value

    def test_and_set(self) -> bool:
        """Set the word to 1 and tell whether it was already set."""
        with self._cond:
            was_set = self._value != 0
            self._value = 1
            return was_set

    def compare_exchange(self, expected: int, desired: int) -> int:
        """Store ``desired`` if the word equals ``expected``; return the old value."""
        with self._cond:
            old = self._value
            if old == expected:
                self._value = desired
            return old

    def exchange(self, value: int) -> int:
        """Store ``value`` and return the previous value."""
        with self._cond:
            old = self._value
            self._value = value
            return old

    def fetch_sub(self, amount: int) -> int:
        """Subtract ``amount`` and return the previous value."""
        with self._cond:
            old = self._value
            self._value = old - amount
            return old

    def wait(self, expected: int) -> bool:
        """Sleep until woken if the word still equals ``expected``.

        Returns False at once when the value differs, True after a wake.
        """
        with self._cond:
            if self._value != expected:
                return False
            self._waiters += 1
            self._cond.wait()
            return True

    def wake(self, count: int) -> int:
        """Wake up to ``count`` sleepers and return how many were woken."""
        with self._cond:
            woken = min(count, self._waiters)
            self._waiters -= woken
            if woken:
                self._cond.notify(woken)
            return woken


class Mutex:
    """A lock whose acquire and release follow the chosen strategy."""

    def __init__(self, kind: str | MutexType = MutexType.SPIN) -> None:
        self.kind = parse_mutex_type(kind)
        self.word = FutexWord(0)

    def lock(self) -> None:
        if self.kind is MutexType.SPIN:
            while self.word.test_and_set():
                time.sleep(0)
        elif self.kind is MutexType.BASIC:
            while self.word.test_and_set():
                self.word.wait(1)
        else:
            self._drepper_lock()

    def _drepper_lock(self) -> None:
        c = self.word.compare_exchange(0, 1)
        if c == 0:
            return
        if c != 2:
            c = self.word.exchange(2)
        while c != 0:
            self.word.wait(2)
            c = self.word.exchange(2)

    def unlock(self) -> None:
        if self.kind is MutexType.SPIN:
            self.word.store(0)
        elif self.kind is MutexType.BASIC:
            self.word.store(0)
            self.word.wake(1)
        elif self.word.fetch_sub(1) != 1:
            self.word.store(0)
            self.word.wake(1)

    def __enter__(self) -> Mutex:
        self.lock()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unlock()