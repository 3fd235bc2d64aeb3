"""Benchmark: several readers drain a shared bounded queue.

The queue is filled with ``0 .. size-1``; readers then remove items until it
is empty, optionally doing some trigonometric busy work between removals.
Each item must have been removed exactly once.
"""

from __future__ import annotations

import math
import random
import sys
import threading
import time
from dataclasses import dataclass, field
from typing import Sequence

from .concurrent_queue import ConcurrentBoundedQueue
from .mutex import MutexType, parse_mutex_type

_RAND_LIMIT = 2**31
_USAGE = "USAGE: ./main QUEUE_SIZE N_READERS mutex_type(s,b,d) max_rep"
_ISA_USAGE = "USAGE: ./main QUEUE_SIZE N_READERS max_rep"


def trig_func(value: float) -> float:
    """The busy-work function applied by the readers."""
    return math.sin(value * 786.12)


def _atoi(text: str) -> int:
    """Parse a leading optionally signed integer, giving 0 when there is none."""
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for ch in text:
        if not ch.isdigit():
            break
        digits += ch
    return sign * int(digits) if digits else 0


@dataclass
class QueueBenchResult:
    """Outcome of one benchmark run."""

    mutex_type: MutexType
    readers: int
    elapsed_ms: float
    queue_size: int
    max_rep: int
    counts: list[int] = field(default_factory=list)
    trig_sums: list[float] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every item was removed exactly once."""
        return all(count == 1 for count in self.counts)


class _SharedRandom:
    """A seeded random source shared by all readers."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return self._rng.randrange(_RAND_LIMIT)


def _reader(
    queue: ConcurrentBoundedQueue[int],
    not_empty: threading.Event,
    counts: list[int],
    max_rep: int,
    index: int,
    trig_sums: list[float],
    rng: _SharedRandom,
) -> None:
    result = 0.0
    while not_empty.is_set():
        if queue.take(counts) is None:
            not_empty.clear()
        if max_rep > 0:
            rand_int = rng.next()
            for i in range(rand_int % max_rep):
                result = trig_func(float(rand_int) if i == 0 else result)
            trig_sums[index] += result


def run_queue_bench(
    queue_size: int,
    readers: int,
    mutex_type: str | MutexType = MutexType.SPIN,
    max_rep: int = 0,
    seed: int = 5,
) -> QueueBenchResult:
    """Fill a queue, let ``readers`` threads drain it, and report the outcome."""
    kind = parse_mutex_type(mutex_type)
    queue: ConcurrentBoundedQueue[int] = ConcurrentBoundedQueue(queue_size, kind)
    filler = threading.Thread(
        target=lambda: [queue.enqueue(i) for i in range(queue_size)]
    )
    filler.start()
    filler.join()

    counts = [0] * queue_size
    trig_sums = [0.0] * max(readers, 0)
    not_empty = threading.Event()
    not_empty.set()
    rng = _SharedRandom(seed)

    start = time.perf_counter()
    threads = [
        threading.Thread(
            target=_reader,
            args=(queue, not_empty, counts, max_rep, index, trig_sums, rng),
        )
        for index in range(readers)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    return QueueBenchResult(
        mutex_type=kind,
        readers=readers,
        elapsed_ms=elapsed_ms,
        queue_size=queue_size,
        max_rep=max_rep,
        counts=counts,
        trig_sums=trig_sums,
    )


def format_result(result: QueueBenchResult, show_type: bool = True) -> str:
    """Format the summary line, marked with ``ERROR`` when the run failed."""
    fields = [
        str(result.readers),
        f"{result.elapsed_ms:f}",
        str(result.queue_size),
        str(result.max_rep),
    ]
    if show_type:
        fields.insert(0, result.mutex_type.value)
    line = "\t".join(fields)
    return line if result.ok else line + " ERROR"


def _report(result: QueueBenchResult, show_type: bool) -> None:
    line = format_result(result, show_type)
    if result.ok:
        print(line, file=sys.stdout)
        print("".join(f"{value:f}\t" for value in result.trig_sums), file=sys.stderr)
    else:
        print(line, file=sys.stderr)


def _run(
    queue_size: int, readers: int, kind: MutexType, max_rep: int, usage: str,
    show_type: bool,
) -> int:
    try:
        result = run_queue_bench(queue_size, readers, kind, max_rep)
    except ValueError as err:
        print(f"{usage}\n{err}", file=sys.stderr)
        return 1
    _report(result, show_type)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Command line: QUEUE_SIZE N_READERS mutex_type(s,b,d) max_rep."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 4 or args[2][:1] not in ("s", "b", "d"):
        print(_USAGE, file=sys.stderr)
        return 1
    kind = parse_mutex_type(args[2])
    return _run(_atoi(args[0]), _atoi(args[1]), kind, _atoi(args[3]), _USAGE, True)


def isa_main(argv: Sequence[str] | None = None) -> int:
    """Command line: QUEUE_SIZE N_READERS max_rep, with the spin lock."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 3:
        print(_ISA_USAGE, file=sys.stderr)
        return 1
    return _run(
        _atoi(args[0]), _atoi(args[1]), MutexType.SPIN, _atoi(args[2]),
        _ISA_USAGE, False,
    )


if __name__ == "__main__":
    sys.exit(main())