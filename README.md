# locklab

Building blocks and two small benchmarks for seeing how the design of a lock
changes the behaviour of a multi-threaded program. Three mutex strategies are
provided, selected by a single letter:

- **spin** (`s`): busy-waits on a test-and-set flag, yielding between tries.
- **basic** (`b`): test-and-set, but sleeps on a futex-style wait while the
  lock is taken; unlocking wakes one waiter.
- **drepper** (`d`): the three-state mutex (0 free, 1 locked, 2 locked with
  waiters) that only issues a wake when someone may be waiting.

## What is inside

| Module | Contents |
| --- | --- |
| `locklab.bounded_queue` | `BoundedQueue`, a fixed-capacity FIFO queue |
| `locklab.mutex` | `MutexType`, `FutexWord`, `Mutex`, `parse_mutex_type` |
| `locklab.semaphore` | `BusyWaitSemaphore`, `SuspendingSemaphore`, `ConditionSemaphore`, `SemaphoreError` |
| `locklab.logger` | `Logger`, a buffered event log that serves writers strictly in ticket (arrival) order |
| `locklab.concurrent_queue` | `ConcurrentBoundedQueue`, a bounded queue whose removals go through a busy-wait semaphore |
| `locklab.queue_bench` | the queue-draining benchmark: `run_queue_bench`, `format_result`, `QueueBenchResult`, `trig_func` |
| `locklab.counter_bench` | the shared-counter benchmark: `run_counter_bench`, `write_partial_results`, `CounterBenchResult` |

A `Mutex` is a context manager:

```python
from locklab.mutex import Mutex

lock = Mutex("d")
with lock:
    ...  # critical section
```

Semaphores support multi-unit `wait(n)` and `signal(n)`. One built without a
value must be given one with `initialize(value, mutex_type)` before use;
using it earlier, or initializing it twice, raises `SemaphoreError`.

```python
from locklab.semaphore import BusyWaitSemaphore

sem = BusyWaitSemaphore()
sem.initialize(1, "b")
sem.wait()
sem.signal()
```

`Logger(path, echo=None)` truncates `path` and writes the header
`threadID,sectionID,event,val,ts,ticket`. Each `add_message` call splits its
text on `;` into events, buffers one line per event and returns its ticket;
the buffer is written to the file when it holds 4096 lines, on `save()` and
on `close()` (also on leaving a `with` block). If `echo` is a text stream,
every line is also written to it.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Commands

### Draining a shared queue

```
locklab-queue QUEUE_SIZE N_READERS MUTEX_TYPE MAX_REP
```

A queue is filled with the integers `0 .. QUEUE_SIZE-1`, then `N_READERS`
threads drain it concurrently, the queue's semaphore built on a mutex of type
`MUTEX_TYPE` (`s`, `b` or `d`). After each attempt to take an item, a reader
does a random amount (below `MAX_REP`) of trigonometric busy work; `0`
disables it. Every item must be taken exactly once. On success one
tab-separated line, `type readers milliseconds queue_size max_rep`, goes to
standard output and the per-reader work totals go to standard error; on
failure the same line ending in `ERROR` goes to standard error. Wrong
arguments print the usage to standard error and exit with status 1.

```
locklab-queue-isa QUEUE_SIZE N_READERS MAX_REP
```

The same benchmark with the spin mutex and no type column in the output.

### Incrementing a shared counter

```
locklab-counter MUTEX_TYPE THREADS MAX_SUM MAX_REP
```

`THREADS` threads (1 to 240) take turns under a mutex of type `MUTEX_TYPE`
(`spin`, `basic` or `drepper`; only the first letter counts) to increment a
shared counter until it reaches `MAX_SUM`. `MAX_REP` (0 or more) controls the
random busy work done outside the lock. On success the line
`type threads milliseconds` is printed and the per-thread work totals are
written to `temp_results.txt` in the current directory; if the counter ends
anywhere other than `MAX_SUM`, `ERROR` is written to standard error. Wrong
arguments print the usage to standard output and exit with status 1.

Both benchmarks use a fixed random seed (5), shared by all threads.

## Limits

- The futex word is emulated in-process with a lock and a condition
  variable; no kernel futexes or hardware atomics are used, so timings show
  the relative behaviour of the strategies under Python threads rather than
  native lock costs.
- The benchmark commands do not write an event log; `Logger` is available
  for use through `ConcurrentBoundedQueue(..., logger=...)` from code only.