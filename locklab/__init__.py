"""Mutexes, semaphores, an ordered event log and bounded queues, with benchmarks of lock design under contention."""

__version__ = "0.1.0"