"""A buffered event log whose writers are served strictly in arrival order.

Every call to :meth:`Logger.add_message` draws a ticket.  The calls then
enter the logger one at a time in ticket order, so events reach the log in
the order in which they arrived.  Events are kept in memory and written to
the log file when the buffer fills, on :meth:`Logger.save` and on
:meth:`Logger.close`.
"""

from __future__ import annotations

import itertools
import threading
import time
from pathlib import Path
from types import TracebackType
from typing import IO

HEADER = "threadID,sectionID,event,val,ts,ticket"
MAX_MESSAGES = 4096
EVENT_SEPARATOR = ";"
FIELD_SEPARATOR = ","


def _split_events(message: str) -> list[str]:
    """Split on the event separator; a trailing empty piece is not an event."""
    parts = message.split(EVENT_SEPARATOR)
    if parts[-1] == "":
        parts.pop()
    return parts


class Logger:
    """Thread-safe, FIFO-ordered, buffered writer of event lines."""

    def __init__(self, path: str | Path, echo: IO[str] | None = None) -> None:
        self.path = Path(path)
        self.echo = echo
        self.main_id = str(threading.get_ident())
        self._buffer: list[str] = []
        self._cond = threading.Condition(threading.Lock())
        self._ticket_lock = threading.Lock()
        self._tickets = itertools.count(1)
        self._next = 1
        self._create_log_file()

    @property
    def pending(self) -> int:
        """Number of event lines held in memory, not yet written."""
        with self._cond:
            return len(self._buffer)

    def _create_log_file(self) -> None:
        with self.path.open("w", encoding="utf-8") as log_file:
            log_file.write(HEADER + "\n")

    def _draw_ticket(self) -> int:
        with self._ticket_lock:
            return next(self._tickets)

    def add_message(self, message: str) -> int:
        """Record the ``;``-separated events of ``message``; return its ticket."""
        ticket = self._draw_ticket()
        timestamp = time.time_ns()
        with self._cond:
            self._cond.wait_for(lambda: self._next == ticket)
            try:
                prefix = f"id_{self.main_id}"
                for event in _split_events(message):
                    if len(self._buffer) >= MAX_MESSAGES:
                        self._flush()
                    line = FIELD_SEPARATOR.join(
                        (prefix, event, str(timestamp), str(ticket))
                    )
                    self._buffer.append(line)
                    if self.echo is not None:
                        self.echo.write(line + "\n")
            finally:
                self._next += 1
                self._cond.notify_all()
        return ticket

    def _flush(self) -> None:
        if not self._buffer:
            return
        with self.path.open("a", encoding="utf-8") as log_file:
            log_file.writelines(line + "\n" for line in self._buffer)
        self._buffer.clear()

    def save(self) -> None:
        """Append the buffered events to the log file and empty the buffer."""
        with self._cond:
            self._flush()

    def close(self) -> None:
        """Write any pending events."""
        self.save()

    def __enter__(self) -> Logger:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()