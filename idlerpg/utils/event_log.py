"""Thread-safe ring buffer of game events exposed via the API."""

from __future__ import annotations

import itertools
import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GameEvent:
    """One notable happening: a level-up, a drop, a quest turn-in."""

    seq: int
    category: str
    message: str


class EventLog:
    """Bounded event feed. Writers append; readers snapshot a slice.

    Sequence numbers are monotonic for the lifetime of the log so a client
    can poll with ``since(last_seen)``; old events fall off the front.
    """

    __slots__ = ("_buffer", "_lock", "_counter")

    def __init__(self, maxlen: int = 200) -> None:
        self._buffer: deque[GameEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._counter = itertools.count(1)

    def append(self, category: str, message: str) -> GameEvent:
        with self._lock:
            event = GameEvent(seq=next(self._counter), category=category, message=message)
            self._buffer.append(event)
        return event

    def since(self, seq: int) -> list[GameEvent]:
        """Return all events with a sequence number greater than *seq*."""
        with self._lock:
            return [e for e in self._buffer if e.seq > seq]

    def latest(self, count: int = 50) -> list[GameEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
