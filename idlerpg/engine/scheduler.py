"""Cancellable timers for combat ticks.

Two implementations share one interface:

  - ThreadScheduler: real time, one daemon thread per timer.
  - ManualScheduler: a virtual clock advanced explicitly by tests and the
    headless CLI.

A repeating timer never schedules its next run until the current callback
has returned, and a cancelled handle never fires again.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """Returned by every ``call_*``; ``cancel()`` is idempotent."""

    __slots__ = ("_cancelled", "name")

    def __init__(self, name: str = "") -> None:
        self._cancelled = threading.Event()
        self.name = name

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()


class Scheduler(Protocol):
    def call_later(self, delay_ms: float, callback: Callback, name: str = "") -> TimerHandle: ...

    def call_every(self, interval_ms: float, callback: Callback, name: str = "") -> TimerHandle: ...

    def shutdown(self) -> None: ...


# ---------------------------------------------------------------------------
# Real-time scheduler
# ---------------------------------------------------------------------------

class ThreadScheduler:
    """Runs each timer on its own daemon thread.

    Waiting is done on the handle's cancel event, so ``cancel()`` wakes the
    thread immediately instead of letting it sleep out the interval.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handles: set[TimerHandle] = set()
        self._closed = False

    def call_later(self, delay_ms: float, callback: Callback, name: str = "") -> TimerHandle:
        return self._spawn(delay_ms, callback, name, repeat=False)

    def call_every(self, interval_ms: float, callback: Callback, name: str = "") -> TimerHandle:
        return self._spawn(interval_ms, callback, name, repeat=True)

    def shutdown(self) -> None:
        with self._lock:
            self._closed = True
            handles = list(self._handles)
            self._handles.clear()
        for handle in handles:
            handle.cancel()
        logger.info("Scheduler shut down (%d timers cancelled)", len(handles))

    def _spawn(self, delay_ms: float, callback: Callback, name: str, repeat: bool) -> TimerHandle:
        handle = TimerHandle(name)
        with self._lock:
            if self._closed:
                handle.cancel()
                return handle
            self._handles.add(handle)
        thread = threading.Thread(
            target=self._run,
            args=(handle, max(delay_ms, 0.0) / 1000.0, callback, repeat),
            name=f"timer-{name or 'anon'}",
            daemon=True,
        )
        thread.start()
        return handle

    def _run(self, handle: TimerHandle, delay_s: float, callback: Callback, repeat: bool) -> None:
        try:
            while not handle._cancelled.wait(delay_s):
                try:
                    callback()
                except Exception:
                    logger.exception("Timer %s callback failed; timer cancelled", handle.name or "anon")
                    handle.cancel()
                    break
                if not repeat:
                    break
        finally:
            with self._lock:
                self._handles.discard(handle)


# ---------------------------------------------------------------------------
# Virtual-clock scheduler
# ---------------------------------------------------------------------------

@dataclass(order=True, slots=True)
class _Entry:
    due_ms: float
    seq: int
    interval_ms: float = field(compare=False)
    callback: Callback = field(compare=False)
    handle: TimerHandle = field(compare=False)
    repeat: bool = field(compare=False, default=False)


class ManualScheduler:
    """Deterministic scheduler; time only moves when ``advance`` is called."""

    def __init__(self) -> None:
        self._now_ms = 0.0
        self._queue: list[_Entry] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> float:
        return self._now_ms

    @property
    def pending(self) -> int:
        """Timers still armed."""
        return sum(1 for e in self._queue if not e.handle.cancelled)

    def call_later(self, delay_ms: float, callback: Callback, name: str = "") -> TimerHandle:
        return self._push(delay_ms, callback, name, repeat=False)

    def call_every(self, interval_ms: float, callback: Callback, name: str = "") -> TimerHandle:
        return self._push(interval_ms, callback, name, repeat=True)

    def shutdown(self) -> None:
        for entry in self._queue:
            entry.handle.cancel()
        self._queue.clear()

    def advance(self, ms: float) -> int:
        """Move the clock forward by *ms*, firing every timer that falls due.

        Returns the number of callbacks run.
        """
        target = self._now_ms + max(ms, 0.0)
        fired = 0
        while self._queue and self._queue[0].due_ms <= target:
            entry = heapq.heappop(self._queue)
            if entry.handle.cancelled:
                continue
            self._now_ms = entry.due_ms
            entry.callback()
            fired += 1
            if entry.repeat and not entry.handle.cancelled:
                entry.due_ms = self._now_ms + entry.interval_ms
                entry.seq = next(self._seq)
                heapq.heappush(self._queue, entry)
        self._now_ms = target
        return fired

    def run_next(self) -> bool:
        """Jump straight to the next armed timer and fire it."""
        while self._queue:
            head = self._queue[0]
            if head.handle.cancelled:
                heapq.heappop(self._queue)
                continue
            self.advance(head.due_ms - self._now_ms)
            return True
        return False

    def _push(self, delay_ms: float, callback: Callback, name: str, repeat: bool) -> TimerHandle:
        handle = TimerHandle(name)
        delay = max(delay_ms, 0.0)
        heapq.heappush(
            self._queue,
            _Entry(self._now_ms + delay, next(self._seq), delay, callback, handle, repeat),
        )
        return handle
