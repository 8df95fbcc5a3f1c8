"""Timer and frame scheduling with cancellation tokens.

The session and the animator never hold raw timer ids. Every delayed callback
is wrapped in a :class:`TaskHandle`; once a handle is cancelled (or has run)
its callback can no longer fire, so a reset or teardown cannot be undone by a
stale timer.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Tuple

LOGGER = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class TaskHandle:
    """Cancellation token for one scheduled callback."""

    def __init__(self, callback: Callable[..., None], label: str = "") -> None:
        self._callback = callback
        self._on_cancel: Optional[Callable[[], None]] = None
        self.label = label
        self.cancelled = False
        self.done = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.done)

    def set_canceller(self, canceller: Callable[[], None]) -> None:
        """Register the backend hook that withdraws the underlying timer."""
        self._on_cancel = canceller

    def cancel(self) -> None:
        if not self.active:
            return
        self.cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()
            self._on_cancel = None
        LOGGER.debug("Cancelled task %s", self.label or self._callback)

    def fire(self, *args: Any) -> None:
        if not self.active:
            return
        self.done = True
        self._callback(*args)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        state = "cancelled" if self.cancelled else "done" if self.done else "pending"
        return f"TaskHandle({self.label!r}, {state})"


class Scheduler(ABC):
    """Single-threaded source of timer and per-frame callbacks (times in ms)."""

    frame_interval_ms: float = 16.0

    @abstractmethod
    def now(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None], label: str = "") -> TaskHandle:
        raise NotImplementedError

    @abstractmethod
    def request_frame(self, callback: FrameCallback, label: str = "") -> TaskHandle:
        """Run ``callback(timestamp_ms)`` on the next rendered frame."""
        raise NotImplementedError


class VirtualScheduler(Scheduler):
    """Deterministic scheduler driven by an explicit virtual clock.

    Frames fall on multiples of ``frame_interval_ms``. ``advance`` runs every
    task due within the window in time order, including tasks scheduled by
    callbacks fired along the way. Passing ``sleeper`` (e.g. ``time.sleep``)
    paces the clock in real time.
    """

    def __init__(
        self,
        frame_interval_ms: float = 16.0,
        sleeper: Optional[Callable[[float], None]] = None,
    ) -> None:
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be positive")
        self.frame_interval_ms = float(frame_interval_ms)
        self.sleeper = sleeper
        self._now = 0.0
        self._seq = itertools.count()
        self._queue: List[Tuple[float, int, TaskHandle, bool]] = []

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if handle.active)

    def call_later(self, delay_ms: float, callback: Callable[[], None], label: str = "") -> TaskHandle:
        handle = TaskHandle(callback, label)
        due = self._now + max(0.0, float(delay_ms))
        heapq.heappush(self._queue, (due, next(self._seq), handle, False))
        return handle

    def request_frame(self, callback: FrameCallback, label: str = "") -> TaskHandle:
        handle = TaskHandle(callback, label)
        interval = self.frame_interval_ms
        due = (math.floor(self._now / interval) + 1) * interval
        heapq.heappush(self._queue, (due, next(self._seq), handle, True))
        return handle

    def advance(self, delta_ms: float) -> None:
        self._run_until(self._now + max(0.0, float(delta_ms)))

    def _run_until(self, target: float) -> None:
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, is_frame = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._sleep_until(due)
            self._now = due
            if is_frame:
                handle.fire(due)
            else:
                handle.fire()
        self._sleep_until(target)
        self._now = target

    def run_until_idle(self, limit_ms: float = 60_000.0) -> None:
        """Advance until no live task remains or ``limit_ms`` of virtual time passes."""

        deadline = self._now + limit_ms
        while True:
            while self._queue and not self._queue[0][2].active:
                heapq.heappop(self._queue)
            if not self._queue:
                return
            due = self._queue[0][0]
            if due > deadline:
                LOGGER.warning("Scheduler still busy after %.0f ms; stopping", limit_ms)
                return
            self._run_until(due)

    def _sleep_until(self, moment: float) -> None:
        if self.sleeper is None:
            return
        delay = moment - self._now
        if delay > 0:
            self.sleeper(delay / 1000.0)


__all__ = ["FrameCallback", "Scheduler", "TaskHandle", "VirtualScheduler"]
