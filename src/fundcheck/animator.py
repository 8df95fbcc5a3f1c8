"""Count-up animation for the result view."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .formatting import format_amount, format_rate, parse_amount, parse_rate
from .models import AnimationState, Phase, ResultRecord
from .scheduling import Scheduler, TaskHandle

LOGGER = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 1500.0

FrameListener = Callable[[str, str], None]


def ease_out_expo(progress: float) -> float:
    """Exponential ease-out: fast start, long soft landing on exactly 1."""

    if progress <= 0:
        return 0.0
    if progress >= 1:
        return 1.0
    return 1 - 2 ** (-10 * progress)


class DisplayAnimator:
    """Interpolate the displayed amount and rate from zero to the result.

    Runs are tied to phase changes: entering the result phase starts one, and
    leaving it cancels the run and zeroes the displayed values. A new record
    arriving while the phase stays on ``RESULT`` does not restart the run.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        state: Optional[AnimationState] = None,
        duration_ms: float = DEFAULT_DURATION_MS,
        detailed_amounts: bool = False,
        on_frame: Optional[FrameListener] = None,
    ) -> None:
        self.scheduler = scheduler
        self.state = state if state is not None else AnimationState()
        self.duration_ms = float(duration_ms)
        self.detailed_amounts = detailed_amounts
        self.on_frame = on_frame
        self.target_amount = 0.0
        self.target_rate = 0.0
        self.frames_rendered = 0
        self._last_phase: Optional[Phase] = None
        self._started_at: Optional[float] = None
        self._frame: Optional[TaskHandle] = None

    @property
    def running(self) -> bool:
        return self._frame is not None and self._frame.active

    def sync(self, phase: Phase, record: Optional[ResultRecord]) -> None:
        if phase == self._last_phase:
            return
        self._last_phase = phase
        if phase != Phase.RESULT or record is None:
            self.cancel()
            return
        self.start(record)

    def start(self, record: ResultRecord) -> None:
        self.cancel()
        self.target_amount = parse_amount(record.amount)
        self.target_rate = parse_rate(record.interest_rate)
        self.frames_rendered = 0
        self._started_at = None
        LOGGER.debug(
            "Animating to %.1f man-won at %.2f%% over %.0f ms",
            self.target_amount,
            self.target_rate,
            self.duration_ms,
        )
        self._frame = self.scheduler.request_frame(self._step, label="animation-frame")

    def cancel(self) -> None:
        if self._frame is not None:
            self._frame.cancel()
            self._frame = None
        self._started_at = None
        self.state.reset()

    def display_amount(self) -> str:
        return format_amount(self.state.animated_amount, detailed=self.detailed_amounts)

    def display_rate(self) -> str:
        return format_rate(self.state.animated_rate)

    def _step(self, timestamp: float) -> None:
        if self._started_at is None:
            self._started_at = timestamp
        if self.duration_ms <= 0:
            progress = 1.0
        else:
            progress = min(max((timestamp - self._started_at) / self.duration_ms, 0.0), 1.0)
        eased = ease_out_expo(progress)

        self.state.animated_amount = self.target_amount * eased
        self.state.animated_rate = self.target_rate * eased
        self.frames_rendered += 1
        if self.on_frame is not None:
            self.on_frame(self.display_amount(), self.display_rate())

        if progress < 1:
            self._frame = self.scheduler.request_frame(self._step, label="animation-frame")
        else:
            self._frame = None
            LOGGER.debug("Animation finished after %d frames", self.frames_rendered)


__all__ = ["DEFAULT_DURATION_MS", "DisplayAnimator", "ease_out_expo"]
