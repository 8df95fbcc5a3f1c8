"""Phase controller for one self-check session.

The session owns a :class:`~fundcheck.models.SessionState` and is the only
thing that mutates it. Flow::

    start -> form -> loading -> result -> (reset) -> start

While loading, a progress counter climbs by random increments on a fixed
tick. The estimate is produced exactly once, either when the counter reaches
100 or when the hard deadline expires, whichever happens first. After a short
grace delay the result view is shown and the count-up animation starts.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Callable, Optional

from .animator import DisplayAnimator, FrameListener
from .choices import require_choice
from .config import Config
from .estimator import Estimator
from .models import FormSelection, Phase, SessionState
from .scheduling import Scheduler, TaskHandle

LOGGER = logging.getLogger(__name__)

INCOMPLETE_SELECTION_NOTICE = "모든 항목을 선택해주세요."

StateListener = Callable[[SessionState], None]
NoticeListener = Callable[[str], None]


class InvalidTransition(RuntimeError):
    """Raised when an action is requested from a phase that does not allow it."""


class FundCheckSession:
    """Drive the start/form/loading/result flow for a single visitor."""

    def __init__(
        self,
        estimator: Estimator,
        scheduler: Scheduler,
        config: Optional[Config] = None,
        rng: Optional[random.Random] = None,
        on_change: Optional[StateListener] = None,
        on_notice: Optional[NoticeListener] = None,
        on_frame: Optional[FrameListener] = None,
    ) -> None:
        self.config = config or Config()
        self.estimator = estimator
        self.scheduler = scheduler
        self.rng = rng or random.Random(self.config.seed)
        self.on_change = on_change
        self.on_notice = on_notice
        self.state = SessionState()
        self.animator = DisplayAnimator(
            scheduler,
            self.state.animation,
            duration_ms=self.config.animation_ms,
            detailed_amounts=self.config.detailed_amounts,
            on_frame=on_frame,
        )
        self.estimate_calls = 0
        self._submitted: Optional[FormSelection] = None
        self._progress_task: Optional[TaskHandle] = None
        self._deadline_task: Optional[TaskHandle] = None
        self._grace_task: Optional[TaskHandle] = None
        self._closed = False
        self.animator.sync(self.state.phase, None)

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------ Actions --
    def start(self) -> None:
        self._require(Phase.START, "start")
        self.state.notice = None
        self._set_phase(Phase.FORM)

    def select(self, field: str, value: str) -> None:
        self._require(Phase.FORM, "select")
        name = require_choice(field, value)
        setattr(self.state.selection, field, name)
        self.state.notice = None
        LOGGER.debug("Selected %s=%s", field, name)
        self._emit()

    def submit(self) -> bool:
        """Move to the loading view, or surface a notice if inputs are missing."""

        self._require(Phase.FORM, "submit")
        missing = self.state.selection.missing_fields()
        if missing:
            self.state.notice = INCOMPLETE_SELECTION_NOTICE
            LOGGER.info("Submission blocked; missing %s", ", ".join(missing))
            if self.on_notice is not None:
                self.on_notice(INCOMPLETE_SELECTION_NOTICE)
            self._emit()
            return False

        self._submitted = replace(self.state.selection)
        self.state.notice = None
        self.state.progress = 0.0
        self.state.result = None
        self._set_phase(Phase.LOADING)
        self._progress_task = self.scheduler.call_later(
            self.config.tick_ms, self._tick, label="progress-tick"
        )
        self._deadline_task = self.scheduler.call_later(
            self.config.hard_timeout_ms, self._deadline, label="hard-deadline"
        )
        return True

    def reset(self) -> None:
        """Return to the start view from any phase, dropping all session data."""

        if self._closed:
            raise InvalidTransition("Session is closed")
        self._cancel_pending()
        self._submitted = None
        self.state.selection = FormSelection()
        self.state.progress = 0.0
        self.state.result = None
        self.state.notice = None
        self.animator.cancel()
        self._set_phase(Phase.START)

    def close(self) -> None:
        """Tear the session down; no scheduled callback will touch it afterwards."""

        if self._closed:
            return
        self._cancel_pending()
        self.animator.cancel()
        self._closed = True
        LOGGER.debug("Session closed")

    # ----------------------------------------------------------- Loading --
    def _tick(self) -> None:
        self._progress_task = None
        if self._closed or self.state.phase != Phase.LOADING or self.state.result is not None:
            return
        step = self.rng.random() * self.config.step_max
        self.state.progress = min(100.0, self.state.progress + step)
        LOGGER.debug("Progress %.1f", self.state.progress)
        if self.state.progress >= 100.0:
            self._complete("progress")
            return
        self._emit()
        self._progress_task = self.scheduler.call_later(
            self.config.tick_ms, self._tick, label="progress-tick"
        )

    def _deadline(self) -> None:
        self._deadline_task = None
        if self._closed or self.state.phase != Phase.LOADING:
            return
        self._complete("deadline")

    def _complete(self, reason: str) -> None:
        if self.state.result is not None:
            return
        self._cancel_pending()
        self.state.progress = 100.0
        self.state.result = self.estimator.estimate(self._submitted)
        self.estimate_calls += 1
        LOGGER.info(
            "Estimate ready via %s (%s): %s, %s",
            reason,
            self.estimator.name,
            self.state.result.amount,
            self.state.result.interest_rate,
        )
        self._emit()
        self._grace_task = self.scheduler.call_later(
            self.config.grace_ms, self._show_result, label="result-grace"
        )

    def _show_result(self) -> None:
        self._grace_task = None
        if self._closed or self.state.phase != Phase.LOADING or self.state.result is None:
            return
        self._set_phase(Phase.RESULT)

    # ----------------------------------------------------------- Helpers --
    def _require(self, phase: Phase, action: str) -> None:
        if self._closed:
            raise InvalidTransition("Session is closed")
        if self.state.phase != phase:
            raise InvalidTransition(
                f"Cannot {action} while in the {self.state.phase.value} phase"
            )

    def _set_phase(self, phase: Phase) -> None:
        previous = self.state.phase
        self.state.phase = phase
        if previous != phase:
            LOGGER.info("Phase %s -> %s", previous.value, phase.value)
        self.animator.sync(phase, self.state.result)
        self._emit()

    def _cancel_pending(self) -> None:
        for task in (self._progress_task, self._deadline_task, self._grace_task):
            if task is not None:
                task.cancel()
        self._progress_task = None
        self._deadline_task = None
        self._grace_task = None

    def _emit(self) -> None:
        if self.on_change is not None:
            self.on_change(self.state)


__all__ = ["FundCheckSession", "INCOMPLETE_SELECTION_NOTICE", "InvalidTransition"]
