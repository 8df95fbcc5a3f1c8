from __future__ import annotations

from typing import Callable, Dict, List

import pytest

pytest.importorskip("tkinter")

from fundcheck import gui  # noqa: E402
from fundcheck.gui import FundCheckApp, TkScheduler  # noqa: E402
from fundcheck.models import Phase  # noqa: E402
from fundcheck.session import INCOMPLETE_SELECTION_NOTICE  # noqa: E402


class _FakeRoot:
    def __init__(self) -> None:
        self.jobs: Dict[str, tuple] = {}
        self.cancelled: List[str] = []
        self._next = 0

    def after(self, delay: int, callback: Callable[[], None]) -> str:
        self._next += 1
        job = f"after#{self._next}"
        self.jobs[job] = (delay, callback)
        return job

    def after_cancel(self, job: str) -> None:
        self.cancelled.append(job)
        self.jobs.pop(job, None)


def test_call_later_uses_after_and_cancel():
    root = _FakeRoot()
    scheduler = TkScheduler(root)  # type: ignore[arg-type]
    fired: List[str] = []

    handle = scheduler.call_later(100.4, lambda: fired.append("tick"))
    (job, (delay, callback)), = root.jobs.items()
    assert delay == 100

    handle.cancel()
    assert root.cancelled == [job]
    callback()
    assert fired == []


def test_request_frame_passes_timestamp():
    root = _FakeRoot()
    scheduler = TkScheduler(root, frame_interval_ms=16)  # type: ignore[arg-type]
    stamps: List[float] = []
    scheduler.request_frame(stamps.append)
    (delay, callback), = root.jobs.values()
    assert delay == 16
    callback()
    assert len(stamps) == 1
    assert stamps[0] > 0


def test_rate_caption():
    assert FundCheckApp.format_rate_caption("3.1%대") == "연 3.1%대"


class _FakeView:
    def __init__(self) -> None:
        self.raised = 0

    def tkraise(self) -> None:
        self.raised += 1


class _FakeVar:
    def __init__(self) -> None:
        self.value = None

    def set(self, value) -> None:
        self.value = value


def _bare_app(session_factory) -> FundCheckApp:
    app = FundCheckApp.__new__(FundCheckApp)
    app._views = {phase: _FakeView() for phase in Phase}
    app.progress_var = _FakeVar()
    app.amount_var = _FakeVar()
    app.rate_var = _FakeVar()
    app.session = session_factory()
    app.session.on_change = app._render
    app.session.on_notice = app._show_notice
    return app


def test_submit_with_missing_fields_shows_notice(session_factory, monkeypatch):
    shown: List[tuple] = []
    monkeypatch.setattr(gui.messagebox, "showinfo", lambda title, message: shown.append((title, message)))
    app = _bare_app(session_factory)

    app.session.start()
    app.session.select("industry", "제조업")
    app._handle_submit()

    assert shown == [("입력 확인", INCOMPLETE_SELECTION_NOTICE)]
    assert app.session.phase == Phase.FORM
    assert app._views[Phase.FORM].raised >= 1
