"""Small desktop window for the policy fund self-check.

Each phase of :class:`fundcheck.session.FundCheckSession` has its own view:
a landing card, the three-question form, an analysis progress bar and the
animated result card. Timers and animation frames run on the Tk event loop
through :class:`TkScheduler`.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Callable, Dict

import tkinter as tk
from tkinter import messagebox, ttk

from .choices import FIELD_CHOICES, FIELD_LABELS
from .config import load_config as load_runtime_config
from .estimator import build_estimator
from .models import Phase, SessionState
from .scheduling import FrameCallback, Scheduler, TaskHandle
from .session import FundCheckSession

LOGGER = logging.getLogger(__name__)

FIELD_PLACEHOLDERS = {
    "industry": "업종 선택",
    "revenue": "매출 규모 선택",
    "debt": "부채 규모 선택",
}


class TkScheduler(Scheduler):
    """Run scheduled tasks on a Tk event loop via ``after``."""

    def __init__(self, root: tk.Misc, frame_interval_ms: float = 16.0) -> None:
        self.root = root
        self.frame_interval_ms = float(frame_interval_ms)

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None], label: str = "") -> TaskHandle:
        handle = TaskHandle(callback, label)
        job = self.root.after(max(0, int(round(delay_ms))), handle.fire)
        handle.set_canceller(lambda: self._after_cancel(job))
        return handle

    def request_frame(self, callback: FrameCallback, label: str = "") -> TaskHandle:
        handle = TaskHandle(callback, label)
        job = self.root.after(
            max(1, int(round(self.frame_interval_ms))), lambda: handle.fire(self.now())
        )
        handle.set_canceller(lambda: self._after_cancel(job))
        return handle

    def _after_cancel(self, job: str) -> None:
        try:
            self.root.after_cancel(job)
        except tk.TclError:
            pass


class FundCheckApp:
    """Tk-based interface for the self-check flow."""

    def __init__(self) -> None:
        self.root = tk.Tk()
        self.root.title("숨은 정책자금 찾기")
        self.root.geometry("420x560")
        self.root.minsize(360, 480)
        self._palette: Dict[str, str] = {}
        self._configure_theme()

        self.config = load_runtime_config(os.environ, None)
        self.scheduler = TkScheduler(self.root, self.config.frame_ms)
        estimator = build_estimator(self.config.strategy, detailed_amounts=self.config.detailed_amounts)
        self.session = FundCheckSession(
            estimator,
            self.scheduler,
            config=self.config,
            on_change=self._render,
            on_notice=self._show_notice,
            on_frame=self._render_frame,
        )

        self.field_vars: Dict[str, tk.StringVar] = {
            field: tk.StringVar(value="") for field in FIELD_CHOICES
        }
        self.progress_var = tk.DoubleVar(value=0.0)
        self.amount_var = tk.StringVar(value="0만원")
        self.rate_var = tk.StringVar(value="연 0%대")
        self._views: Dict[Phase, ttk.Frame] = {}

        self._build_ui()
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self._render(self.session.state)

    # ------------------------------------------------------------- Theme --
    def _configure_theme(self) -> None:
        self._palette = {
            "background": "#ffffff",
            "text": "#191f28",
            "muted": "#8b95a1",
            "accent": "#3182f6",
        }
        style = ttk.Style(self.root)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass
        self.root.configure(background=self._palette["background"])
        style.configure("TFrame", background=self._palette["background"])
        style.configure(
            "TLabel", background=self._palette["background"], foreground=self._palette["text"]
        )
        style.configure("Title.TLabel", font=("TkDefaultFont", 18, "bold"))
        style.configure("Muted.TLabel", foreground=self._palette["muted"])
        style.configure(
            "Value.TLabel", font=("TkDefaultFont", 20, "bold"), foreground=self._palette["accent"]
        )
        style.configure("Accent.TButton", padding=(12, 10))

    # ---------------------------------------------------------------- UI --
    def _build_ui(self) -> None:
        container = ttk.Frame(self.root, padding=24)
        container.pack(fill=tk.BOTH, expand=True)
        container.columnconfigure(0, weight=1)
        container.rowconfigure(0, weight=1)

        start = ttk.Frame(container)
        ttk.Label(start, text="사장님을 위한\n숨은 정책자금 찾기", style="Title.TLabel").pack(anchor=tk.W)
        ttk.Label(start, text="1분 만에 예상 한도와 금리를 확인하세요", style="Muted.TLabel").pack(
            anchor=tk.W, pady=(8, 24)
        )
        ttk.Button(
            start, text="1분 자가진단 시작하기", style="Accent.TButton", command=self.session.start
        ).pack(side=tk.BOTTOM, fill=tk.X)
        self._views[Phase.START] = start

        form = ttk.Frame(container)
        ttk.Label(form, text="정보를 입력해주세요", style="Title.TLabel").pack(anchor=tk.W, pady=(0, 16))
        for field, choices in FIELD_CHOICES.items():
            ttk.Label(form, text=FIELD_LABELS[field]).pack(anchor=tk.W, pady=(8, 2))
            combo = ttk.Combobox(
                form, textvariable=self.field_vars[field], values=list(choices), state="readonly"
            )
            combo.set(FIELD_PLACEHOLDERS[field])
            combo.bind("<<ComboboxSelected>>", self._make_select_handler(field))
            combo.pack(fill=tk.X)
        ttk.Button(form, text="분석하기", style="Accent.TButton", command=self._handle_submit).pack(
            side=tk.BOTTOM, fill=tk.X
        )
        self._views[Phase.FORM] = form

        loading = ttk.Frame(container)
        ttk.Label(loading, text="사장님에게 딱 맞는\n자금을 찾고 있어요", style="Title.TLabel", justify=tk.CENTER).pack(
            pady=(80, 24)
        )
        ttk.Progressbar(loading, variable=self.progress_var, maximum=100.0, mode="determinate").pack(fill=tk.X)
        self._views[Phase.LOADING] = loading

        result = ttk.Frame(container)
        ttk.Label(result, text="✓ 분석이 완료되었습니다", style="Title.TLabel").pack(anchor=tk.W, pady=(0, 24))
        ttk.Label(result, text="예상 한도", style="Muted.TLabel").pack(anchor=tk.W)
        ttk.Label(result, textvariable=self.amount_var, style="Value.TLabel").pack(anchor=tk.W, pady=(0, 12))
        ttk.Label(result, text="최저 금리", style="Muted.TLabel").pack(anchor=tk.W)
        ttk.Label(result, textvariable=self.rate_var).pack(anchor=tk.W)
        ttk.Label(result, text="* 실제 심사 결과에 따라 차이가 발생할 수 있습니다.", style="Muted.TLabel").pack(
            anchor=tk.W, pady=(24, 0)
        )
        ttk.Button(result, text="이대로 안내받기", style="Accent.TButton", command=self._handle_reset).pack(
            side=tk.BOTTOM, fill=tk.X
        )
        self._views[Phase.RESULT] = result

        for view in self._views.values():
            view.grid(row=0, column=0, sticky="nsew")

    def _make_select_handler(self, field: str) -> Callable[[tk.Event], None]:
        def _handler(_event: tk.Event) -> None:
            value = self.field_vars[field].get()
            if value in FIELD_CHOICES[field]:
                self.session.select(field, value)

        return _handler

    # ----------------------------------------------------------- Actions --
    def _handle_submit(self) -> None:
        self.session.submit()

    def _handle_reset(self) -> None:
        self.session.reset()
        for field, var in self.field_vars.items():
            var.set(FIELD_PLACEHOLDERS[field])

    def _show_notice(self, message: str) -> None:
        messagebox.showinfo("입력 확인", message)

    # ---------------------------------------------------------- Rendering --
    def _render(self, state: SessionState) -> None:
        self._views[state.phase].tkraise()
        self.progress_var.set(state.progress)
        if state.phase == Phase.RESULT:
            self._render_frame(self.session.animator.display_amount(), self.session.animator.display_rate())

    def _render_frame(self, amount: str, rate: str) -> None:
        self.amount_var.set(amount)
        self.rate_var.set(self.format_rate_caption(rate))

    @staticmethod
    def format_rate_caption(rate: str) -> str:
        return f"연 {rate}"

    # -------------------------------------------------------------- Main --
    def _on_close(self) -> None:
        self.session.close()
        self.root.destroy()

    def run(self) -> None:  # pragma: no cover - UI loop
        self.root.mainloop()


def main() -> None:  # pragma: no cover - entry point
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    app = FundCheckApp()
    app.run()


if __name__ == "__main__":  # pragma: no cover - script mode
    main()
