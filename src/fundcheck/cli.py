import argparse
import logging
import os
import random
import sys
import time
from typing import Callable, Optional, Sequence

from dotenv import load_dotenv

from .choices import FIELD_CHOICES, FIELD_LABELS, choice_display_strings, normalize_choice, require_choice
from .config import Config
from .config import load_config as load_runtime_config
from .estimator import build_estimator
from .models import FormSelection, Phase, SessionState
from .reporting import make_summary_text, summarize_trials
from .scheduling import VirtualScheduler
from .session import FundCheckSession, INCOMPLETE_SELECTION_NOTICE

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INCOMPLETE = 2


def _prompt_choice(field: str, reader: Callable[[str], str] = input) -> str:
    print(f"{FIELD_LABELS[field]}:")
    for line in choice_display_strings(field):
        print(f"  {line}")
    while True:
        answer = reader("> ").strip()
        if not answer:
            return ""
        name = normalize_choice(field, answer)
        if name:
            return name
        print(f"'{answer}' is not one of the listed options.")


def _collect_selection(args: argparse.Namespace, reader: Callable[[str], str] = input) -> FormSelection:
    values = {}
    for field in FIELD_CHOICES:
        raw = getattr(args, field, None) or ""
        if not raw and getattr(args, "interactive", False):
            raw = _prompt_choice(field, reader)
        values[field] = require_choice(field, raw) if raw else ""
    return FormSelection(**values)


def _run_trials(cfg: Config, selection: FormSelection, trials: int) -> int:
    # Both strategies require a complete form.
    if not selection.is_complete():
        print(INCOMPLETE_SELECTION_NOTICE, file=sys.stderr)
        return EXIT_INCOMPLETE
    estimator = build_estimator(cfg.strategy, rng=random.Random(cfg.seed), detailed_amounts=cfg.detailed_amounts)
    records = [estimator.estimate(selection) for _ in range(max(1, trials))]
    print(make_summary_text(summarize_trials(records)), end="")
    return EXIT_OK


def run(
    cfg: Config,
    selection: FormSelection,
    show_frames: bool = False,
    realtime: bool = False,
) -> int:
    """Drive one headless self-check session and print the result."""

    scheduler = VirtualScheduler(cfg.frame_ms, sleeper=time.sleep if realtime else None)
    rng = random.Random(cfg.seed)
    estimator = build_estimator(cfg.strategy, rng=rng, detailed_amounts=cfg.detailed_amounts)

    last_progress = {"value": -1}

    def _on_change(state: SessionState) -> None:
        if state.phase == Phase.LOADING and int(state.progress) != last_progress["value"]:
            last_progress["value"] = int(state.progress)
            logger.debug("Analyzing... %d%%", last_progress["value"])

    def _on_frame(amount: str, rate: str) -> None:
        if show_frames:
            print(f"  {amount:>14}  연 {rate}")

    def _on_notice(message: str) -> None:
        print(message, file=sys.stderr)

    session = FundCheckSession(
        estimator,
        scheduler,
        config=cfg,
        rng=rng,
        on_change=_on_change,
        on_notice=_on_notice,
        on_frame=_on_frame,
    )
    try:
        session.start()
        for field in FIELD_CHOICES:
            value = getattr(selection, field)
            if value:
                try:
                    session.select(field, value)
                except ValueError as exc:
                    print(str(exc), file=sys.stderr)
                    return EXIT_INCOMPLETE
        if not session.submit():
            return EXIT_INCOMPLETE

        logger.info("사장님에게 딱 맞는 자금을 찾고 있어요...")
        scheduler.run_until_idle()

        result = session.state.result
        if session.phase != Phase.RESULT or result is None:
            logger.error("Session did not reach the result view (phase=%s)", session.phase.value)
            return 1
        print("분석이 완료되었습니다")
        print(f"예상 한도: {session.animator.display_amount()}")
        print(f"최저 금리: 연 {session.animator.display_rate()}")
        print(result.message)
        print("* 실제 심사 결과에 따라 차이가 발생할 수 있습니다.")
        return EXIT_OK
    finally:
        session.close()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the policy fund self-check from the console")
    parser.add_argument("--industry", help="Industry label or its 1-based position in the list")
    parser.add_argument("--revenue", help="Annual revenue band label or position")
    parser.add_argument("--debt", help="Current debt band label or position")
    parser.add_argument("--strategy", choices=("formula", "table"), help="Estimate strategy")
    parser.add_argument("--seed", type=int, help="Seed for the random progress and table picks")
    parser.add_argument("--frames", action="store_true", help="Print every animation frame")
    parser.add_argument("--realtime", action="store_true", help="Pace the loading and animation in real time")
    parser.add_argument("--trials", type=int, help="Sample the estimator N times and print frequencies")
    parser.add_argument("--detailed-amounts", action="store_true", help="Keep sub-thousand man-won digits")
    parser.add_argument("-i", "--interactive", action="store_true", help="Prompt for inputs not given on the command line")
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase logging verbosity")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    runtime_cfg = load_runtime_config(os.environ, args)
    log_level = logging.DEBUG if runtime_cfg.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s")

    try:
        selection = _collect_selection(args)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_INCOMPLETE
    if args.trials:
        return _run_trials(runtime_cfg, selection, args.trials)
    return run(runtime_cfg, selection, show_frames=args.frames, realtime=args.realtime)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
