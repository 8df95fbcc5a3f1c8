from __future__ import annotations

from types import SimpleNamespace

import pytest

from fundcheck import cli
from fundcheck.session import INCOMPLETE_SELECTION_NOTICE


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("FUNDCHECK_STRATEGY", "FUNDCHECK_SEED", "FUNDCHECK_DETAILED_AMOUNTS"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(cli, "load_dotenv", lambda *args, **kwargs: False)


def test_formula_run_prints_result(capsys):
    rc = cli.main(["--industry", "제조업", "--revenue", "3억원~5억원", "--debt", "5천만원 미만", "--seed", "1"])
    out = capsys.readouterr().out
    assert rc == cli.EXIT_OK
    assert "예상 한도: 3억원" in out
    assert "최저 금리: 연 3.1%대" in out
    assert "사장님은 최대 3억원, 3.1%대 금리 대상자일 확률이 높습니다" in out


def test_incomplete_selection_exits_with_notice(capsys):
    rc = cli.main(["--industry", "제조업", "--revenue", "3억원~5억원"])
    captured = capsys.readouterr()
    assert rc == cli.EXIT_INCOMPLETE
    assert INCOMPLETE_SELECTION_NOTICE in captured.err


def test_unknown_choice_is_rejected(capsys):
    rc = cli.main(["--industry", "농업", "--revenue", "3", "--debt", "1"])
    assert rc == cli.EXIT_INCOMPLETE
    assert "농업" in capsys.readouterr().err


def test_frames_are_printed(capsys):
    rc = cli.main(["--industry", "1", "--revenue", "1", "--debt", "1", "--frames", "--seed", "4"])
    out = capsys.readouterr().out
    assert rc == cli.EXIT_OK
    frame_lines = [line for line in out.splitlines() if line.startswith("  ")]
    assert len(frame_lines) > 10
    assert frame_lines[0].strip().startswith("0만원")


def test_table_trials_summary(capsys):
    rc = cli.main(
        ["--industry", "1", "--revenue", "2", "--debt", "3", "--strategy", "table", "--trials", "80", "--seed", "11"]
    )
    out = capsys.readouterr().out
    assert rc == cli.EXIT_OK
    assert "Estimates sampled: 80" in out


def test_trials_need_complete_selection_for_both_strategies(capsys):
    for strategy in ("formula", "table"):
        rc = cli.main(["--industry", "제조업", "--revenue", "4", "--strategy", strategy, "--trials", "5"])
        assert rc == cli.EXIT_INCOMPLETE
        assert INCOMPLETE_SELECTION_NOTICE in capsys.readouterr().err


def test_trials_accept_positions(capsys):
    rc = cli.main(["--industry", "4", "--revenue", "4", "--debt", "1", "--trials", "3"])
    out = capsys.readouterr().out
    assert rc == cli.EXIT_OK
    assert "Estimates sampled: 3 across 1 distinct result(s)." in out
    assert "3억원" in out and "3.1%대" in out


def test_trials_reject_unknown_choice(capsys):
    rc = cli.main(["--industry", "농업", "--revenue", "4", "--debt", "1", "--trials", "3"])
    captured = capsys.readouterr()
    assert rc == cli.EXIT_INCOMPLETE
    assert "농업" in captured.err
    assert "Estimates sampled" not in captured.out


def test_interactive_prompts_fill_missing_fields(capsys):
    answers = iter(["7", "제조업", "4", "1"])
    args = SimpleNamespace(industry=None, revenue=None, debt=None, interactive=True)
    selection = cli._collect_selection(args, reader=lambda _prompt: next(answers))
    assert selection.industry == "제조업"
    assert selection.revenue == "3억원~5억원"
    assert selection.debt == "5천만원 미만"
    assert "is not one of the listed options" in capsys.readouterr().out
