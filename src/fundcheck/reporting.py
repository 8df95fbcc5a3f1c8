from typing import Iterable

import pandas as pd

from .formatting import parse_amount, parse_rate
from .models import ResultRecord


def summarize_trials(records: Iterable[ResultRecord]) -> pd.DataFrame:
    """Tally how often each (amount, rate) pair was produced."""

    frame = pd.DataFrame(
        [{"AMOUNT": r.amount, "RATE": r.interest_rate} for r in records],
        columns=["AMOUNT", "RATE"],
    )
    if frame.empty:
        return frame.assign(AMOUNT_MANWON=[], RATE_PCT=[], COUNT=[], SHARE=[])
    counts = frame.groupby(["AMOUNT", "RATE"], sort=False).size().reset_index(name="COUNT")
    counts["AMOUNT_MANWON"] = counts["AMOUNT"].map(parse_amount)
    counts["RATE_PCT"] = counts["RATE"].map(parse_rate)
    counts["SHARE"] = counts["COUNT"] / counts["COUNT"].sum()
    return counts.sort_values("AMOUNT_MANWON", ascending=False).reset_index(drop=True)[
        ["AMOUNT", "RATE", "AMOUNT_MANWON", "RATE_PCT", "COUNT", "SHARE"]
    ]


def make_summary_text(summary: pd.DataFrame) -> str:
    total = int(summary["COUNT"].sum()) if not summary.empty else 0
    if total == 0:
        return "No estimates were produced.\n"
    shown = summary.assign(SHARE=(summary["SHARE"] * 100).round(1))
    return (
        f"Estimates sampled: {total:,} across {len(summary)} distinct result(s).\n"
        f"Result frequencies (SHARE in %):\n{shown.to_string(index=False)}\n"
    )
