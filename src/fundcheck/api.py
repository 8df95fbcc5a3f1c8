from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from .choices import FIELD_CHOICES, require_choice
from .estimator import build_estimator
from .models import FormSelection, ResultRecord


@dataclass
class EstimateOptions:
    strategy: str = "formula"
    seed: Optional[int] = None
    detailed_amounts: bool = False


def estimate(
    industry: str = "",
    revenue: str = "",
    debt: str = "",
    options: Optional[EstimateOptions] = None,
) -> ResultRecord:
    """Programmatic interface returning a single estimate without the phase flow.

    Each input may be a label or its 1-based position. All three are required
    for both strategies, although the table strategy ignores their values.
    Raises ``ValueError`` for a missing or unknown choice.
    """

    opts = options or EstimateOptions()
    values = {"industry": industry, "revenue": revenue, "debt": debt}
    selection = FormSelection(**{field: require_choice(field, values[field]) for field in FIELD_CHOICES})
    rng = random.Random(opts.seed) if opts.seed is not None else None
    estimator = build_estimator(opts.strategy, rng=rng, detailed_amounts=opts.detailed_amounts)
    return estimator.estimate(selection)
