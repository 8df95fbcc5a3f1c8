"""Estimate strategies turning the three self-check inputs into a result."""

from __future__ import annotations

import logging
import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .choices import band_to_amount
from .formatting import build_message, format_amount, format_rate
from .models import FormSelection, ResultRecord

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndustryProfile:
    """Amount/rate envelope for one industry bucket (amounts in man-won)."""

    min_amount: int
    max_amount: int
    base_amount: int
    min_rate: float
    max_rate: float


SMALL_BUSINESS_PROFILE = IndustryProfile(3000, 30000, 10000, 2.5, 3.5)
MANUFACTURING_PROFILE = IndustryProfile(10000, 50000, 20000, 2.8, 4.0)
CONSTRUCTION_PROFILE = IndustryProfile(5000, 40000, 15000, 3.0, 4.5)
DEFAULT_PROFILE = IndustryProfile(3000, 20000, 8000, 3.5, 5.0)

INDUSTRY_PROFILES: Dict[str, IndustryProfile] = {
    "소매업": SMALL_BUSINESS_PROFILE,
    "음식점업": SMALL_BUSINESS_PROFILE,
    "서비스업": SMALL_BUSINESS_PROFILE,
    "제조업": MANUFACTURING_PROFILE,
    "건설업": CONSTRUCTION_PROFILE,
    "기타": DEFAULT_PROFILE,
}

# (amount, rate) pairs presented by the table strategy
RESULT_TABLE: Tuple[Tuple[str, str], ...] = (
    ("9740만원", "2%대"),
    ("1억 2천만원", "1.5%대"),
    ("8500만원", "2.5%대"),
    ("1억 5천만원", "1.8%대"),
    ("7200만원", "2.2%대"),
    ("1억 8천만원", "1.2%대"),
    ("6500만원", "2.8%대"),
    ("2억원", "1.0%대"),
)

TABLE_RECORDS: Tuple[ResultRecord, ...] = tuple(
    ResultRecord(amount=amount, interest_rate=rate, message=build_message(amount, rate))
    for amount, rate in RESULT_TABLE
)


def industry_profile(industry: str) -> IndustryProfile:
    return INDUSTRY_PROFILES.get((industry or "").strip(), DEFAULT_PROFILE)


def revenue_multiplier(revenue_amount: float) -> float:
    """Base-amount multiplier for a revenue magnitude.

    The thresholds are checked in written order and a later match replaces an
    earlier one, so revenue of 40000 takes 1.5 rather than 1.3.
    """

    multiplier = 1.0
    if revenue_amount < 5000:
        multiplier = 0.7
    if revenue_amount >= 20000:
        multiplier = 1.3
    if revenue_amount >= 40000:
        multiplier = 1.5
    return multiplier


def rate_multiplier(revenue_amount: float, debt_amount: float) -> float:
    if revenue_amount >= 20000 and debt_amount < 0.3 * revenue_amount:
        return 0.9
    if revenue_amount < 5000 or debt_amount > 0.5 * revenue_amount:
        return 1.1
    return 1.0


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _round_to_thousand(value: float) -> int:
    # half-up, not banker's rounding
    return int(math.floor(value / 1000 + 0.5)) * 1000


def derive_amount(profile: IndustryProfile, revenue_amount: float, debt_amount: float) -> int:
    amount = profile.base_amount * revenue_multiplier(revenue_amount)
    if debt_amount > 0.5 * revenue_amount:
        amount *= 0.8
    amount = _clamp(amount, profile.min_amount, profile.max_amount)
    return _round_to_thousand(amount)


def derive_rate(profile: IndustryProfile, revenue_amount: float, debt_amount: float) -> float:
    midpoint = (profile.min_rate + profile.max_rate) / 2
    rate = midpoint * rate_multiplier(revenue_amount, debt_amount)
    return _clamp(rate, profile.min_rate, profile.max_rate)


class Estimator(ABC):
    """Common interface for the two interchangeable estimate strategies."""

    name: str = ""

    @abstractmethod
    def estimate(self, selection: Optional[FormSelection] = None) -> ResultRecord:
        raise NotImplementedError


class TableEstimator(Estimator):
    """Pick one of the authored records uniformly at random, ignoring input."""

    name = "table"

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        records: Tuple[ResultRecord, ...] = TABLE_RECORDS,
    ) -> None:
        if not records:
            raise ValueError("TableEstimator requires at least one record")
        self.rng = rng or random.Random()
        self.records = records

    def estimate(self, selection: Optional[FormSelection] = None) -> ResultRecord:
        record = self.records[self.rng.randrange(len(self.records))]
        LOGGER.debug("Table estimate picked %s / %s", record.amount, record.interest_rate)
        return record


class FormulaEstimator(Estimator):
    """Derive amount and rate from the industry bucket and band magnitudes."""

    name = "formula"

    def __init__(self, detailed_amounts: bool = False) -> None:
        self.detailed_amounts = detailed_amounts

    def estimate(self, selection: Optional[FormSelection] = None) -> ResultRecord:
        if selection is None:
            raise ValueError("FormulaEstimator requires a form selection")
        profile = industry_profile(selection.industry)
        revenue_amount = band_to_amount(selection.revenue)
        debt_amount = band_to_amount(selection.debt)

        amount = derive_amount(profile, revenue_amount, debt_amount)
        rate = derive_rate(profile, revenue_amount, debt_amount)
        amount_text = format_amount(amount, detailed=self.detailed_amounts)
        rate_text = format_rate(rate)
        LOGGER.debug(
            "Formula estimate for %s (revenue=%s, debt=%s): %s -> %s, %.3f -> %s",
            selection.industry,
            revenue_amount,
            debt_amount,
            amount,
            amount_text,
            rate,
            rate_text,
        )
        return ResultRecord(
            amount=amount_text,
            interest_rate=rate_text,
            message=build_message(amount_text, rate_text),
        )


ESTIMATORS = {
    TableEstimator.name: TableEstimator,
    FormulaEstimator.name: FormulaEstimator,
}


def build_estimator(
    name: str,
    rng: Optional[random.Random] = None,
    detailed_amounts: bool = False,
) -> Estimator:
    """Instantiate the strategy registered under ``name``."""

    key = (name or "").strip().lower()
    if key == TableEstimator.name:
        return TableEstimator(rng=rng)
    if key == FormulaEstimator.name:
        return FormulaEstimator(detailed_amounts=detailed_amounts)
    raise ValueError(f"Unknown estimator strategy: {name!r} (expected one of {sorted(ESTIMATORS)})")


__all__ = [
    "DEFAULT_PROFILE",
    "ESTIMATORS",
    "Estimator",
    "FormulaEstimator",
    "INDUSTRY_PROFILES",
    "IndustryProfile",
    "RESULT_TABLE",
    "TABLE_RECORDS",
    "TableEstimator",
    "build_estimator",
    "derive_amount",
    "derive_rate",
    "industry_profile",
    "rate_multiplier",
    "revenue_multiplier",
]
