from __future__ import annotations

import random
from collections import Counter
from itertools import product

import pytest

from fundcheck.choices import DEBT_CHOICES, INDUSTRY_CHOICES, REVENUE_CHOICES, band_to_amount
from fundcheck.estimator import (
    DEFAULT_PROFILE,
    MANUFACTURING_PROFILE,
    SMALL_BUSINESS_PROFILE,
    TABLE_RECORDS,
    FormulaEstimator,
    IndustryProfile,
    TableEstimator,
    build_estimator,
    derive_amount,
    derive_rate,
    industry_profile,
    rate_multiplier,
    revenue_multiplier,
)
from fundcheck.formatting import parse_amount
from fundcheck.models import FormSelection


def test_manufacturing_example_end_to_end():
    selection = FormSelection(industry="제조업", revenue="3억원~5억원", debt="5천만원 미만")
    assert band_to_amount(selection.revenue) == 40000
    assert band_to_amount(selection.debt) == 4000

    record = FormulaEstimator().estimate(selection)
    assert record.amount == "3억원"
    assert record.interest_rate == "3.1%대"
    assert record.message == "사장님은 최대 3억원, 3.1%대 금리 대상자일 확률이 높습니다"


@pytest.mark.parametrize(
    "revenue, expected",
    [(4000, 0.7), (7500, 1.0), (10000, 1.0), (20000, 1.3), (40000, 1.5), (60000, 1.5)],
)
def test_revenue_multiplier_later_threshold_overrides(revenue, expected):
    assert revenue_multiplier(revenue) == expected


@pytest.mark.parametrize(
    "revenue, debt, expected",
    [
        (20000, 4000, 0.9),
        (40000, 4000, 0.9),
        (4000, 4000, 1.1),
        (7500, 4000, 1.1),
        (20000, 7500, 1.0),
        (20000, 20000, 1.1),
    ],
)
def test_rate_multiplier(revenue, debt, expected):
    assert rate_multiplier(revenue, debt) == expected


def test_debt_penalty_and_rounding():
    # 10000 * 0.7 * 0.8 = 5600 -> nearest thousand
    assert derive_amount(SMALL_BUSINESS_PROFILE, 4000, 60000) == 6000


def test_amount_is_clamped_to_profile_bounds():
    narrow = IndustryProfile(min_amount=5000, max_amount=9000, base_amount=6000, min_rate=2.0, max_rate=3.0)
    # 6000 * 0.7 * 0.8 = 3360 before clamping
    assert derive_amount(narrow, 4000, 60000) == 5000
    high_base = IndustryProfile(min_amount=5000, max_amount=9000, base_amount=8000, min_rate=2.0, max_rate=3.0)
    # 8000 * 1.5 = 12000 before clamping
    assert derive_amount(high_base, 60000, 4000) == 9000
    assert derive_amount(MANUFACTURING_PROFILE, 4000, 60000) == 11000
    assert derive_amount(DEFAULT_PROFILE, 60000, 4000) == 12000


def test_outputs_stay_inside_industry_envelope():
    estimator = FormulaEstimator()
    for industry, revenue, debt in product(INDUSTRY_CHOICES, REVENUE_CHOICES, DEBT_CHOICES):
        profile = industry_profile(industry)
        revenue_amount = band_to_amount(revenue)
        debt_amount = band_to_amount(debt)

        rate = derive_rate(profile, revenue_amount, debt_amount)
        assert profile.min_rate <= rate <= profile.max_rate

        record = estimator.estimate(FormSelection(industry, revenue, debt))
        amount = parse_amount(record.amount)
        assert profile.min_amount <= amount <= profile.max_amount
        assert amount % 1000 == 0


def test_formula_estimator_is_deterministic():
    selection = FormSelection(industry="건설업", revenue="1억원~3억원", debt="1억원~3억원")
    first = FormulaEstimator().estimate(selection)
    second = FormulaEstimator().estimate(selection)
    assert first == second


def test_unknown_industry_uses_default_bucket():
    assert industry_profile("농업") is DEFAULT_PROFILE
    assert industry_profile("기타") is DEFAULT_PROFILE


def test_formula_estimator_requires_selection():
    with pytest.raises(ValueError):
        FormulaEstimator().estimate(None)


def test_table_estimator_draws_uniformly_from_fixed_records():
    estimator = TableEstimator(rng=random.Random(2024))
    counts = Counter(estimator.estimate() for _ in range(8000))
    assert set(counts) == set(TABLE_RECORDS)
    for record in TABLE_RECORDS:
        assert 800 <= counts[record] <= 1200


def test_table_estimator_ignores_input():
    first = TableEstimator(rng=random.Random(5))
    second = TableEstimator(rng=random.Random(5))
    picks_a = [first.estimate(FormSelection("제조업", "5억원 이상", "5천만원 미만")) for _ in range(20)]
    picks_b = [second.estimate() for _ in range(20)]
    assert picks_a == picks_b


def test_table_records_carry_messages():
    assert len(TABLE_RECORDS) == 8
    assert TABLE_RECORDS[0].message == "사장님은 최대 9740만원, 2%대 금리 대상자일 확률이 높습니다"


def test_build_estimator_lookup():
    assert isinstance(build_estimator("TABLE"), TableEstimator)
    assert isinstance(build_estimator(" formula "), FormulaEstimator)
    with pytest.raises(ValueError):
        build_estimator("neural")
