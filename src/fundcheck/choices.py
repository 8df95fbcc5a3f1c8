"""
Shared choice sets for the three self-check inputs surfaced in the front ends.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

# Keep tuple structure to preserve order for UI display
INDUSTRY_CHOICES: Tuple[str, ...] = (
    "소매업",
    "음식점업",
    "서비스업",
    "제조업",
    "건설업",
    "기타",
)

# (label, representative magnitude in man-won)
BAND_CHOICES: Tuple[Tuple[str, int], ...] = (
    ("5천만원 미만", 4000),
    ("5천만원~1억원", 7500),
    ("1억원~3억원", 20000),
    ("3억원~5억원", 40000),
    ("5억원 이상", 60000),
)

REVENUE_CHOICES: Tuple[str, ...] = tuple(label for label, _ in BAND_CHOICES)
DEBT_CHOICES: Tuple[str, ...] = tuple(label for label, _ in BAND_CHOICES)

DEFAULT_BAND_AMOUNT = 10000

BAND_AMOUNT_MAP: Dict[str, int] = {label: amount for label, amount in BAND_CHOICES}

FIELD_CHOICES: Dict[str, Tuple[str, ...]] = {
    "industry": INDUSTRY_CHOICES,
    "revenue": REVENUE_CHOICES,
    "debt": DEBT_CHOICES,
}

FIELD_LABELS: Dict[str, str] = {
    "industry": "업종",
    "revenue": "연간 매출액",
    "debt": "현재 부채",
}


def band_to_amount(label: str) -> int:
    """Return the representative man-won magnitude for a revenue/debt band."""

    name = normalize_choice("revenue", label)
    if name is None:
        return DEFAULT_BAND_AMOUNT
    return BAND_AMOUNT_MAP[name]


def normalize_choice(field: str, value: str) -> Optional[str]:
    """
    Normalize ``value`` into the canonical label for ``field``.

    Accepts the exact label, the label with stray whitespace, or the 1-based
    position in the displayed list (``"4"`` -> ``"제조업"`` for industry).
    Returns ``None`` if the value cannot be mapped.
    """

    choices = FIELD_CHOICES.get(field)
    if not choices or not value:
        return None

    candidate = str(value).strip()
    if not candidate:
        return None

    if candidate in choices:
        return candidate

    if candidate.isdigit():
        index = int(candidate) - 1
        if 0 <= index < len(choices):
            return choices[index]
        return None

    compressed = candidate.replace(" ", "")
    for name in choices:
        if compressed == name.replace(" ", ""):
            return name
    return None


def choice_display_strings(field: str) -> List[str]:
    """Return strings like ``"1 - 소매업"`` for console prompts."""

    return [f"{number} - {name}" for number, name in enumerate(FIELD_CHOICES[field], start=1)]


def require_choice(field: str, value: str) -> str:
    """Return the canonical label for ``value`` or raise ``ValueError``."""

    if field not in FIELD_CHOICES:
        raise ValueError(f"Unknown form field: {field!r}")
    name = normalize_choice(field, value)
    if name is None:
        raise ValueError(f"{value!r} is not a valid choice for {field}")
    return name
