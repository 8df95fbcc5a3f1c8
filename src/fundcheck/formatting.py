"""Korean amount/rate display grammar shared by the estimators and the animator.

Amounts are expressed in man-won (10,000 won). ``format_amount`` renders them
with eok (10,000 man-won) and thousand-man-won digits, and ``parse_amount``
reads any of those renderings back.
"""

from __future__ import annotations

import math
import re
from typing import Optional

MESSAGE_TEMPLATE = "사장님은 최대 {amount}, {rate} 금리 대상자일 확률이 높습니다"

_AMOUNT_PATTERN = re.compile(
    r"(?:(?P<eok>\d+)\s*억)?\s*"
    r"(?:(?P<thousand>\d+)\s*천)?\s*"
    r"(?P<rest>\d+(?:\.\d+)?)?\s*"
    r"만?\s*원"
)
_RATE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*%")
_NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")


def format_amount(value: float, detailed: bool = False) -> str:
    """Render a man-won magnitude such as ``12000`` as ``"1억 2천만원"``.

    With ``detailed`` a nonzero remainder below one thousand man-won is kept
    after the thousand digit (``9740`` -> ``"9천740만원"``) instead of being
    dropped (``"9천만원"``).
    """

    value = max(0.0, float(value))
    eok = int(math.floor(value / 10000))
    remainder = value % 10000
    thousand = int(math.floor(remainder / 1000))
    rest = int(math.floor(remainder % 1000))

    if eok > 0:
        if thousand > 0:
            if detailed and rest > 0:
                return f"{eok}억 {thousand}천{rest}만원"
            return f"{eok}억 {thousand}천만원"
        if rest > 0:
            return f"{eok}억 {rest}만원"
        return f"{eok}억원"

    if thousand > 0:
        if detailed and rest > 0:
            return f"{thousand}천{rest}만원"
        return f"{thousand}천만원"
    if rest > 0:
        return f"{rest}만원"
    return "0만원"


def format_rate(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return f"{int(value)}%대"
    return f"{value:.1f}%대"


def parse_amount(text: Optional[str]) -> float:
    """Read a formatted amount back into man-won. Unparseable text yields ``0``."""

    if not text:
        return 0.0
    for match in _AMOUNT_PATTERN.finditer(str(text)):
        eok, thousand, rest = match.group("eok", "thousand", "rest")
        if eok is None and thousand is None and rest is None:
            continue
        total = 0.0
        if eok:
            total += float(eok) * 10000
        if thousand:
            total += float(thousand) * 1000
        if rest:
            total += float(rest)
        return total
    return 0.0


def parse_rate(text: Optional[str]) -> float:
    if not text:
        return 0.0
    match = _RATE_PATTERN.search(str(text)) or _NUMBER_PATTERN.search(str(text))
    if not match:
        return 0.0
    return float(match.group(1) if match.groups() else match.group(0))


def build_message(amount: str, rate: str) -> str:
    return MESSAGE_TEMPLATE.format(amount=amount, rate=rate)


__all__ = [
    "MESSAGE_TEMPLATE",
    "build_message",
    "format_amount",
    "format_rate",
    "parse_amount",
    "parse_rate",
]
