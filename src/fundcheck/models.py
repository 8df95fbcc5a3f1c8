from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Phase(str, Enum):
    """Which view of the self-check flow is active."""

    START = "start"
    FORM = "form"
    LOADING = "loading"
    RESULT = "result"


@dataclass
class FormSelection:
    """Three categorical inputs collected on the form view."""

    industry: str = ""
    revenue: str = ""
    debt: str = ""

    def missing_fields(self) -> List[str]:
        return [name for name in ("industry", "revenue", "debt") if not getattr(self, name)]

    def is_complete(self) -> bool:
        return not self.missing_fields()


@dataclass(frozen=True)
class ResultRecord:
    """Formatted estimate shown on the result view."""

    amount: str
    interest_rate: str
    message: str


@dataclass
class AnimationState:
    animated_amount: float = 0.0
    animated_rate: float = 0.0

    def reset(self) -> None:
        self.animated_amount = 0.0
        self.animated_rate = 0.0


@dataclass
class SessionState:
    """All mutable state of one self-check session."""

    phase: Phase = Phase.START
    selection: FormSelection = field(default_factory=FormSelection)
    progress: float = 0.0
    result: Optional[ResultRecord] = None
    animation: AnimationState = field(default_factory=AnimationState)
    notice: Optional[str] = None
