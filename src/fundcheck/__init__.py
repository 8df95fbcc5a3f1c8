"""Policy fund self-check: a three-question lead widget with a cosmetic estimate."""

from .api import EstimateOptions, estimate
from .estimator import Estimator, FormulaEstimator, TableEstimator, build_estimator
from .models import AnimationState, FormSelection, Phase, ResultRecord, SessionState
from .session import FundCheckSession, InvalidTransition

__all__ = [
    "AnimationState",
    "EstimateOptions",
    "Estimator",
    "FormSelection",
    "FormulaEstimator",
    "FundCheckSession",
    "InvalidTransition",
    "Phase",
    "ResultRecord",
    "SessionState",
    "TableEstimator",
    "build_estimator",
    "estimate",
]
