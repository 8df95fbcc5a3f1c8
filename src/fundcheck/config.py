from __future__ import annotations

import math
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Mapping, Optional


_BOOLEAN_TRUE = {"1", "true", "yes", "on"}
_STRATEGIES = {"table", "formula"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration assembled from environment variables and CLI options."""

    strategy: str = "formula"
    seed: Optional[int] = None
    tick_ms: float = 100.0
    step_max: float = 15.0
    hard_timeout_ms: float = 3000.0
    grace_ms: float = 500.0
    animation_ms: float = 1500.0
    frame_ms: float = 16.0
    detailed_amounts: bool = False
    verbose: bool = False


def _to_int(value: object | None) -> Optional[int]:
    number = _to_float(value)
    if number is None or not math.isfinite(number):
        return None
    return int(number)


def _to_float(value: object | None) -> Optional[float]:
    if value is None:
        return None
    text = str(value).replace(",", "").replace("ms", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _positive(value: Optional[float], default: float) -> float:
    if value is None or value <= 0:
        return default
    return value


def _flag(value: object | None, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value or "").strip().lower()
    if not text:
        return default
    return text in _BOOLEAN_TRUE


def _strategy(value: object | None, default: str) -> str:
    text = str(value or "").strip().lower()
    return text if text in _STRATEGIES else default


def _namespace(cli_args: object | None) -> SimpleNamespace:
    """Copy parsed CLI options so missing attributes read as absent."""
    options = getattr(cli_args, "__dict__", None) or {}
    return SimpleNamespace(**options)


def load_config(env: Mapping[str, str], cli_args: object | None = None) -> Config:
    """Build a runtime :class:`Config` from environment variables and CLI options."""

    defaults = Config()
    strategy = _strategy(env.get("FUNDCHECK_STRATEGY"), defaults.strategy)
    seed = _to_int(env.get("FUNDCHECK_SEED"))
    tick_ms = _positive(_to_float(env.get("FUNDCHECK_TICK_MS")), defaults.tick_ms)
    step_max = _positive(_to_float(env.get("FUNDCHECK_STEP_MAX")), defaults.step_max)
    hard_timeout_ms = _positive(_to_float(env.get("FUNDCHECK_HARD_TIMEOUT_MS")), defaults.hard_timeout_ms)
    grace_ms = _to_float(env.get("FUNDCHECK_GRACE_MS"))
    if grace_ms is None or grace_ms < 0:
        grace_ms = defaults.grace_ms
    animation_ms = _positive(_to_float(env.get("FUNDCHECK_ANIMATION_MS")), defaults.animation_ms)
    frame_ms = _positive(_to_float(env.get("FUNDCHECK_FRAME_MS")), defaults.frame_ms)
    detailed_amounts = _flag(env.get("FUNDCHECK_DETAILED_AMOUNTS"))
    verbose = False

    cli_ns = _namespace(cli_args)
    if getattr(cli_ns, "strategy", None):
        strategy = _strategy(cli_ns.strategy, strategy)
    if getattr(cli_ns, "seed", None) is not None:
        seed = int(cli_ns.seed)
    if getattr(cli_ns, "detailed_amounts", False):
        detailed_amounts = True
    if getattr(cli_ns, "verbose", False):
        verbose = bool(cli_ns.verbose)

    return Config(
        strategy=strategy,
        seed=seed,
        tick_ms=tick_ms,
        step_max=step_max,
        hard_timeout_ms=hard_timeout_ms,
        grace_ms=grace_ms,
        animation_ms=animation_ms,
        frame_ms=frame_ms,
        detailed_amounts=detailed_amounts,
        verbose=verbose,
    )


__all__ = ["Config", "load_config"]
