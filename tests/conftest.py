from __future__ import annotations

import random
from typing import Callable, List

import pytest

from fundcheck.config import Config
from fundcheck.estimator import build_estimator
from fundcheck.scheduling import VirtualScheduler
from fundcheck.session import FundCheckSession


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:  # type: ignore[override]
        return self.value


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler(frame_interval_ms=16.0)


@pytest.fixture
def notices() -> List[str]:
    return []


@pytest.fixture
def session_factory(scheduler: VirtualScheduler, notices: List[str]) -> Callable[..., FundCheckSession]:
    def _create(strategy: str = "formula", step: float | None = None, seed: int = 7, **config) -> FundCheckSession:
        cfg = Config(strategy=strategy, seed=seed, **config)
        rng = FixedRandom(step) if step is not None else random.Random(seed)
        estimator = build_estimator(strategy, rng=random.Random(seed))
        return FundCheckSession(estimator, scheduler, config=cfg, rng=rng, on_notice=notices.append)

    return _create
