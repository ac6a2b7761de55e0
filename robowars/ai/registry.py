"""Lookup of the bundled strategies by name."""

from __future__ import annotations

import random
from collections.abc import Callable

from robowars.ai.hunt import HuntRobot
from robowars.ai.primitive import PrimitiveRobot
from robowars.ai.strategy import Strategy
from robowars.ai.teapot import TeapotRobot

StrategyFactory = Callable[[random.Random], Strategy]

_FACTORIES: dict[str, StrategyFactory] = {
    "primitive": PrimitiveRobot,
    "teapot": TeapotRobot,
    "hunt": HuntRobot,
}


def available_strategies() -> list[str]:
    return sorted(_FACTORIES)


def create_strategy(name: str, rng: random.Random) -> Strategy:
    """Instantiate a bundled strategy; raises ValueError for unknown names."""
    key = name.strip().lower()
    factory = _FACTORIES.get(key)
    if factory is None:
        raise ValueError(
            f"Unknown strategy '{name}'. Available: {', '.join(available_strategies())}."
        )
    return factory(rng)
