"""Random robot kept as the simplest example of the strategy contract."""

from __future__ import annotations

import random

from robowars.ai.rules import FieldRules
from robowars.core.fleet import random_fleet
from robowars.core.geometry import Point, Rect, Size
from robowars.core.models import ShotOutcome


class PrimitiveRobot:
    """Places ships randomly and fires at random cells, repeats included."""

    name = "Leaky Bucket"
    greeting_message = "I have no idea what I'm doing"
    win_message = "Whaaaat??"
    lose_message = "Okay("

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng
        self._rules = FieldRules()

    def define_field(self, rect: Rect) -> None:
        self._rules.field_rect = rect

    def define_ship_count(self, count: int) -> None:
        self._rules.ship_count = count

    def define_allowed_ship_sizes(self, sizes: frozenset[Size]) -> None:
        self._rules.ship_sizes = frozenset(sizes)

    def get_ship_placements(self) -> list[Rect]:
        return random_fleet(self._rules.configuration(), self._rng)

    def enemy_did_shoot(self, point: Point) -> None:
        pass

    def get_next_shooting_position(self) -> Point:
        return self._rules.random_point(self._rng)

    def did_handle_shoot(self, point: Point, outcome: ShotOutcome) -> None:
        pass

    def on_game_over(self) -> None:
        pass
