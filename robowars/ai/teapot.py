"""Random robot that never fires at the same cell twice."""

from __future__ import annotations

import random

import numpy as np

from robowars.ai.rules import FieldRules
from robowars.core.fleet import random_fleet
from robowars.core.geometry import Point, Rect, Size
from robowars.core.models import ShotOutcome

_UNTOUCHED = 0
_HIT = 1
_MISS = 2


class TeapotRobot:
    """Uniform random shots over cells it has not fired at yet."""

    name = "Teapot"
    greeting_message = "Praise for the great coincidence"
    win_message = "Lucky me"
    lose_message = "Next time I will be more lucky"

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng
        self._rules = FieldRules()
        self._enemy_field = np.zeros((0, 0), dtype=np.int8)

    def define_field(self, rect: Rect) -> None:
        self._rules.field_rect = rect

    def define_ship_count(self, count: int) -> None:
        self._rules.ship_count = count

    def define_allowed_ship_sizes(self, sizes: frozenset[Size]) -> None:
        self._rules.ship_sizes = frozenset(sizes)

    def get_ship_placements(self) -> list[Rect]:
        rect = self._rules.field_rect
        self._enemy_field = np.zeros((rect.height, rect.width), dtype=np.int8)
        return random_fleet(self._rules.configuration(), self._rng)

    def enemy_did_shoot(self, point: Point) -> None:
        pass

    def get_next_shooting_position(self) -> Point:
        open_cells = np.argwhere(self._enemy_field == _UNTOUCHED)
        if len(open_cells) == 0:
            return self._rules.random_point(self._rng)
        row, col = open_cells[self._rng.randrange(len(open_cells))]
        rect = self._rules.field_rect
        return Point(rect.x + int(col), rect.y + int(row))

    def did_handle_shoot(self, point: Point, outcome: ShotOutcome) -> None:
        rect = self._rules.field_rect
        if not rect.contains(point):
            return
        row, col = point.y - rect.y, point.x - rect.x
        if self._enemy_field[row, col] == _UNTOUCHED:
            self._enemy_field[row, col] = _HIT if outcome.is_hit else _MISS

    def on_game_over(self) -> None:
        pass
