from __future__ import annotations

import random
from collections.abc import Iterable, Sequence

import pytest

from robowars.core.geometry import Point, Rect, Size
from robowars.core.models import FieldConfiguration, ShotOutcome


def make_small_config() -> FieldConfiguration:
    return FieldConfiguration.create(4, 4, 1, (Size(2, 1), Size(1, 2)), name="small")


class ScriptedStrategy:
    """Strategy double with canned placements and shots that records every callback."""

    def __init__(
        self,
        name: str,
        placements: Sequence[Sequence[Rect]],
        shots: Iterable[Point] = (),
    ) -> None:
        self.name = name
        self.greeting_message = f"{name} says hi"
        self.win_message = f"{name} wins"
        self.lose_message = f"{name} loses"
        self._placements = [list(item) for item in placements]
        self._shots = list(shots)
        self._field = Rect(0, 0, 0, 0)
        self._scan = 0
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self.results: list[tuple[Point, ShotOutcome]] = []
        self.enemy_shots: list[Point] = []

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def define_field(self, rect: Rect) -> None:
        self._field = rect
        self.calls.append(("define_field", (rect,)))

    def define_ship_count(self, count: int) -> None:
        self.calls.append(("define_ship_count", (count,)))

    def define_allowed_ship_sizes(self, sizes: frozenset[Size]) -> None:
        self.calls.append(("define_allowed_ship_sizes", (sizes,)))

    def get_ship_placements(self) -> list[Rect]:
        self.calls.append(("get_ship_placements", ()))
        if len(self._placements) > 1:
            return self._placements.pop(0)
        return list(self._placements[0])

    def enemy_did_shoot(self, point: Point) -> None:
        self.enemy_shots.append(point)
        self.calls.append(("enemy_did_shoot", (point,)))

    def get_next_shooting_position(self) -> Point:
        self.calls.append(("get_next_shooting_position", ()))
        if self._shots:
            return self._shots.pop(0)
        cells = list(self._field.cells())
        point = cells[self._scan % len(cells)]
        self._scan += 1
        return point

    def did_handle_shoot(self, point: Point, outcome: ShotOutcome) -> None:
        self.results.append((point, outcome))
        self.calls.append(("did_handle_shoot", (point, outcome)))

    def on_game_over(self) -> None:
        self.calls.append(("on_game_over", ()))


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def small_config() -> FieldConfiguration:
    return make_small_config()


@pytest.fixture
def scripted_factory():
    def _make(
        name: str,
        ship: Rect | Sequence[Rect] = Rect(0, 0, 2, 1),
        shots: Iterable[Point] = (),
        *,
        attempts: Sequence[Sequence[Rect]] | None = None,
    ) -> ScriptedStrategy:
        if attempts is not None:
            return ScriptedStrategy(name, attempts, shots)
        fleet = [ship] if isinstance(ship, Rect) else list(ship)
        return ScriptedStrategy(name, [fleet], shots)

    return _make
