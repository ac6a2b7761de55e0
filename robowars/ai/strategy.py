"""Strategy ("robot") contract driven by the duel engine."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from robowars.core.geometry import Point, Rect, Size
from robowars.core.models import ShotOutcome


@runtime_checkable
class Strategy(Protocol):
    """Pluggable decision maker for one side of a duel.

    Calls arrive in a fixed order per duel: the three `define_*` rules
    pushes, `get_ship_placements`, then alternating shooting callbacks and
    finally `on_game_over`. Implementations should reset their internal
    model when placements are requested.
    """

    @property
    def name(self) -> str: ...

    @property
    def greeting_message(self) -> str: ...

    @property
    def win_message(self) -> str: ...

    @property
    def lose_message(self) -> str: ...

    def define_field(self, rect: Rect) -> None: ...

    def define_ship_count(self, count: int) -> None: ...

    def define_allowed_ship_sizes(self, sizes: frozenset[Size]) -> None: ...

    def get_ship_placements(self) -> Sequence[Rect]: ...

    def enemy_did_shoot(self, point: Point) -> None: ...

    def get_next_shooting_position(self) -> Point: ...

    def did_handle_shoot(self, point: Point, outcome: ShotOutcome) -> None: ...

    def on_game_over(self) -> None: ...
