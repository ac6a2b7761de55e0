"""Hunt robot: random search, then finish a damaged ship by fitting its shape."""

from __future__ import annotations

import random
from enum import IntEnum

import numpy as np

from robowars.ai.rules import FieldRules
from robowars.core.fleet import random_fleet
from robowars.core.geometry import Point, Rect, Size
from robowars.core.models import ShotOutcome, sorted_sizes


class CellState(IntEnum):
    """Shadow-grid knowledge about one enemy cell."""

    UNKNOWN = 0
    MISS = 1
    HIT = 2
    KILLED = 3
    EXCLUDED = 4


_SHIP_BODY = (CellState.UNKNOWN, CellState.HIT)


class HuntRobot:
    """Reference hunt strategy.

    Search mode picks uniformly among unknown cells. After a non-killing hit
    the robot tracks the damaged ship: it takes the bounding box of the hits,
    tries every allowed ship size that can contain it and fires at the first
    open cell of the first placement consistent with the shadow grid. A kill
    excludes the ring around the wreck since ships never touch.
    """

    name = "Godfather"
    greeting_message = "No one will ever kill me, they wouldn't dare"
    win_message = "See you in hell!"
    lose_message = "I'm only going out for a few minutes"

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng
        self._rules = FieldRules()
        self._grid = np.zeros((0, 0), dtype=np.int8)
        self._target_hits: list[Point] = []

    @property
    def grid(self) -> np.ndarray:
        """Shadow grid indexed as [row, col] relative to the field origin."""
        return self._grid

    @property
    def target_hits(self) -> tuple[Point, ...]:
        return tuple(self._target_hits)

    def define_field(self, rect: Rect) -> None:
        self._rules.field_rect = rect

    def define_ship_count(self, count: int) -> None:
        self._rules.ship_count = count

    def define_allowed_ship_sizes(self, sizes: frozenset[Size]) -> None:
        self._rules.ship_sizes = frozenset(sizes)

    def get_ship_placements(self) -> list[Rect]:
        self._reset()
        return random_fleet(self._rules.configuration(), self._rng)

    def enemy_did_shoot(self, point: Point) -> None:
        pass

    def get_next_shooting_position(self) -> Point:
        if self._target_hits:
            target = self._tracking_shot()
            if target is not None:
                return target
            # No legal ship shape explains the hits any more.
            self._target_hits.clear()
        return self._search_shot()

    def did_handle_shoot(self, point: Point, outcome: ShotOutcome) -> None:
        if not self._rules.field_rect.contains(point):
            return
        if outcome is ShotOutcome.MISSED:
            if self._state_at(point) in (CellState.UNKNOWN, CellState.EXCLUDED):
                self._set_state(point, CellState.MISS)
            return

        self._set_state(point, CellState.HIT)
        if point not in self._target_hits:
            self._target_hits.append(point)
        if outcome is ShotOutcome.KILLED:
            self._mark_killed(self._target_hits)
            self._target_hits.clear()

    def on_game_over(self) -> None:
        self._target_hits.clear()

    def _reset(self) -> None:
        rect = self._rules.field_rect
        self._grid = np.zeros((rect.height, rect.width), dtype=np.int8)
        self._target_hits.clear()

    def _search_shot(self) -> Point:
        for state in (CellState.UNKNOWN, CellState.EXCLUDED):
            cells = np.argwhere(self._grid == state)
            if len(cells):
                row, col = cells[self._rng.randrange(len(cells))]
                return self._to_point(int(row), int(col))
        return self._rules.random_point(self._rng)

    def _tracking_shot(self) -> Point | None:
        frame = Rect.from_points(self._target_hits)
        for size in self._candidate_sizes(frame):
            for dx in range(size.width - frame.width + 1):
                for dy in range(size.height - frame.height + 1):
                    location = Rect(frame.x - dx, frame.y - dy, size.width, size.height)
                    if not self._can_fit(location):
                        continue
                    cell = self._first_open_cell(location)
                    if cell is not None:
                        return cell
        return None

    def _candidate_sizes(self, frame: Rect) -> list[Size]:
        return [
            size
            for size in sorted_sizes(self._rules.ship_sizes)
            if size.width >= frame.width and size.height >= frame.height
        ]

    def _can_fit(self, location: Rect) -> bool:
        if not self._rules.field_rect.contains_rect(location):
            return False
        return all(self._state_at(cell) in _SHIP_BODY for cell in location.cells())

    def _first_open_cell(self, location: Rect) -> Point | None:
        for cell in location.cells():
            if self._state_at(cell) is CellState.UNKNOWN:
                return cell
        return None

    def _mark_killed(self, hits: list[Point]) -> None:
        field_rect = self._rules.field_rect
        for hit in hits:
            self._set_state(hit, CellState.KILLED)
        for hit in hits:
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    neighbour = Point(hit.x + dx, hit.y + dy)
                    if not field_rect.contains(neighbour):
                        continue
                    if self._state_at(neighbour) is CellState.UNKNOWN:
                        self._set_state(neighbour, CellState.EXCLUDED)

    def _state_at(self, point: Point) -> CellState:
        rect = self._rules.field_rect
        return CellState(int(self._grid[point.y - rect.y, point.x - rect.x]))

    def _set_state(self, point: Point, state: CellState) -> None:
        rect = self._rules.field_rect
        self._grid[point.y - rect.y, point.x - rect.x] = state

    def _to_point(self, row: int, col: int) -> Point:
        rect = self._rules.field_rect
        return Point(rect.x + col, rect.y + row)
