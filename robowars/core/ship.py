"""Ship footprint and per-cell life tracking."""

from __future__ import annotations

from collections.abc import Iterable

from robowars.core.geometry import Point, Rect
from robowars.core.models import ShotOutcome


class Ship:
    """Rectangular ship with the set of cells that are still alive."""

    __slots__ = ("_footprint", "_remaining")

    def __init__(self, footprint: Rect) -> None:
        self._footprint = footprint
        self._remaining: set[Point] = set(footprint.cells())

    @property
    def footprint(self) -> Rect:
        return self._footprint

    @property
    def remaining_cells(self) -> frozenset[Point]:
        return frozenset(self._remaining)

    @property
    def cell_count(self) -> int:
        return self._footprint.width * self._footprint.height

    @property
    def is_alive(self) -> bool:
        return bool(self._remaining)

    def was_hit(self, point: Point) -> bool:
        """Return whether a footprint cell has already been destroyed."""
        return self._footprint.contains(point) and point not in self._remaining

    def resolve_shot(self, point: Point) -> ShotOutcome:
        """Apply a shot and report its outcome.

        Shots at cells that were already destroyed count as misses.
        """
        if not self._footprint.contains(point):
            return ShotOutcome.MISSED
        if point not in self._remaining:
            return ShotOutcome.MISSED
        self._remaining.discard(point)
        if not self._remaining:
            return ShotOutcome.KILLED
        return ShotOutcome.DAMAGED

    def __repr__(self) -> str:
        return f"Ship(footprint={self._footprint!r}, remaining={len(self._remaining)})"


class Fleet:
    """Ordered, fixed membership collection of ships."""

    __slots__ = ("_ships",)

    def __init__(self, ships: Iterable[Ship]) -> None:
        self._ships: tuple[Ship, ...] = tuple(ships)

    @classmethod
    def from_placements(cls, placements: Iterable[Rect]) -> Fleet:
        return cls(Ship(rect) for rect in placements)

    @property
    def ships(self) -> tuple[Ship, ...]:
        return self._ships

    @property
    def alive_ships(self) -> list[Ship]:
        return [ship for ship in self._ships if ship.is_alive]

    @property
    def is_destroyed(self) -> bool:
        return not any(ship.is_alive for ship in self._ships)

    def resolve_shot(self, point: Point) -> tuple[ShotOutcome, bool]:
        """Resolve a shot; returns the outcome and whether the cell was already hit."""
        for ship in self._ships:
            if not ship.footprint.contains(point):
                continue
            repeated = ship.was_hit(point)
            return ship.resolve_shot(point), repeated
        return ShotOutcome.MISSED, False

    def __len__(self) -> int:
        return len(self._ships)
