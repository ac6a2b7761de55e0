"""Core domain models shared by the duel engine and tournament."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from robowars.core.geometry import Rect, Size


# Placement requests per round before a side forfeits it.
DEFAULT_PLACEMENT_ATTEMPTS = 3


class ShotOutcome(StrEnum):
    """Result of resolving one shot against a fleet."""

    MISSED = "MISSED"
    DAMAGED = "DAMAGED"
    KILLED = "KILLED"

    @property
    def is_hit(self) -> bool:
        return self is not ShotOutcome.MISSED


class FieldSide(StrEnum):
    """Battlefield side owned by a participant."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def opponent(self) -> FieldSide:
        return FieldSide.RIGHT if self is FieldSide.LEFT else FieldSide.LEFT


class DuelState(StrEnum):
    """Duel lifecycle state."""

    NOT_READY = "NOT_READY"
    READY = "READY"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    PAUSED = "PAUSED"


class PlacementError(StrEnum):
    """Fleet placement rule violations, in validation order."""

    INCORRECT_SHIP_COUNT = "INCORRECT_SHIP_COUNT"
    INCORRECT_SHIP_SIZE = "INCORRECT_SHIP_SIZE"
    SHIPS_OUT_OF_FIELD = "SHIPS_OUT_OF_FIELD"
    SHIPS_INTERSECTION = "SHIPS_INTERSECTION"

    def message_for(self, strategy_name: str) -> str:
        """Human-readable rejection text attributed to a strategy."""
        return _PLACEMENT_MESSAGES[self].format(name=strategy_name)


_PLACEMENT_MESSAGES: dict[PlacementError, str] = {
    PlacementError.INCORRECT_SHIP_COUNT: "Robot {name} returns wrong amount of ships!",
    PlacementError.INCORRECT_SHIP_SIZE: "Robot {name} returns ships with incorrect size!",
    PlacementError.SHIPS_OUT_OF_FIELD: "Robot {name} returns ships with out of field positions!",
    PlacementError.SHIPS_INTERSECTION: (
        "Robot {name} returns ships that intersect each other or are connected!"
    ),
}


@dataclass(frozen=True, slots=True)
class FieldConfiguration:
    """Legality rules for one duel."""

    field_rect: Rect
    ship_count: int
    allowed_ship_sizes: frozenset[Size]
    name: str = "custom"

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        ship_count: int,
        sizes: Iterable[Size],
        *,
        name: str = "custom",
    ) -> FieldConfiguration:
        """Build a configuration for a field anchored at the origin."""
        return cls(
            field_rect=Rect(0, 0, width, height),
            ship_count=ship_count,
            allowed_ship_sizes=frozenset(sizes),
            name=name,
        )

    def describe(self) -> str:
        sizes = ", ".join(str(size) for size in sorted_sizes(self.allowed_ship_sizes))
        return (
            f"field: {self.field_rect.width}x{self.field_rect.height} "
            f"ships: {self.ship_count}, sizes: [{sizes}]"
        )


@dataclass(frozen=True, slots=True)
class PlacementFailure:
    """Attributable placement rejection for one side."""

    side: FieldSide
    strategy_name: str
    error: PlacementError | None
    reason: str

    @property
    def message(self) -> str:
        if self.error is not None:
            return self.error.message_for(self.strategy_name)
        return f"Robot {self.strategy_name} failed to provide ships: {self.reason}"


def sorted_sizes(sizes: Iterable[Size]) -> list[Size]:
    """Stable ordering for size sets."""
    return sorted(sizes, key=lambda size: (size.width, size.height))
