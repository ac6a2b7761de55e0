"""Duel events reported to presentation layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from robowars.core.geometry import Point, Rect
from robowars.core.models import DuelState, FieldSide, PlacementError
from robowars.runtime.events import EventBus, Subscription


@dataclass(frozen=True, slots=True)
class ShipsPlaced:
    placements: tuple[Rect, ...]
    side: FieldSide


@dataclass(frozen=True, slots=True)
class ShotResolved:
    position: Point
    side: FieldSide
    is_hit: bool


@dataclass(frozen=True, slots=True)
class ParticipantMessage:
    text: str
    side: FieldSide


@dataclass(frozen=True, slots=True)
class ParticipantNamed:
    name: str
    side: FieldSide


@dataclass(frozen=True, slots=True)
class StateChanged:
    state: DuelState


@dataclass(frozen=True, slots=True)
class PlacementRejected:
    error: PlacementError | None
    strategy_name: str
    side: FieldSide
    message: str


@dataclass(frozen=True, slots=True)
class DuelFinished:
    winner_name: str
    winner_side: FieldSide


class DuelObserver(Protocol):
    """Callback surface for hosts that prefer methods over event types."""

    def on_ships_placed(self, placements: tuple[Rect, ...], side: FieldSide) -> None: ...

    def on_shot_resolved(self, position: Point, side: FieldSide, is_hit: bool) -> None: ...

    def on_participant_message(self, text: str, side: FieldSide) -> None: ...

    def on_participant_named(self, name: str, side: FieldSide) -> None: ...

    def on_state_changed(self, state: DuelState) -> None: ...

    def on_placement_rejected(self, error: PlacementError | None, strategy_name: str) -> None: ...

    def on_duel_finished(self, winner_name: str, winner_side: FieldSide) -> None: ...


def attach_observer(bus: EventBus, observer: DuelObserver) -> list[Subscription]:
    """Forward duel events on `bus` to observer callbacks."""
    return [
        bus.subscribe(ShipsPlaced, lambda e: observer.on_ships_placed(e.placements, e.side)),
        bus.subscribe(
            ShotResolved, lambda e: observer.on_shot_resolved(e.position, e.side, e.is_hit)
        ),
        bus.subscribe(
            ParticipantMessage, lambda e: observer.on_participant_message(e.text, e.side)
        ),
        bus.subscribe(ParticipantNamed, lambda e: observer.on_participant_named(e.name, e.side)),
        bus.subscribe(StateChanged, lambda e: observer.on_state_changed(e.state)),
        bus.subscribe(
            PlacementRejected,
            lambda e: observer.on_placement_rejected(e.error, e.strategy_name),
        ),
        bus.subscribe(
            DuelFinished, lambda e: observer.on_duel_finished(e.winner_name, e.winner_side)
        ),
    ]
