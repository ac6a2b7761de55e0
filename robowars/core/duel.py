"""Turn-based duel engine between two strategies."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Protocol

from robowars.ai.strategy import Strategy
from robowars.core.events import (
    DuelFinished,
    ParticipantMessage,
    ParticipantNamed,
    PlacementRejected,
    ShipsPlaced,
    ShotResolved,
    StateChanged,
)
from robowars.core.fleet import validate_fleet
from robowars.core.geometry import Point, Rect
from robowars.core.models import (
    DuelState,
    FieldConfiguration,
    FieldSide,
    PlacementFailure,
    ShotOutcome,
)
from robowars.core.ship import Fleet
from robowars.runtime.errors import STRATEGY_FAILURES, log_recoverable
from robowars.runtime.events import EventBus

logger = logging.getLogger(__name__)

_ACTIVE_STATES = frozenset(
    {DuelState.NOT_READY, DuelState.READY, DuelState.IN_PROGRESS, DuelState.PAUSED}
)


class ShotRecorder(Protocol):
    """Receives every shot keyed by the side that fired it."""

    def record_shot(self, shooter: FieldSide, outcome: ShotOutcome) -> None: ...


class StrategyFault(RuntimeError):
    """A strategy raised while the engine was calling into it."""

    def __init__(self, side: FieldSide, strategy_name: str, operation: str) -> None:
        super().__init__(f"Strategy '{strategy_name}' ({side.value}) failed during {operation}.")
        self.side = side
        self.strategy_name = strategy_name
        self.operation = operation


@dataclass(slots=True)
class Participant:
    """Strategy bound to a side and its placed fleet."""

    strategy: Strategy
    side: FieldSide
    fleet: Fleet

    @property
    def name(self) -> str:
        return strategy_name(self.strategy)


@dataclass(frozen=True, slots=True)
class TurnReport:
    """What happened during one executed turn."""

    shooter: FieldSide
    position: Point
    outcome: ShotOutcome
    in_field: bool
    repeated: bool
    finished: bool


class Duel:
    """State machine driving one match.

    The duel never schedules itself: hosts call `execute_turn` once per tick
    while the state is `IN_PROGRESS`.
    """

    def __init__(
        self,
        config: FieldConfiguration,
        left: Strategy,
        right: Strategy,
        *,
        bus: EventBus | None = None,
        left_first: bool = True,
        recorder: ShotRecorder | None = None,
    ) -> None:
        self._config = config
        self._strategies: dict[FieldSide, Strategy] = {FieldSide.LEFT: left, FieldSide.RIGHT: right}
        self._bus = bus if bus is not None else EventBus()
        self._left_first = left_first
        self._recorder = recorder
        self._participants: dict[FieldSide, Participant] = {}
        self._shooter: FieldSide = FieldSide.LEFT if left_first else FieldSide.RIGHT
        self._state = DuelState.NOT_READY
        self._winner: FieldSide | None = None
        self._turn_count = 0
        self._pending: deque[ShotResolved] = deque()

    @property
    def config(self) -> FieldConfiguration:
        return self._config

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def state(self) -> DuelState:
        return self._state

    @property
    def winner(self) -> FieldSide | None:
        return self._winner

    @property
    def shooter_side(self) -> FieldSide:
        return self._shooter

    @property
    def receiver_side(self) -> FieldSide:
        return self._shooter.opponent

    @property
    def turn_count(self) -> int:
        return self._turn_count

    @property
    def pending_notifications(self) -> int:
        return len(self._pending)

    @property
    def left(self) -> Participant | None:
        return self._participants.get(FieldSide.LEFT)

    @property
    def right(self) -> Participant | None:
        return self._participants.get(FieldSide.RIGHT)

    def participant(self, side: FieldSide) -> Participant | None:
        return self._participants.get(side)

    def prepare(self) -> list[PlacementFailure]:
        """Collect and validate both fleets; moves to READY when both are legal."""
        if self._state is not DuelState.NOT_READY:
            logger.debug("duel_prepare_ignored state=%s", self._state)
            return []
        failures: list[PlacementFailure] = []
        for side in (FieldSide.LEFT, FieldSide.RIGHT):
            failure = self._place_fleet(side)
            if failure is not None:
                failures.append(failure)
        if failures:
            self._participants.clear()
            for failure in failures:
                logger.warning(
                    "placement_rejected side=%s reason=%s", failure.side, failure.message
                )
                self._bus.publish(
                    PlacementRejected(
                        error=failure.error,
                        strategy_name=failure.strategy_name,
                        side=failure.side,
                        message=failure.message,
                    )
                )
            return failures
        self._shooter = FieldSide.LEFT if self._left_first else FieldSide.RIGHT
        self._set_state(DuelState.READY)
        return []

    def start_game(self) -> bool:
        if self._state is not DuelState.READY:
            logger.debug("duel_start_ignored state=%s", self._state)
            return False
        logger.info(
            "duel_started config=%s first=%s", self._config.describe(), self._shooter.value
        )
        self._set_state(DuelState.IN_PROGRESS)
        return True

    def pause_game(self) -> bool:
        if self._state is not DuelState.IN_PROGRESS:
            logger.debug("duel_pause_ignored state=%s", self._state)
            return False
        self._set_state(DuelState.PAUSED)
        return True

    def resume_game(self) -> bool:
        if self._state is not DuelState.PAUSED:
            logger.debug("duel_resume_ignored state=%s", self._state)
            return False
        self._set_state(DuelState.IN_PROGRESS)
        return True

    def stop_game(self) -> bool:
        """Force the duel to FINISHED; a duel stopped this way has no winner."""
        if self._state not in _ACTIVE_STATES:
            return False
        self.flush_notifications()
        self._set_state(DuelState.FINISHED)
        return True

    def reset_game(self) -> list[PlacementFailure]:
        """Re-run placement for both strategies after a finished duel."""
        if self._state is not DuelState.FINISHED:
            logger.debug("duel_reset_ignored state=%s", self._state)
            return []
        self._participants.clear()
        self._pending.clear()
        self._winner = None
        self._turn_count = 0
        self._set_state(DuelState.NOT_READY)
        return self.prepare()

    def flush_notifications(self) -> int:
        """Deliver queued shot reports in the order they happened."""
        delivered = 0
        while self._pending:
            self._bus.publish(self._pending.popleft())
            delivered += 1
        return delivered

    def execute_turn(self) -> TurnReport | None:
        """Run one shot; returns None when the duel is not in progress."""
        if self._state is not DuelState.IN_PROGRESS:
            return None
        self.flush_notifications()
        try:
            return self._play_turn()
        except StrategyFault as fault:
            self._disqualify(fault)
            return None

    def _play_turn(self) -> TurnReport:
        shooter = self._participants[self._shooter]
        receiver = self._participants[self._shooter.opponent]
        self._turn_count += 1

        position = self._call(shooter, "get_next_shooting_position")
        if not isinstance(position, Point) or not self._config.field_rect.contains(position):
            logger.debug("shot_out_of_field shooter=%s position=%s", shooter.side, position)
            self._record(shooter.side, ShotOutcome.MISSED)
            self._call(shooter, "did_handle_shoot", position, ShotOutcome.MISSED)
            self._swap()
            return TurnReport(shooter.side, position, ShotOutcome.MISSED, False, False, False)

        self._call(receiver, "enemy_did_shoot", position)
        outcome, repeated = receiver.fleet.resolve_shot(position)
        self._record(shooter.side, outcome)
        self._pending.append(
            ShotResolved(position=position, side=receiver.side, is_hit=outcome.is_hit)
        )
        logger.debug(
            "shot shooter=%s x=%d y=%d outcome=%s repeated=%s",
            shooter.side,
            position.x,
            position.y,
            outcome,
            repeated,
        )

        finished = receiver.fleet.is_destroyed
        try:
            self._call(shooter, "did_handle_shoot", position, outcome)
        except StrategyFault:
            # A destroyed fleet has already decided the duel.
            if not finished:
                raise
        if finished:
            self._finish(shooter.side)
            return TurnReport(shooter.side, position, outcome, True, repeated, True)
        if outcome is ShotOutcome.MISSED:
            self._swap()
        return TurnReport(shooter.side, position, outcome, True, repeated, False)

    def _place_fleet(self, side: FieldSide) -> PlacementFailure | None:
        strategy = self._strategies[side]
        name = strategy_name(strategy)
        try:
            strategy.define_field(self._config.field_rect)
            strategy.define_ship_count(self._config.ship_count)
            strategy.define_allowed_ship_sizes(self._config.allowed_ship_sizes)
            placements = tuple(strategy.get_ship_placements())
            greeting = str(strategy.greeting_message)
        except STRATEGY_FAILURES as exc:
            log_recoverable(logger, "strategy_placement_failed name=%s side=%s", name, side)
            return PlacementFailure(side=side, strategy_name=name, error=None, reason=repr(exc))

        if not all(isinstance(item, Rect) for item in placements):
            return PlacementFailure(
                side=side, strategy_name=name, error=None, reason="placements must be Rect values"
            )

        self._bus.publish(ShipsPlaced(placements=placements, side=side))
        self._bus.publish(ParticipantMessage(text=greeting, side=side))
        self._bus.publish(ParticipantNamed(name=name, side=side))

        error = validate_fleet(placements, self._config)
        if error is not None:
            return PlacementFailure(
                side=side, strategy_name=name, error=error, reason=error.message_for(name)
            )
        self._participants[side] = Participant(
            strategy=strategy, side=side, fleet=Fleet.from_placements(placements)
        )
        logger.info("fleet_placed name=%s side=%s ships=%d", name, side, len(placements))
        return None

    def _finish(self, winner_side: FieldSide) -> None:
        winner = self._participants[winner_side]
        loser = self._participants[winner_side.opponent]
        self.flush_notifications()
        self._bus.publish(
            ParticipantMessage(text=_safe_text(winner.strategy, "win_message"), side=winner.side)
        )
        self._bus.publish(
            ParticipantMessage(text=_safe_text(loser.strategy, "lose_message"), side=loser.side)
        )
        for participant in (winner, loser):
            try:
                participant.strategy.on_game_over()
            except STRATEGY_FAILURES:
                log_recoverable(logger, "strategy_game_over_failed name=%s", participant.name)
        self._winner = winner_side
        self._set_state(DuelState.FINISHED)
        logger.info(
            "duel_finished winner=%s side=%s turns=%d",
            winner.name,
            winner_side,
            self._turn_count,
        )
        self._bus.publish(DuelFinished(winner_name=winner.name, winner_side=winner_side))

    def _disqualify(self, fault: StrategyFault) -> None:
        logger.error("strategy_disqualified %s", fault)
        self._finish(fault.side.opponent)

    def _call(self, participant: Participant, operation: str, *args: object) -> Any:
        try:
            return getattr(participant.strategy, operation)(*args)
        except STRATEGY_FAILURES as exc:
            log_recoverable(
                logger, "strategy_call_failed name=%s operation=%s", participant.name, operation
            )
            raise StrategyFault(participant.side, participant.name, operation) from exc

    def _record(self, shooter: FieldSide, outcome: ShotOutcome) -> None:
        if self._recorder is not None:
            self._recorder.record_shot(shooter, outcome)

    def _swap(self) -> None:
        self._shooter = self._shooter.opponent

    def _set_state(self, state: DuelState) -> None:
        if state is self._state:
            return
        previous = self._state
        self._state = state
        logger.debug("duel_state from=%s to=%s", previous, state)
        self._bus.publish(StateChanged(state=state))


def strategy_name(strategy: Strategy) -> str:
    """Display name of a strategy, tolerating broken implementations."""
    return _safe_text(strategy, "name") or type(strategy).__name__


def _safe_text(strategy: Strategy, attribute: str) -> str:
    try:
        return str(getattr(strategy, attribute))
    except STRATEGY_FAILURES:
        log_recoverable(logger, "strategy_attribute_failed attribute=%s", attribute)
        return ""
