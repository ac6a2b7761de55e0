"""Tournament orchestration between a fixed pair of strategies."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from robowars.ai.strategy import Strategy
from robowars.core.duel import Duel, TurnReport
from robowars.core.events import DuelFinished
from robowars.core.models import (
    DEFAULT_PLACEMENT_ATTEMPTS,
    DuelState,
    FieldConfiguration,
    FieldSide,
    PlacementFailure,
)
from robowars.runtime.events import EventBus
from robowars.tournament.events import RoundFinished, RoundStarted, TournamentFinished
from robowars.tournament.results import TournamentResults

logger = logging.getLogger(__name__)


class Tournament:
    """Plays one duel per configuration and keeps per-round statistics.

    Even rounds start with the left robot shooting, odd rounds with the
    right one. A robot whose placement is still illegal after
    `max_placement_attempts` requests forfeits the round.
    """

    def __init__(
        self,
        *,
        bus: EventBus | None = None,
        max_placement_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
    ) -> None:
        if max_placement_attempts < 1:
            raise ValueError("max_placement_attempts must be >= 1")
        self._bus = bus if bus is not None else EventBus()
        self._max_placement_attempts = max_placement_attempts
        self._results = TournamentResults()
        self._configs: tuple[FieldConfiguration, ...] = ()
        self._left: Strategy | None = None
        self._right: Strategy | None = None
        self._duel: Duel | None = None
        self._round_index = 0
        self._round_closed = False
        self._finished = False
        self._bus.subscribe(DuelFinished, self._on_duel_finished)

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def results(self) -> TournamentResults:
        return self._results

    @property
    def duel(self) -> Duel | None:
        return self._duel

    @property
    def round_index(self) -> int:
        return self._round_index

    @property
    def round_count(self) -> int:
        return len(self._configs)

    @property
    def is_started(self) -> bool:
        return self._duel is not None

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def current_config(self) -> FieldConfiguration | None:
        return self._duel.config if self._duel is not None else None

    @property
    def state(self) -> DuelState:
        if self._duel is None:
            return DuelState.NOT_READY
        return self._duel.state

    def start(
        self,
        configs: Sequence[FieldConfiguration],
        left: Strategy,
        right: Strategy,
    ) -> None:
        """Reset results and prepare round 0."""
        if not configs:
            raise ValueError("A tournament needs at least one round configuration.")
        if self._duel is not None:
            self._duel.stop_game()
        self._configs = tuple(configs)
        self._left = left
        self._right = right
        self._round_index = 0
        self._finished = False
        self._results.reset()
        logger.info("tournament_started rounds=%d", len(self._configs))
        self._prepare_round()

    def advance(self) -> DuelState:
        """Single control entry point; the transition depends on the duel state."""
        duel = self._duel
        if duel is None or self._finished:
            return self.state
        state = duel.state
        if state is DuelState.NOT_READY:
            self._place_fleets(duel)
        elif state is DuelState.READY:
            duel.start_game()
        elif state is DuelState.IN_PROGRESS:
            duel.pause_game()
        elif state is DuelState.PAUSED:
            duel.resume_game()
        else:
            self._next_round()
        return self.state

    def execute_turn(self) -> TurnReport | None:
        if self._duel is None or self._finished:
            return None
        report = self._duel.execute_turn()
        self._duel.flush_notifications()
        return report

    def abort_round(self) -> None:
        """Stop the running duel; the round is recorded without a winner."""
        if self._duel is None or self._finished:
            return
        self._duel.stop_game()
        self._close_round(None)

    def reset(self) -> None:
        """Abort the running duel and end the tournament with the rounds played so far."""
        if self._duel is None or self._finished:
            return
        self._duel.stop_game()
        self._finish()

    def _prepare_round(self) -> None:
        if self._left is None or self._right is None:
            raise RuntimeError("Tournament strategies are not set.")
        config = self._configs[self._round_index]
        left_first = self._round_index % 2 == 0
        first_shooter = FieldSide.LEFT if left_first else FieldSide.RIGHT
        self._duel = Duel(
            config,
            self._left,
            self._right,
            bus=self._bus,
            left_first=left_first,
            recorder=self._results,
        )
        self._round_closed = False
        self._results.begin_round(self._round_index, config, first_shooter)
        logger.info(
            "round_started index=%d config=%s first=%s",
            self._round_index,
            config.describe(),
            first_shooter,
        )
        self._bus.publish(
            RoundStarted(index=self._round_index, config=config, first_shooter=first_shooter)
        )
        self._place_fleets(self._duel)

    def _place_fleets(self, duel: Duel) -> None:
        failures: list[PlacementFailure] = []
        for attempt in range(1, self._max_placement_attempts + 1):
            failures = duel.prepare()
            if not failures:
                return
            logger.warning(
                "round_placement_retry index=%d attempt=%d failures=%s",
                self._round_index,
                attempt,
                [failure.message for failure in failures],
            )
        self._forfeit(duel, failures)

    def _forfeit(self, duel: Duel, failures: list[PlacementFailure]) -> None:
        failed = tuple(sorted({failure.side for failure in failures}))
        winner = failed[0].opponent if len(failed) == 1 else None
        logger.warning(
            "round_forfeited index=%d failed=%s winner=%s", self._round_index, failed, winner
        )
        duel.stop_game()
        self._close_round(winner, forfeited_by=failed)

    def _on_duel_finished(self, event: DuelFinished) -> None:
        if self._duel is None or self._round_closed:
            return
        self._close_round(event.winner_side)

    def _close_round(
        self, winner: FieldSide | None, *, forfeited_by: tuple[FieldSide, ...] = ()
    ) -> None:
        if self._round_closed:
            return
        self._round_closed = True
        result = self._results.finish_round(winner, forfeited_by=forfeited_by)
        logger.info("round_finished index=%d winner=%s", self._round_index, winner)
        if result is not None:
            self._bus.publish(RoundFinished(result=result))

    def _next_round(self) -> None:
        if not self._round_closed:
            self._close_round(None)
        self._round_index += 1
        if self._round_index >= len(self._configs):
            self._finish()
            return
        self._prepare_round()

    def _finish(self) -> None:
        if not self._round_closed:
            self._close_round(None)
        self._results.freeze()
        self._finished = True
        rounds = self._results.rounds
        logger.info(
            "tournament_finished rounds=%d left_wins=%d right_wins=%d",
            len(rounds),
            self._results.wins(FieldSide.LEFT),
            self._results.wins(FieldSide.RIGHT),
        )
        self._bus.publish(TournamentFinished(rounds=rounds))
