"""Pacing loop that drives tournament turns from a scheduler."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from robowars.core.models import DuelState
from robowars.runtime.scheduler import Scheduler, TaskHandle, interval_for_speed
from robowars.tournament.manager import Tournament
from robowars.tournament.results import TournamentResults

logger = logging.getLogger(__name__)


class TournamentRunner:
    """Owns the repeating tick that executes one duel turn at a time.

    The tournament and duel stay synchronous; pausing cancels the tick and
    resuming schedules a fresh one.
    """

    def __init__(
        self,
        tournament: Tournament,
        scheduler: Scheduler | None = None,
        *,
        tick_seconds: float = 0.1,
        max_turns_per_round: int | None = None,
        auto_advance: bool = True,
    ) -> None:
        if tick_seconds <= 0.0:
            raise ValueError("tick_seconds must be > 0")
        if max_turns_per_round is not None and max_turns_per_round < 1:
            raise ValueError("max_turns_per_round must be >= 1")
        self._tournament = tournament
        self._scheduler = scheduler if scheduler is not None else Scheduler()
        self._tick_seconds = tick_seconds
        self._max_turns = max_turns_per_round
        self._auto_advance = auto_advance
        self._handle: TaskHandle | None = None
        self._in_tick = False
        self._round_turns = 0

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def tick_seconds(self) -> float:
        return self._tick_seconds

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    def set_speed(self, speed: int) -> None:
        """Apply a game speed level to the running tick."""
        self._tick_seconds = interval_for_speed(speed)
        if self._handle is not None:
            self._scheduler.set_interval(self._handle, self._tick_seconds)

    def play(self) -> None:
        """Bring the current duel into progress and start ticking."""
        tournament = self._tournament
        if not tournament.is_started:
            raise RuntimeError("Tournament has not been started.")
        while not tournament.is_finished and tournament.state is not DuelState.IN_PROGRESS:
            if tournament.state is DuelState.FINISHED:
                self._round_turns = 0
            tournament.advance()
        if tournament.is_finished:
            self._cancel()
            return
        if self._handle is None:
            self._handle = self._scheduler.call_every(
                self._tick_seconds, self._tick, label="duel-turn"
            )

    def pause(self) -> None:
        self._cancel()
        if self._tournament.state is DuelState.IN_PROGRESS:
            self._tournament.advance()

    def run_to_completion(self) -> TournamentResults:
        """Drive the virtual clock as fast as possible until the tournament ends."""
        self.play()
        while not self._tournament.is_finished:
            if self._scheduler.advance_to_next() == 0:
                break
        return self._tournament.results

    def run_realtime(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> TournamentResults:
        """Drive the scheduler against wall time."""
        self.play()
        origin = clock() - self._scheduler.now_seconds
        while not self._tournament.is_finished:
            due = self._scheduler.next_due_seconds()
            if due is None:
                break
            wait = due - (clock() - origin)
            if wait > 0:
                sleep(wait)
            self._scheduler.run_due(max(due, clock() - origin))
        return self._tournament.results

    def _tick(self) -> None:
        if self._in_tick:
            logger.debug("tick_skipped reason=reentrant")
            return
        self._in_tick = True
        try:
            self._tournament.execute_turn()
            self._round_turns += 1
            if (
                self._max_turns is not None
                and self._round_turns >= self._max_turns
                and self._tournament.state is DuelState.IN_PROGRESS
            ):
                logger.warning(
                    "round_turn_limit index=%d turns=%d",
                    self._tournament.round_index,
                    self._round_turns,
                )
                self._tournament.abort_round()
            if self._tournament.state is DuelState.FINISHED:
                self._cancel()
                if self._auto_advance and not self._tournament.is_finished:
                    self.play()
        finally:
            self._in_tick = False

    def _cancel(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
