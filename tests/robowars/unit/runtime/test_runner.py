from __future__ import annotations

import pytest

from robowars.core.geometry import Point, Rect
from robowars.core.models import DuelState, FieldSide
from robowars.runtime.runner import TournamentRunner
from robowars.runtime.scheduler import Scheduler
from robowars.tournament.manager import Tournament

LEFT_SHIP = Rect(0, 0, 2, 1)
RIGHT_SHIP = Rect(2, 2, 1, 2)


def _started(small_config, scripted_factory, rounds: int = 2, **shots) -> Tournament:
    tournament = Tournament()
    tournament.start(
        [small_config] * rounds,
        scripted_factory("Lefty", LEFT_SHIP, shots.get("left", ())),
        scripted_factory("Righty", RIGHT_SHIP, shots.get("right", ())),
    )
    return tournament


def test_run_to_completion_plays_every_round(small_config, scripted_factory) -> None:
    tournament = _started(small_config, scripted_factory, rounds=3)
    runner = TournamentRunner(tournament, tick_seconds=0.5)

    results = runner.run_to_completion()
    assert tournament.is_finished
    assert len(results.rounds) == 3
    assert not runner.is_running
    assert runner.scheduler.now_seconds > 0


def test_turn_limit_aborts_round(small_config, scripted_factory) -> None:
    wild = [Point(9, 9)] * 50
    tournament = _started(small_config, scripted_factory, rounds=1, left=wild, right=wild)
    runner = TournamentRunner(tournament, max_turns_per_round=5)

    results = runner.run_to_completion()
    result = results.rounds[0]
    assert result.winner is None
    assert (result.left.shots, result.right.shots) == (3, 2)
    assert result.stats(FieldSide.LEFT).accuracy == 0


def test_pause_cancels_ticking(small_config, scripted_factory) -> None:
    tournament = _started(small_config, scripted_factory)
    scheduler = Scheduler()
    runner = TournamentRunner(tournament, scheduler, tick_seconds=1.0)

    runner.play()
    assert runner.is_running
    assert tournament.state is DuelState.IN_PROGRESS
    scheduler.advance(1.0)
    duel = tournament.duel
    assert duel is not None and duel.turn_count == 1

    runner.pause()
    assert not runner.is_running
    assert tournament.state is DuelState.PAUSED
    scheduler.advance(10.0)
    assert duel.turn_count == 1

    runner.play()
    assert tournament.state is DuelState.IN_PROGRESS
    scheduler.advance(1.0)
    assert duel.turn_count == 2


def test_without_auto_advance_runner_stops_after_round(small_config, scripted_factory) -> None:
    tournament = _started(small_config, scripted_factory)
    runner = TournamentRunner(tournament, auto_advance=False)

    runner.run_to_completion()
    assert tournament.state is DuelState.FINISHED
    assert not tournament.is_finished
    assert tournament.round_index == 0
    assert not runner.is_running


def test_set_speed_updates_running_tick(small_config, scripted_factory) -> None:
    tournament = _started(small_config, scripted_factory)
    scheduler = Scheduler()
    runner = TournamentRunner(tournament, scheduler, tick_seconds=1.0)
    runner.play()
    scheduler.advance(1.0)

    runner.set_speed(2)
    assert runner.tick_seconds == 0.25
    assert scheduler.advance(1.25) == 2


def test_run_realtime_sleeps_between_ticks(small_config, scripted_factory) -> None:
    tournament = _started(small_config, scripted_factory, rounds=1)
    runner = TournamentRunner(tournament, tick_seconds=0.5)
    now = [100.0]
    sleeps: list[float] = []

    def _sleep(seconds: float) -> None:
        sleeps.append(seconds)
        now[0] += seconds

    results = runner.run_realtime(clock=lambda: now[0], sleep=_sleep)
    assert len(results.rounds) == 1
    assert sleeps
    assert all(seconds == pytest.approx(0.5) for seconds in sleeps)


def test_play_requires_started_tournament() -> None:
    with pytest.raises(RuntimeError):
        TournamentRunner(Tournament()).play()


def test_invalid_runner_settings() -> None:
    with pytest.raises(ValueError):
        TournamentRunner(Tournament(), tick_seconds=0.0)
    with pytest.raises(ValueError):
        TournamentRunner(Tournament(), max_turns_per_round=0)
