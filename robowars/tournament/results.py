"""Per-round and aggregated tournament statistics."""

from __future__ import annotations

from dataclasses import dataclass, field

from robowars.core.models import FieldConfiguration, FieldSide, ShotOutcome


@dataclass(slots=True)
class RobotStats:
    """Shot counters of one robot in one round."""

    shots: int = 0
    hits: int = 0
    kills: int = 0
    winner: bool = False

    @property
    def accuracy(self) -> int:
        """Hit percentage, 100 for a robot that never fired."""
        if self.shots == 0:
            return 100
        return self.hits * 100 // self.shots

    @property
    def summary(self) -> str:
        return f"s: {self.shots} h: {self.hits} k: {self.kills}"

    def record(self, outcome: ShotOutcome) -> None:
        self.shots += 1
        if outcome is ShotOutcome.MISSED:
            return
        self.hits += 1
        if outcome is ShotOutcome.KILLED:
            self.kills += 1

    def merged(self, other: RobotStats) -> RobotStats:
        return RobotStats(
            shots=self.shots + other.shots,
            hits=self.hits + other.hits,
            kills=self.kills + other.kills,
        )


@dataclass(slots=True)
class RoundResult:
    """Outcome of one duel inside a tournament."""

    index: int
    config: FieldConfiguration
    first_shooter: FieldSide
    left: RobotStats = field(default_factory=RobotStats)
    right: RobotStats = field(default_factory=RobotStats)
    winner: FieldSide | None = None
    forfeited_by: tuple[FieldSide, ...] = ()

    def stats(self, side: FieldSide) -> RobotStats:
        return self.left if side is FieldSide.LEFT else self.right


class TournamentResults:
    """Ordered round results; stops accepting updates once frozen."""

    def __init__(self) -> None:
        self._rounds: list[RoundResult] = []
        self._current: RoundResult | None = None
        self._frozen = False

    @property
    def rounds(self) -> tuple[RoundResult, ...]:
        return tuple(self._rounds)

    @property
    def current(self) -> RoundResult | None:
        return self._current

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def reset(self) -> None:
        self._rounds.clear()
        self._current = None
        self._frozen = False

    def begin_round(self, index: int, config: FieldConfiguration, first_shooter: FieldSide) -> None:
        if self._frozen:
            return
        self._current = RoundResult(index=index, config=config, first_shooter=first_shooter)

    def record_shot(self, shooter: FieldSide, outcome: ShotOutcome) -> None:
        """Credit a shot to the robot that fired it."""
        if self._frozen or self._current is None:
            return
        self._current.stats(shooter).record(outcome)

    def finish_round(
        self, winner: FieldSide | None, *, forfeited_by: tuple[FieldSide, ...] = ()
    ) -> RoundResult | None:
        current = self._current
        if self._frozen or current is None:
            return None
        current.winner = winner
        current.forfeited_by = forfeited_by
        current.left.winner = winner is FieldSide.LEFT
        current.right.winner = winner is FieldSide.RIGHT
        self._rounds.append(current)
        self._current = None
        return current

    def freeze(self) -> None:
        self._current = None
        self._frozen = True

    def wins(self, side: FieldSide) -> int:
        return sum(1 for result in self._rounds if result.winner is side)

    def totals(self, side: FieldSide) -> RobotStats:
        total = RobotStats()
        for result in self._rounds:
            total = total.merged(result.stats(side))
        return total
