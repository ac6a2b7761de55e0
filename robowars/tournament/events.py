"""Tournament progress events."""

from __future__ import annotations

from dataclasses import dataclass

from robowars.core.models import FieldConfiguration, FieldSide
from robowars.tournament.results import RoundResult


@dataclass(frozen=True, slots=True)
class RoundStarted:
    index: int
    config: FieldConfiguration
    first_shooter: FieldSide


@dataclass(frozen=True, slots=True)
class RoundFinished:
    result: RoundResult


@dataclass(frozen=True, slots=True)
class TournamentFinished:
    rounds: tuple[RoundResult, ...]
