from __future__ import annotations

import json
import logging
import random

import pytest

import robowars.main as cli_module
from robowars.ai.hunt import HuntRobot
from robowars.ai.teapot import TeapotRobot
from robowars.core.events import ShipsPlaced
from robowars.core.models import FieldSide
from robowars.infra.logging import shutdown_logging
from robowars.main import main, resolve_configurations
from robowars.presets.catalog import CLASSIC, NORMAL, get_preset
from robowars.runtime.runner import TournamentRunner
from robowars.tournament.events import RoundStarted
from robowars.tournament.manager import Tournament


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ROBOWARS_APP_DATA_DIR", str(tmp_path / "appdata"))
    for name in ("ROBOWARS_LOG_FILE", "ROBOWARS_SEED", "ROBOWARS_ROUNDS", "ROBOWARS_MAX_TURNS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ROBOWARS_LOG_LEVEL", "WARNING")
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield tmp_path
    shutdown_logging()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_hunt_against_teapot_tournament() -> None:
    tournament = Tournament()
    fleets: list[dict[FieldSide, int]] = []
    tournament.bus.subscribe(RoundStarted, lambda _event: fleets.append({}))
    tournament.bus.subscribe(
        ShipsPlaced,
        lambda event: fleets[-1].__setitem__(
            event.side, sum(rect.width * rect.height for rect in event.placements)
        ),
    )
    configs = [NORMAL, CLASSIC, NORMAL, CLASSIC]
    tournament.start(configs, HuntRobot(random.Random(1)), TeapotRobot(random.Random(2)))

    results = TournamentRunner(tournament, max_turns_per_round=5_000).run_to_completion()

    assert tournament.is_finished
    assert len(results.rounds) == 4
    assert results.wins(FieldSide.LEFT) + results.wins(FieldSide.RIGHT) == 4
    for result, fleet_cells in zip(results.rounds, fleets, strict=True):
        assert result.config == configs[result.index]
        assert result.winner is not None
        winner_stats = result.stats(result.winner)
        assert winner_stats.winner
        assert winner_stats.hits == fleet_cells[result.winner.opponent]
        assert winner_stats.kills == result.config.ship_count
        assert result.stats(result.winner.opponent).kills < result.config.ship_count


def test_resolve_configurations_cycles_presets() -> None:
    configs = resolve_configurations(["fat", "weird"], None, 3)
    assert configs == [get_preset("fat"), get_preset("weird"), get_preset("fat")]

    custom = json.dumps({"field": [6, 6], "ship_count": 1, "ship_sizes": [[2, 1]]})
    (config,) = resolve_configurations(["huge"], custom, 1)
    assert config.name == "custom"
    assert config.field_rect.width == 6

    with pytest.raises(ValueError):
        resolve_configurations(None, None, 0)


def test_cli_prints_json_report(cli_env, capsys) -> None:
    assert main(["--rounds", "2", "--seed", "5", "--preset", "classic", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["left"] == "Godfather"
    assert payload["right"] == "Teapot"
    assert [item["first_shooter"] for item in payload["rounds"]] == ["LEFT", "RIGHT"]
    assert sum(payload["wins"].values()) == 2


def test_cli_prints_table(cli_env, capsys) -> None:
    assert main(["--rounds", "1", "--seed", "3", "--left", "primitive", "--preset", "weird"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split()[:2] == ["round", "winner"]
    assert lines[-1].startswith("total")


def test_cli_lists_strategies_and_presets(cli_env, capsys) -> None:
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "strategies: hunt, primitive, teapot" in out
    assert "preset normal: field: 20x20 ships: 12" in out


def test_cli_rejects_unknown_strategy(cli_env) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--left", "kraken"])
    assert excinfo.value.code == 2


def test_cli_shuts_logging_down_when_the_run_fails(cli_env, monkeypatch) -> None:
    calls: list[str] = []

    def _shutdown() -> None:
        calls.append("shutdown")
        shutdown_logging()

    def _explode(self):
        raise RuntimeError("runner crashed")

    monkeypatch.setattr(cli_module, "shutdown_logging", _shutdown)
    monkeypatch.setattr(TournamentRunner, "run_to_completion", _explode)

    with pytest.raises(RuntimeError, match="runner crashed"):
        main(["--rounds", "1", "--seed", "2"])
    assert calls == ["shutdown"]
