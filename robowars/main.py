"""Command line entry point: run a headless tournament."""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from collections.abc import Sequence

from robowars.ai.registry import available_strategies, create_strategy
from robowars.core.models import FieldConfiguration, FieldSide
from robowars.infra.config import RuntimeSettings, load_default_env_files, load_settings
from robowars.infra.logging import setup_logging, shutdown_logging
from robowars.presets.catalog import get_preset, preset_names
from robowars.presets.schema import configuration_to_payload, payload_to_configuration
from robowars.runtime.runner import TournamentRunner
from robowars.tournament.manager import Tournament
from robowars.tournament.results import RobotStats, RoundResult, TournamentResults

logger = logging.getLogger(__name__)


def build_parser(settings: RuntimeSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="robowars", description="Run a robot battleship tournament."
    )
    parser.add_argument("--left", default="hunt", help="strategy for the left side")
    parser.add_argument("--right", default="teapot", help="strategy for the right side")
    parser.add_argument(
        "--preset",
        action="append",
        default=None,
        help="field preset; repeat to cycle presets across rounds (default: normal)",
    )
    parser.add_argument("--config", help="custom field configuration as a JSON object")
    parser.add_argument("--rounds", type=int, default=settings.rounds)
    parser.add_argument("--seed", type=int, default=settings.seed)
    parser.add_argument("--max-turns", type=int, default=settings.max_turns_per_round)
    parser.add_argument("--placement-attempts", type=int, default=settings.placement_attempts)
    parser.add_argument("--json", action="store_true", help="print the report as JSON")
    parser.add_argument("--list", action="store_true", help="list strategies and presets")
    return parser


def resolve_configurations(
    presets: Sequence[str] | None, custom: str | None, rounds: int
) -> list[FieldConfiguration]:
    """Expand the selected rules to one configuration per round."""
    if rounds < 1:
        raise ValueError("rounds must be >= 1")
    if custom:
        payload = json.loads(custom)
        if not isinstance(payload, dict):
            raise ValueError("--config must be a JSON object.")
        pool = [payload_to_configuration(payload)]
    else:
        pool = [get_preset(name) for name in (presets or ["normal"])]
    return [pool[index % len(pool)] for index in range(rounds)]


def format_report(results: TournamentResults, left_name: str, right_name: str) -> str:
    lines = [f"{'round':<6} {'winner':<16} {left_name:<28} {right_name:<28}"]
    for result in results.rounds:
        lines.append(
            f"{result.index + 1:<6} {_winner_label(result, left_name, right_name):<16} "
            f"{_stats_label(result.left):<28} {_stats_label(result.right):<28}"
        )
    left_wins = results.wins(FieldSide.LEFT)
    left_total = f"{_stats_label(results.totals(FieldSide.LEFT))} w: {left_wins}"
    right_wins = results.wins(FieldSide.RIGHT)
    right_total = f"{_stats_label(results.totals(FieldSide.RIGHT))} w: {right_wins}"
    lines.append(f"{'total':<6} {'':<16} {left_total:<28} {right_total:<28}")
    return "\n".join(lines)


def report_payload(
    results: TournamentResults, left_name: str, right_name: str
) -> dict[str, object]:
    return {
        "left": left_name,
        "right": right_name,
        "rounds": [
            {
                "index": result.index,
                "config": configuration_to_payload(result.config),
                "first_shooter": result.first_shooter.value,
                "winner": result.winner.value if result.winner is not None else None,
                "forfeited_by": [side.value for side in result.forfeited_by],
                "left": _stats_payload(result.left),
                "right": _stats_payload(result.right),
            }
            for result in results.rounds
        ],
        "wins": {side.value: results.wins(side) for side in FieldSide},
    }


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Robowars tournament CLI."""
    load_default_env_files()
    setup_logging()
    try:
        return _run(argv)
    finally:
        shutdown_logging()


def _run(argv: Sequence[str] | None) -> int:
    try:
        settings = load_settings()
    except ValueError as exc:
        logger.error("invalid_settings %s", exc)
        return 2
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.list:
        print("strategies:", ", ".join(available_strategies()))
        for name in preset_names():
            print(f"preset {name}: {get_preset(name).describe()}")
        return 0

    try:
        configs = resolve_configurations(args.preset, args.config, args.rounds)
        rng = random.Random(args.seed)
        left = create_strategy(args.left, random.Random(rng.random()))
        right = create_strategy(args.right, random.Random(rng.random()))
        tournament = Tournament(max_placement_attempts=max(1, args.placement_attempts))
        runner = TournamentRunner(
            tournament,
            tick_seconds=settings.tick_seconds,
            max_turns_per_round=args.max_turns if args.max_turns and args.max_turns > 0 else None,
        )
    except (KeyError, ValueError) as exc:
        parser.error(str(exc))

    logger.info("cli_tournament left=%s right=%s rounds=%d", left.name, right.name, len(configs))
    tournament.start(configs, left, right)
    results = runner.run_to_completion()

    if args.json:
        print(json.dumps(report_payload(results, left.name, right.name), indent=2))
    else:
        print(format_report(results, left.name, right.name))
    return 0


def _winner_label(result: RoundResult, left_name: str, right_name: str) -> str:
    if result.winner is FieldSide.LEFT:
        return left_name
    if result.winner is FieldSide.RIGHT:
        return right_name
    return "-"


def _stats_label(stats: RobotStats) -> str:
    return f"{stats.summary} a: {stats.accuracy}%"


def _stats_payload(stats: RobotStats) -> dict[str, int | bool]:
    return {
        "shots": stats.shots,
        "hits": stats.hits,
        "kills": stats.kills,
        "accuracy": stats.accuracy,
        "winner": stats.winner,
    }


if __name__ == "__main__":
    sys.exit(main())
