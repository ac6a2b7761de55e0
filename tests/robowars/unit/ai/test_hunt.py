from __future__ import annotations

import random

from robowars.ai.hunt import CellState, HuntRobot
from robowars.core.fleet import validate_fleet
from robowars.core.geometry import Point, Rect, Size
from robowars.core.models import FieldConfiguration, ShotOutcome


def _robot(config: FieldConfiguration, seed: int = 3) -> HuntRobot:
    robot = HuntRobot(random.Random(seed))
    robot.define_field(config.field_rect)
    robot.define_ship_count(config.ship_count)
    robot.define_allowed_ship_sizes(config.allowed_ship_sizes)
    return robot


def test_hunt_places_legal_fleet() -> None:
    config = FieldConfiguration.create(10, 10, 3, (Size(3, 1), Size(1, 3)))
    robot = _robot(config)
    placements = robot.get_ship_placements()
    assert validate_fleet(placements, config) is None
    assert robot.grid.shape == (10, 10)


def test_hunt_tracks_hits_along_the_ship_axis() -> None:
    config = FieldConfiguration.create(10, 10, 1, (Size(3, 1), Size(1, 3)))
    robot = _robot(config)
    robot.get_ship_placements()

    robot.did_handle_shoot(Point(5, 5), ShotOutcome.DAMAGED)
    robot.did_handle_shoot(Point(6, 5), ShotOutcome.DAMAGED)
    assert robot.target_hits == (Point(5, 5), Point(6, 5))

    shot = robot.get_next_shooting_position()
    assert shot in {Point(4, 5), Point(7, 5)}


def test_hunt_respects_misses_while_tracking() -> None:
    config = FieldConfiguration.create(10, 10, 1, (Size(3, 1), Size(1, 3)))
    robot = _robot(config)
    robot.get_ship_placements()

    robot.did_handle_shoot(Point(7, 5), ShotOutcome.MISSED)
    robot.did_handle_shoot(Point(5, 5), ShotOutcome.DAMAGED)
    robot.did_handle_shoot(Point(6, 5), ShotOutcome.DAMAGED)
    assert robot.get_next_shooting_position() == Point(4, 5)


def test_hunt_excludes_ring_around_killed_ship() -> None:
    config = FieldConfiguration.create(6, 6, 2, (Size(2, 1), Size(1, 2)))
    robot = _robot(config)
    robot.get_ship_placements()

    robot.did_handle_shoot(Point(0, 0), ShotOutcome.DAMAGED)
    robot.did_handle_shoot(Point(1, 0), ShotOutcome.KILLED)

    grid = robot.grid
    assert grid[0, 0] == CellState.KILLED
    assert grid[0, 1] == CellState.KILLED
    for row, col in ((0, 2), (1, 0), (1, 1), (1, 2)):
        assert grid[row, col] == CellState.EXCLUDED
    assert robot.target_hits == ()

    excluded = {Point(2, 0), Point(0, 1), Point(1, 1), Point(2, 1), Point(0, 0), Point(1, 0)}
    for _ in range(20):
        assert robot.get_next_shooting_position() not in excluded


def test_hunt_search_never_repeats_until_field_is_known() -> None:
    config = FieldConfiguration.create(4, 4, 1, (Size(1, 1),))
    robot = _robot(config)
    robot.get_ship_placements()

    seen: set[Point] = set()
    for _ in range(16):
        shot = robot.get_next_shooting_position()
        assert shot not in seen
        seen.add(shot)
        robot.did_handle_shoot(shot, ShotOutcome.MISSED)
    assert seen == set(Rect(0, 0, 4, 4).cells())
    assert config.field_rect.contains(robot.get_next_shooting_position())


def test_hunt_resets_between_duels() -> None:
    config = FieldConfiguration.create(5, 5, 1, (Size(2, 1), Size(1, 2)))
    robot = _robot(config)
    robot.get_ship_placements()
    robot.did_handle_shoot(Point(1, 1), ShotOutcome.DAMAGED)

    robot.on_game_over()
    robot.get_ship_placements()
    assert robot.target_hits == ()
    assert not robot.grid.any()


def _offset_config() -> FieldConfiguration:
    return FieldConfiguration(
        field_rect=Rect(10, 20, 6, 5),
        ship_count=2,
        allowed_ship_sizes=frozenset({Size(2, 1), Size(1, 2)}),
    )


def test_hunt_grid_is_relative_to_field_origin() -> None:
    config = _offset_config()
    robot = _robot(config)
    placements = robot.get_ship_placements()
    assert validate_fleet(placements, config) is None
    assert robot.grid.shape == (5, 6)

    robot.did_handle_shoot(Point(10, 20), ShotOutcome.DAMAGED)
    robot.did_handle_shoot(Point(11, 20), ShotOutcome.KILLED)

    grid = robot.grid
    assert grid[0, 0] == CellState.KILLED
    assert grid[0, 1] == CellState.KILLED
    assert grid[0, 2] == CellState.EXCLUDED
    assert grid[1, 0] == CellState.EXCLUDED
    assert grid[1, 2] == CellState.EXCLUDED
    assert grid[2, 0] == CellState.UNKNOWN


def test_hunt_search_shots_stay_inside_offset_field() -> None:
    config = _offset_config()
    robot = _robot(config, seed=11)
    robot.get_ship_placements()

    seen: set[Point] = set()
    for _ in range(config.field_rect.width * config.field_rect.height):
        shot = robot.get_next_shooting_position()
        assert config.field_rect.contains(shot)
        assert shot not in seen
        seen.add(shot)
        robot.did_handle_shoot(shot, ShotOutcome.MISSED)
    assert seen == set(config.field_rect.cells())


def test_hunt_tracks_hits_on_offset_field() -> None:
    config = FieldConfiguration(
        field_rect=Rect(-4, 7, 8, 8),
        ship_count=1,
        allowed_ship_sizes=frozenset({Size(3, 1), Size(1, 3)}),
    )
    robot = _robot(config)
    robot.get_ship_placements()

    robot.did_handle_shoot(Point(0, 9), ShotOutcome.DAMAGED)
    robot.did_handle_shoot(Point(0, 10), ShotOutcome.DAMAGED)
    assert robot.get_next_shooting_position() in {Point(0, 8), Point(0, 11)}
