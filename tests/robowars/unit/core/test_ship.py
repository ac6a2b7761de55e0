import random

from robowars.core.geometry import Point, Rect
from robowars.core.models import ShotOutcome
from robowars.core.ship import Fleet, Ship


def test_ship_tracks_remaining_cells_until_killed() -> None:
    ship = Ship(Rect(1, 1, 2, 1))
    assert ship.cell_count == 2
    assert ship.resolve_shot(Point(0, 0)) is ShotOutcome.MISSED
    assert ship.resolve_shot(Point(1, 1)) is ShotOutcome.DAMAGED
    assert ship.was_hit(Point(1, 1))
    assert ship.is_alive
    assert ship.resolve_shot(Point(2, 1)) is ShotOutcome.KILLED
    assert not ship.is_alive
    assert ship.remaining_cells == frozenset()


def test_ship_rehit_is_a_miss() -> None:
    ship = Ship(Rect(0, 0, 1, 2))
    assert ship.resolve_shot(Point(0, 0)) is ShotOutcome.DAMAGED
    assert ship.resolve_shot(Point(0, 0)) is ShotOutcome.MISSED
    assert ship.remaining_cells == frozenset({Point(0, 1)})


def test_fleet_resolve_reports_repeated_hits() -> None:
    fleet = Fleet.from_placements([Rect(0, 0, 1, 1), Rect(2, 2, 2, 1)])
    assert len(fleet) == 2

    assert fleet.resolve_shot(Point(1, 1)) == (ShotOutcome.MISSED, False)
    assert fleet.resolve_shot(Point(0, 0)) == (ShotOutcome.KILLED, False)
    assert fleet.resolve_shot(Point(0, 0)) == (ShotOutcome.MISSED, True)
    assert len(fleet.alive_ships) == 1
    assert not fleet.is_destroyed

    assert fleet.resolve_shot(Point(2, 2)) == (ShotOutcome.DAMAGED, False)
    assert fleet.resolve_shot(Point(3, 2)) == (ShotOutcome.KILLED, False)
    assert fleet.is_destroyed


def test_total_life_equals_sum_of_cells() -> None:
    fleet = Fleet.from_placements([Rect(0, 0, 3, 2), Rect(5, 5, 1, 4)])
    assert sum(ship.cell_count for ship in fleet.ships) == 10
    assert sum(len(ship.remaining_cells) for ship in fleet.ships) == 10


def test_every_cell_in_any_order_yields_one_kill() -> None:
    footprint = Rect(4, 1, 3, 2)
    cells = list(footprint.cells())
    random.Random(5).shuffle(cells)
    ship = Ship(footprint)

    outcomes = [ship.resolve_shot(cell) for cell in cells]
    assert outcomes[-1] is ShotOutcome.KILLED
    assert outcomes[:-1] == [ShotOutcome.DAMAGED] * 5
