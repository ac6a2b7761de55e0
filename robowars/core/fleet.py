"""Fleet placement validation and random legal placement."""

from __future__ import annotations

import random
from collections.abc import Sequence

from robowars.core.geometry import Rect, Size
from robowars.core.models import FieldConfiguration, PlacementError, sorted_sizes

_MAX_SHIP_ATTEMPTS = 500
_MAX_FLEET_ATTEMPTS = 20


def dead_zone(placement: Rect) -> Rect:
    """Area around a ship no other ship may touch."""
    return placement.expanded(1)


def validate_fleet(
    placements: Sequence[Rect], config: FieldConfiguration
) -> PlacementError | None:
    """Validate proposed ship placements; returns None when legal."""
    if len(placements) != config.ship_count:
        return PlacementError.INCORRECT_SHIP_COUNT

    for placement in placements:
        if placement.size not in config.allowed_ship_sizes:
            return PlacementError.INCORRECT_SHIP_SIZE

    field = config.field_rect
    for placement in placements:
        if not field.contains_rect(placement):
            return PlacementError.SHIPS_OUT_OF_FIELD

    dead_zones: list[Rect] = []
    for placement in placements:
        if any(zone.intersects(placement) for zone in dead_zones):
            return PlacementError.SHIPS_INTERSECTION
        dead_zones.append(dead_zone(placement))
    return None


def random_fleet(config: FieldConfiguration, rng: random.Random) -> list[Rect]:
    """Generate a legal, non-touching fleet for the configuration.

    Raises RuntimeError when no legal fleet could be found.
    """
    for _ in range(_MAX_FLEET_ATTEMPTS):
        generated = _generate_fleet(config, rng)
        if generated is not None:
            return generated
    # Dense presets can jam random placement; fall back to packing row by row.
    for size in sorted_sizes(config.allowed_ship_sizes):
        packed = _packed_fleet(config, size)
        if packed is not None:
            return packed
    raise RuntimeError(f"Failed to generate random fleet for {config.describe()}.")


def _generate_fleet(config: FieldConfiguration, rng: random.Random) -> list[Rect] | None:
    sizes = sorted_sizes(config.allowed_ship_sizes)
    if not sizes:
        return None
    field = config.field_rect
    dead_zones: list[Rect] = []
    ships: list[Rect] = []

    for _ in range(config.ship_count):
        placed = False
        for _ in range(_MAX_SHIP_ATTEMPTS):
            size = rng.choice(sizes)
            if size.width > field.width or size.height > field.height:
                continue
            x = rng.randint(field.min_x, field.max_x - size.width)
            y = rng.randint(field.min_y, field.max_y - size.height)
            ship = Rect(x, y, size.width, size.height)
            if any(zone.intersects(ship) for zone in dead_zones):
                continue
            ships.append(ship)
            dead_zones.append(dead_zone(ship))
            placed = True
            break
        if not placed:
            return None
    return ships


def _packed_fleet(config: FieldConfiguration, size: Size) -> list[Rect] | None:
    field = config.field_rect
    ships: list[Rect] = []
    dead_zones: list[Rect] = []
    for y in range(field.min_y, field.max_y - size.height + 1):
        for x in range(field.min_x, field.max_x - size.width + 1):
            if len(ships) == config.ship_count:
                return ships
            ship = Rect(x, y, size.width, size.height)
            if any(zone.intersects(ship) for zone in dead_zones):
                continue
            ships.append(ship)
            dead_zones.append(dead_zone(ship))
    return ships if len(ships) == config.ship_count else None
