"""Rules a strategy receives before placing its fleet."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from robowars.core.geometry import Point, Rect, Size
from robowars.core.models import FieldConfiguration


@dataclass(slots=True)
class FieldRules:
    """Mutable holder for the rules pushed by the duel engine."""

    field_rect: Rect = Rect(0, 0, 0, 0)
    ship_count: int = 0
    ship_sizes: frozenset[Size] = field(default_factory=frozenset)

    def configuration(self) -> FieldConfiguration:
        return FieldConfiguration(
            field_rect=self.field_rect,
            ship_count=self.ship_count,
            allowed_ship_sizes=self.ship_sizes,
        )

    def random_point(self, rng: random.Random) -> Point:
        """Uniform random cell of the field."""
        rect = self.field_rect
        if rect.width <= 0 or rect.height <= 0:
            return Point(rect.x, rect.y)
        return Point(rng.randrange(rect.min_x, rect.max_x), rng.randrange(rect.min_y, rect.max_y))
