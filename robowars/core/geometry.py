"""Integer grid geometry used for fields, ships and shots."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Point:
    """Grid cell."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class Size:
    """Rectangle dimensions in cells."""

    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def transposed(self) -> Size:
        return Size(self.height, self.width)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle; max edges are exclusive."""

    x: int
    y: int
    width: int
    height: int

    @property
    def min_x(self) -> int:
        return self.x

    @property
    def min_y(self) -> int:
        return self.y

    @property
    def max_x(self) -> int:
        return self.x + self.width

    @property
    def max_y(self) -> int:
        return self.y + self.height

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def contains(self, point: Point) -> bool:
        """Return whether the cell lies inside the rectangle."""
        return self.min_x <= point.x < self.max_x and self.min_y <= point.y < self.max_y

    def contains_rect(self, other: Rect) -> bool:
        """Return whether `other` lies fully inside this rectangle."""
        return (
            self.min_x <= other.min_x
            and self.min_y <= other.min_y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )

    def intersects(self, other: Rect) -> bool:
        """Return whether both rectangles share a positive area."""
        return (
            self.min_x < other.max_x
            and other.min_x < self.max_x
            and self.min_y < other.max_y
            and other.min_y < self.max_y
        )

    def expanded(self, by: int) -> Rect:
        """Grow the rectangle by `by` cells on every side."""
        return Rect(self.x - by, self.y - by, self.width + 2 * by, self.height + 2 * by)

    def cells(self) -> Iterator[Point]:
        """Yield every cell row by row."""
        for y in range(self.min_y, self.max_y):
            for x in range(self.min_x, self.max_x):
                yield Point(x, y)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Rect:
        """Return the bounding box of the given cells."""
        items = list(points)
        if not items:
            raise ValueError("Cannot build a bounding box from no points.")
        min_x = min(point.x for point in items)
        min_y = min(point.y for point in items)
        max_x = max(point.x for point in items)
        max_y = max(point.y for point in items)
        return cls(min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)

    def __str__(self) -> str:
        return f"({self.x}, {self.y}) {self.width}x{self.height}"
