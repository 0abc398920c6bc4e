"""Value types shared by the geometry modules.

`Point` is a NamedTuple so callers can pass plain `(x, y)` tuples anywhere a
point is expected. `Bounds` is the axis-aligned `x/y/width/height` box used
by resize, snapping, grouping and export.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Tuple, Union


class Point(NamedTuple):
    x: float
    y: float


PointLike = Union[Point, Tuple[float, float]]


def as_point(p: PointLike) -> Point:
    if isinstance(p, Point):
        return p
    return Point(float(p[0]), float(p[1]))


@dataclass(frozen=True)
class Bounds:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def translated(self, dx: float, dy: float) -> "Bounds":
        return Bounds(self.x + dx, self.y + dy, self.width, self.height)

    @staticmethod
    def from_edges(left: float, top: float, right: float, bottom: float) -> "Bounds":
        return Bounds(left, top, right - left, bottom - top)


def union_of_boxes(boxes: Iterable[Bounds]) -> Bounds:
    """Caja que contiene a todas. Sin cajas -> caja nula en el origen."""
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    empty = True
    for b in boxes:
        empty = False
        min_x = min(min_x, b.x)
        min_y = min(min_y, b.y)
        max_x = max(max_x, b.right)
        max_y = max(max_y, b.bottom)
    if empty:
        return Bounds()
    return Bounds.from_edges(min_x, min_y, max_x, max_y)
