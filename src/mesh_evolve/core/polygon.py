"""Area-weighted point sampling inside a triangle fan."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from mesh_evolve.core.point import Point
from mesh_evolve.core.rng import get_rng
from mesh_evolve.core.triangle import Triangle

Edge = Tuple[Point, Point]


class Polygon:
    """A fan of triangles sharing a root point.

    Each edge ``(left, right)`` forms the triangle ``(root, left, right)``.
    """

    def __init__(self, root: Point, edges: Sequence[Edge]):
        self.root = root
        self.edges = tuple(edges)

    def triangles(self) -> List[Triangle]:
        return [Triangle(self.root, left, right) for left, right in self.edges]

    def areas(self) -> List[int]:
        """Doubled absolute area of each fan triangle."""
        return [abs(tri.signed_area2()) for tri in self.triangles()]

    def contains(self, point: Point) -> bool:
        return any(tri.contains(point) for tri in self.triangles())

    def keeps_orientation(self, point: Point) -> bool:
        """Whether re-rooting the fan at ``point`` leaves every triangle's winding unchanged.

        A triangle that would become flat or wind the other way fails.
        """
        for left, right in self.edges:
            before = Triangle(self.root, left, right).signed_area2()
            after = Triangle(point, left, right).signed_area2()
            if before * after <= 0:
                return False
        return True

    def random_point(self, rng: Optional[np.random.Generator] = None) -> Point:
        """Draw a point uniformly by area from the fan.

        A triangle is chosen with probability proportional to its area, then
        a point inside it is picked with the parallelogram fold. A fan with
        no area returns the root unchanged.
        """
        if rng is None:
            rng = get_rng()

        areas = self.areas()
        total = sum(areas)
        if total == 0:
            return self.root

        draw = int(rng.integers(0, total))
        index = int(np.searchsorted(np.cumsum(areas), draw, side="right"))
        left, right = self.edges[index]

        a, b = rng.random(), rng.random()
        if a + b > 1:
            a, b = 1 - a, 1 - b

        x = self.root.x + a * (left.x - self.root.x) + b * (right.x - self.root.x)
        y = self.root.y + a * (left.y - self.root.y) + b * (right.y - self.root.y)

        return _snap_inside(Triangle(self.root, left, right), x, y)


def _snap_inside(tri: Triangle, x: float, y: float) -> Point:
    """Move a real-valued sample onto an integer point inside ``tri``."""
    nearest = Point(int(round(x)), int(round(y)))
    if tri.contains(nearest):
        return nearest

    for px in (math.floor(x), math.ceil(x)):
        for py in (math.floor(y), math.ceil(y)):
            candidate = Point(int(px), int(py))
            if tri.contains(candidate):
                return candidate

    return tri.first
