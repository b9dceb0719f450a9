"""Triangle primitive with exact integer area math and two rasterizers."""

from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np

from mesh_evolve.core.point import Point


def _ceil_to(value: int, step: int) -> int:
    """Smallest multiple of ``step`` that is >= ``value``."""
    return -(-value // step) * step


def _signed_area2(p: Point, q: Point, r: Point) -> int:
    return p.x * (q.y - r.y) + q.x * (r.y - p.y) + r.x * (p.y - q.y)


def _signed_area2_grid(p: Point, q: Point, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Doubled signed area of (p, q, (xs, ys)) for every grid point at once."""
    return p.x * (q.y - ys) + q.x * (ys - p.y) + xs * (p.y - q.y)


class Triangle:
    """A triangle on the canvas.

    Areas are computed with Python integers, so the shoelace products
    cannot overflow whatever the coordinates are.
    """

    __slots__ = ("first", "second", "third")

    def __init__(self, first: Point, second: Point, third: Point):
        self.first = first
        self.second = second
        self.third = third

    def __repr__(self) -> str:
        return f"Triangle({self.first}, {self.second}, {self.third})"

    @property
    def vertices(self) -> Tuple[Point, Point, Point]:
        return (self.first, self.second, self.third)

    def signed_area2(self) -> int:
        """Twice the signed area (positive when the vertices wind clockwise on screen)."""
        return _signed_area2(self.first, self.second, self.third)

    def area(self) -> int:
        """Absolute area, rounded down to an integer."""
        return abs(self.signed_area2()) // 2

    def is_degenerate(self) -> bool:
        return self.signed_area2() == 0

    def contains(self, point: Point) -> bool:
        """Inside test by the sum-of-sub-areas identity (boundary counts as inside)."""
        total = abs(self.signed_area2())
        parts = (
            abs(_signed_area2(self.first, self.second, point))
            + abs(_signed_area2(self.second, self.third, point))
            + abs(_signed_area2(self.first, self.third, point))
        )
        return parts == total

    def bounding_box(self) -> Tuple[Point, Point]:
        xs = (self.first.x, self.second.x, self.third.x)
        ys = (self.first.y, self.second.y, self.third.y)
        return Point(min(xs), min(ys)), Point(max(xs), max(ys))

    def rasterize(
        self,
        draw_first_second: bool = True,
        draw_second_third: bool = True,
        draw_first_third: bool = True,
    ) -> Iterator[Point]:
        """Brute-force fill over the bounding box.

        A lattice point is inside when the three sub-triangle areas it forms
        with the edges sum to the triangle's own area. The ``draw_*`` flags
        decide whether points lying exactly on the corresponding edge are
        emitted, which lets neighbouring triangles share an edge without
        both drawing it.

        Args:
            draw_first_second: Emit points on the first-second edge.
            draw_second_third: Emit points on the second-third edge.
            draw_first_third: Emit points on the first-third edge.

        Yields:
            Points inside the triangle, column by column.
        """
        total = abs(self.signed_area2())
        if total == 0:
            return

        low, high = self.bounding_box()
        xs, ys = np.meshgrid(
            np.arange(low.x, high.x + 1, dtype=np.int64),
            np.arange(low.y, high.y + 1, dtype=np.int64),
            indexing="ij",
        )

        first_second = np.abs(_signed_area2_grid(self.first, self.second, xs, ys))
        second_third = np.abs(_signed_area2_grid(self.second, self.third, xs, ys))
        first_third = np.abs(_signed_area2_grid(self.first, self.third, xs, ys))

        inside = (first_second + second_third + first_third) == total
        if not draw_first_second:
            inside &= first_second != 0
        if not draw_second_third:
            inside &= second_third != 0
        if not draw_first_third:
            inside &= first_third != 0

        for x, y in zip(xs[inside].tolist(), ys[inside].tolist()):
            yield Point(x, y)

    def scanline(
        self,
        block_size: Tuple[int, int] = (1, 1),
        offset: Tuple[int, int] = (0, 0),
    ) -> Iterator[Point]:
        """Sorted-scanline fill sampled on a grid of pixel blocks.

        Samples lie on multiples of ``block_size`` after ``offset`` has been
        subtracted from every vertex. Rows run from the lowest vertex up to,
        but excluding, the highest; columns from the left edge up to, but
        excluding, the right edge.

        Args:
            block_size: Canvas units per output pixel on each axis.
            offset: Sampling phase subtracted from every vertex.

        Yields:
            Sample positions in block units.
        """
        step_x, step_y = block_size
        v1, v2, v3 = sorted(self.vertices, key=lambda p: p.y, reverse=True)

        if v1.y == v3.y:
            return

        x1, y1 = v1.x - offset[0], v1.y - offset[1]
        x2, y2 = v2.x - offset[0], v2.y - offset[1]
        x3, y3 = v3.x - offset[0], v3.y - offset[1]

        for y in range(_ceil_to(y3, step_y), y1, step_y):
            # Long edge runs between the highest and lowest vertices
            long_x = x1 + ((x3 - x1) * (y - y1)) // (y3 - y1)

            # Zero-height lower edge
            if y == y2 and y2 == y3:
                continue

            if y > y2:
                short_x = x1 + ((y - y1) * (x2 - x1)) // (y2 - y1)
            else:
                short_x = x2 + ((y - y2) * (x3 - x2)) // (y3 - y2)

            start_x, end_x = (short_x, long_x) if short_x < long_x else (long_x, short_x)

            for x in range(_ceil_to(start_x, step_x), end_x, step_x):
                yield Point(x // step_x, y // step_y)
