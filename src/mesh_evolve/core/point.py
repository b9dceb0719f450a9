"""Resolution-independent canvas points.

Every coordinate is an unsigned 16-bit value, so the canvas is always
65536 x 65536 units regardless of the resolution it is rasterized at.
"""

from __future__ import annotations

from typing import NamedTuple, Tuple

CANVAS_SIZE = 65536
COORD_MAX = CANVAS_SIZE - 1


class Point(NamedTuple):
    """A point on the 65536 x 65536 canvas."""

    x: int
    y: int

    def scale_up(self, scale: Tuple[int, int]) -> 'Point':
        """Multiply the coordinates by ``scale`` (per axis)."""
        return Point(self.x * scale[0], self.y * scale[1])

    def scale_down(self, scale: Tuple[int, int]) -> 'Point':
        """Divide the coordinates by ``scale``, e.g. a scale of 2 halves them."""
        return Point(self.x // scale[0], self.y // scale[1])

    def offset_by(self, offset: Tuple[int, int]) -> 'Point':
        return Point(self.x - offset[0], self.y - offset[1])

    def in_canvas(self) -> bool:
        return 0 <= self.x <= COORD_MAX and 0 <= self.y <= COORD_MAX
