"""Rasterization of grid images at power-of-two resolutions."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Iterator, NamedTuple, Tuple, Union

from mesh_evolve.core.colour import Colour
from mesh_evolve.core.point import CANVAS_SIZE, Point
from mesh_evolve.core.triangle import Triangle
from mesh_evolve.mesh.topology import GridVertex

if TYPE_CHECKING:
    from mesh_evolve.mesh.grid import GridImage

Pixel = Tuple[Point, Colour]


class AxisResolution(IntEnum):
    """Number of pixel blocks along one axis; the value is its base-2 log."""

    BLOCKS_1 = 0
    BLOCKS_2 = 1
    BLOCKS_4 = 2
    BLOCKS_8 = 3
    BLOCKS_16 = 4
    BLOCKS_32 = 5
    BLOCKS_64 = 6
    BLOCKS_128 = 7
    BLOCKS_256 = 8
    BLOCKS_512 = 9
    BLOCKS_1024 = 10
    BLOCKS_2048 = 11
    BLOCKS_4096 = 12
    BLOCKS_8192 = 13
    BLOCKS_16384 = 14
    BLOCKS_32768 = 15
    BLOCKS_65536 = 16

    @property
    def pixel_count(self) -> int:
        """Number of output pixels along the axis."""
        return 1 << self.value

    @property
    def pixel_size(self) -> int:
        """Canvas units covered by one output pixel."""
        return CANVAS_SIZE >> self.value

    @property
    def shift(self) -> int:
        """Base-2 log of the pixel size."""
        return 16 - self.value

    @classmethod
    def from_pixel_count(cls, count: int) -> 'AxisResolution':
        if count < 1 or count > CANVAS_SIZE or count & (count - 1):
            raise ValueError(f"Pixel count must be a power of two in 1..65536, got {count}")
        return cls(count.bit_length() - 1)

    @classmethod
    def from_shift(cls, shift: int) -> 'AxisResolution':
        if not 0 <= shift <= 16:
            raise ValueError(f"Shift must be between 0 and 16 (inclusive), got {shift}")
        return cls(16 - shift)


class Resolution(NamedTuple):
    """Axis resolutions for the horizontal and vertical axes."""

    x: AxisResolution
    y: AxisResolution

    @classmethod
    def square(cls, blocks: int) -> 'Resolution':
        axis = AxisResolution.from_pixel_count(blocks)
        return cls(axis, axis)

    @classmethod
    def from_shifts(cls, shift_x: int, shift_y: int) -> 'Resolution':
        """E.g. shifts of (8, 8) give 256 x 256 pixels, each 256 canvas units wide."""
        return cls(AxisResolution.from_shift(shift_x), AxisResolution.from_shift(shift_y))

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return (self.x.pixel_size, self.y.pixel_size)

    @property
    def pixel_count(self) -> Tuple[int, int]:
        return (self.x.pixel_count, self.y.pixel_count)


ResolutionLike = Union[Resolution, Tuple[int, int]]


def as_resolution(resolution: ResolutionLike) -> Resolution:
    """Accept a Resolution or a (shift_x, shift_y) pair."""
    if isinstance(resolution, Resolution):
        return resolution
    shift_x, shift_y = resolution
    return Resolution.from_shifts(shift_x, shift_y)


class GridRasters:
    """Triangle enumeration and the box and scanline rasterizers."""

    def triangles(self: 'GridImage') -> Iterator[Tuple[Point, Point, Point, Colour]]:
        """Yield every drawn triangle as ``(first, second, third, colour)``.

        Cells are visited column by column; each yields its upper-right
        triangle followed by its lower-left one.
        """
        for horizontal in range(self.width - 1):
            for vertical in range(self.height - 1):
                vert = GridVertex(horizontal, vertical)
                upper, lower = self.vertex_colours(vert)
                top_left = self.vertex_position(vert)
                bottom_right = self.vertex_position(vert.down_right())
                yield top_left, self.vertex_position(vert.right()), bottom_right, upper
                yield top_left, bottom_right, self.vertex_position(vert.down()), lower

    def rasterize_box(
        self: 'GridImage',
        resolution: ResolutionLike,
        offset: Tuple[int, int] = (0, 0),
    ) -> Iterator[Pixel]:
        """Brute-force rasterization of every triangle at ``resolution``.

        Triangle vertices are scaled down to block units and each triangle
        is filled by an inside test over its bounding box. The upper-right
        triangle of a cell draws the top and right edges and the lower-left
        one the diagonal, so shared edges are drawn once; the leftmost
        column and bottom row also draw the outer left and bottom edges.

        This is the simple, slow reference path.
        """
        resolution = as_resolution(resolution)
        scale = resolution.pixel_size
        last_vertical = self.height - 2

        def scaled(vertex: GridVertex) -> Point:
            return self.vertex_position(vertex).offset_by(offset).scale_down(scale)

        for horizontal in range(self.width - 1):
            for vertical in range(self.height - 1):
                vert = GridVertex(horizontal, vertical)
                upper, lower = self.vertex_colours(vert)

                top_left = scaled(vert)
                bottom_right = scaled(vert.down_right())

                # Top and right edge of the cell
                upper_tri = Triangle(top_left, scaled(vert.right()), bottom_right)
                for point in upper_tri.rasterize(True, True, False):
                    if point.x >= 0 and point.y >= 0:
                        yield point, upper

                # Diagonal, plus the outer left/bottom edges on the border
                lower_tri = Triangle(top_left, bottom_right, scaled(vert.down()))
                render_bottom = vertical == last_vertical
                render_left = horizontal == 0
                for point in lower_tri.rasterize(True, render_bottom, render_left):
                    if point.x >= 0 and point.y >= 0:
                        yield point, lower

    def rasterize_scanline(
        self: 'GridImage',
        resolution: ResolutionLike,
        offset: Tuple[int, int] = (0, 0),
    ) -> Iterator[Pixel]:
        """Scanline rasterization of every triangle at ``resolution``.

        Each output pixel samples the canvas at the top left corner of its
        block, shifted by ``offset``. Output coordinates are in block units.
        This is the fast path used for fitness evaluation.

        Args:
            resolution: Output resolution, or a (shift_x, shift_y) pair.
            offset: Sub-pixel sampling phase in canvas units.

        Yields:
            ``(pixel, colour)`` pairs.
        """
        resolution = as_resolution(resolution)
        block_size = resolution.pixel_size

        for first, second, third, colour in self.triangles():
            for point in Triangle(first, second, third).scanline(block_size, offset):
                yield point, colour
