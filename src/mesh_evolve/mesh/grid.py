"""Deformable triangle mesh over a W x H lattice of vertices.

The root of the lattice is the top left vertex, and in rasterization
(0, 0) is the top left of the canvas as well. Each lattice cell (the quad
whose top left corner is a vertex) is split along its top-left to
bottom-right diagonal into an upper-right and a lower-left triangle, and
the vertex stores one colour for each. The connectivity never changes;
only vertex positions and colours are mutated.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

import numpy as np

from mesh_evolve.core.colour import Colour
from mesh_evolve.core.point import COORD_MAX, Point
from mesh_evolve.core.polygon import Polygon
from mesh_evolve.core.rng import get_rng
from mesh_evolve.mesh.mutation import GridMutations
from mesh_evolve.mesh.rasters import GridRasters
from mesh_evolve.mesh.topology import (
    GridVertex,
    NeighbourEdgeSet,
    classify_vertex,
    lattice_neighbours,
)


class GridImage(GridMutations, GridRasters):
    """A grid based image with ``width`` x ``height`` vertices.

    Attributes:
        width: Number of vertices per row (>= 2).
        height: Number of vertices per column (>= 2).
    """

    def __init__(self, positions: np.ndarray, colours: np.ndarray):
        """Wrap position and colour tables.

        Args:
            positions: uint16 array of shape (height, width, 2) holding the
                (x, y) canvas position of each vertex, indexed row first.
            colours: uint8 array of shape (height, width, 2, 3) holding the
                upper-right and lower-left triangle colours of each cell.
                The last row and column are stored but never drawn.

        Raises:
            ValueError: If the arrays are malformed or the lattice is
                smaller than 2 x 2.
        """
        positions = np.asarray(positions)
        colours = np.asarray(colours)

        if positions.ndim != 3 or positions.shape[2] != 2:
            raise ValueError(f"positions must have shape (H, W, 2), got {positions.shape}")
        height, width = positions.shape[:2]
        if width < 2 or height < 2:
            raise ValueError(f"Grid must be at least 2x2, got {width}x{height}")
        if colours.shape != (height, width, 2, 3):
            raise ValueError(
                f"colours must have shape {(height, width, 2, 3)}, got {colours.shape}"
            )
        if positions.min() < 0 or positions.max() > COORD_MAX:
            raise ValueError(f"positions must lie within 0..{COORD_MAX}")

        self._positions = positions.astype(np.uint16)
        self._colours = colours.astype(np.uint8)

    @classmethod
    def uniform(
        cls,
        width: int,
        height: int,
        rng: Optional[np.random.Generator] = None,
    ) -> 'GridImage':
        """Create a mesh with evenly spaced vertices and random colours."""
        if width < 2 or height < 2:
            raise ValueError(f"Grid must be at least 2x2, got {width}x{height}")
        if rng is None:
            rng = get_rng()

        xs = np.arange(width, dtype=np.int64) * COORD_MAX // (width - 1)
        ys = np.arange(height, dtype=np.int64) * COORD_MAX // (height - 1)
        grid_x, grid_y = np.meshgrid(xs, ys, indexing="xy")
        positions = np.stack([grid_x, grid_y], axis=-1)

        colours = rng.integers(0, 256, size=(height, width, 2, 3))
        return cls(positions, colours)

    @property
    def width(self) -> int:
        return self._positions.shape[1]

    @property
    def height(self) -> int:
        return self._positions.shape[0]

    @property
    def positions(self) -> np.ndarray:
        """Read-only view of the (height, width, 2) position table."""
        view = self._positions.view()
        view.flags.writeable = False
        return view

    @property
    def colours(self) -> np.ndarray:
        """Read-only view of the (height, width, 2, 3) colour table."""
        view = self._colours.view()
        view.flags.writeable = False
        return view

    def copy(self) -> 'GridImage':
        return type(self)(self._positions.copy(), self._colours.copy())

    def __repr__(self) -> str:
        return f"GridImage({self.width}x{self.height})"

    def vertices(self) -> Iterator[GridVertex]:
        for vertical in range(self.height):
            for horizontal in range(self.width):
                yield GridVertex(horizontal, vertical)

    def inner_vertices(self) -> Iterator[GridVertex]:
        for vertical in range(1, self.height - 1):
            for horizontal in range(1, self.width - 1):
                yield GridVertex(horizontal, vertical)

    def has_inner_vertices(self) -> bool:
        return self.width > 2 and self.height > 2

    def random_inner_vertex(self, rng: Optional[np.random.Generator] = None) -> GridVertex:
        """Pick a uniformly random vertex that is not on the border.

        Raises:
            ValueError: If the lattice has no interior vertex.
        """
        if not self.has_inner_vertices():
            raise ValueError(f"A {self.width}x{self.height} grid has no inner vertices")
        if rng is None:
            rng = get_rng()
        return GridVertex(
            int(rng.integers(1, self.width - 1)),
            int(rng.integers(1, self.height - 1)),
        )

    def vertex_position(self, vertex: GridVertex) -> Point:
        """Look up a vertex's current position."""
        self._check_vertex(vertex)
        x, y = self._positions[vertex.vertical, vertex.horizontal]
        return Point(int(x), int(y))

    def vertex_colours(self, vertex: GridVertex) -> Tuple[Colour, Colour]:
        """The (upper-right, lower-left) triangle colours of a vertex's cell."""
        self._check_vertex(vertex)
        upper, lower = self._colours[vertex.vertical, vertex.horizontal]
        return Colour(*(int(c) for c in upper)), Colour(*(int(c) for c in lower))

    def neighbours(self, vertex: GridVertex) -> Tuple[GridVertex, ...]:
        return lattice_neighbours(GridVertex(*vertex), self.width, self.height)

    def neighbour_edge_set(self, vertex: GridVertex) -> NeighbourEdgeSet:
        return classify_vertex(GridVertex(*vertex), self.width, self.height)

    def star_polygon(self, vertex: GridVertex) -> Polygon:
        """The fan of triangles a vertex may be moved within."""
        edge_set = self.neighbour_edge_set(vertex)
        edges = [
            (self.vertex_position(left), self.vertex_position(right))
            for left, right in edge_set.edges
        ]
        return Polygon(self.vertex_position(vertex), edges)

    def random_point_in_vertex_polygon(
        self,
        vertex: GridVertex,
        rng: Optional[np.random.Generator] = None,
    ) -> Point:
        return self.star_polygon(vertex).random_point(rng)

    def _check_vertex(self, vertex: GridVertex) -> None:
        h, v = vertex
        if not (0 <= h < self.width and 0 <= v < self.height):
            raise IndexError(f"Vertex {tuple(vertex)} outside {self.width}x{self.height} lattice")
