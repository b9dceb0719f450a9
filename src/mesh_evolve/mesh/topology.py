"""Lattice topology: vertex indices, classification and neighbour edges.

Each lattice cell (the quad whose top left corner is a vertex) is split
along its top-left to bottom-right diagonal, so an interior vertex touches
six triangles, a border vertex three, and a corner one or two.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import NamedTuple, Tuple


class GridVertex(NamedTuple):
    """A lattice index; ``horizontal`` is the column and ``vertical`` the row."""

    horizontal: int
    vertical: int

    def up(self) -> 'GridVertex':
        return GridVertex(self.horizontal, self.vertical - 1)

    def up_right(self) -> 'GridVertex':
        return GridVertex(self.horizontal + 1, self.vertical - 1)

    def right(self) -> 'GridVertex':
        return GridVertex(self.horizontal + 1, self.vertical)

    def down_right(self) -> 'GridVertex':
        return GridVertex(self.horizontal + 1, self.vertical + 1)

    def down(self) -> 'GridVertex':
        return GridVertex(self.horizontal, self.vertical + 1)

    def down_left(self) -> 'GridVertex':
        return GridVertex(self.horizontal - 1, self.vertical + 1)

    def left(self) -> 'GridVertex':
        return GridVertex(self.horizontal - 1, self.vertical)

    def up_left(self) -> 'GridVertex':
        return GridVertex(self.horizontal - 1, self.vertical - 1)


class VertexKind(Enum):
    CENTRE = "centre"
    TOP_LEFT_CORNER = "top_left_corner"
    TOP_RIGHT_CORNER = "top_right_corner"
    BOTTOM_LEFT_CORNER = "bottom_left_corner"
    BOTTOM_RIGHT_CORNER = "bottom_right_corner"
    LEFT_EDGE = "left_edge"
    TOP_EDGE = "top_edge"
    RIGHT_EDGE = "right_edge"
    BOTTOM_EDGE = "bottom_edge"

    @property
    def is_corner(self) -> bool:
        return self.name.endswith("_CORNER")

    @property
    def is_edge(self) -> bool:
        return self.name.endswith("_EDGE")


VertexEdge = Tuple[GridVertex, GridVertex]


class NeighbourEdgeSet(NamedTuple):
    """Classification of a vertex and the edges of its star polygon.

    Every edge pair, together with the vertex, is one of the mesh triangles
    incident on that vertex, listed clockwise.
    """

    kind: VertexKind
    edges: Tuple[VertexEdge, ...]


@lru_cache(maxsize=None)
def classify_vertex(vertex: GridVertex, width: int, height: int) -> NeighbourEdgeSet:
    """Classify ``vertex`` and build its star-polygon edges.

    Raises:
        IndexError: If the vertex lies outside the lattice.
    """
    h, v = vertex
    if not (0 <= h < width and 0 <= v < height):
        raise IndexError(f"Vertex {vertex} outside {width}x{height} lattice")

    last_h, last_v = width - 1, height - 1
    up, right, down, left = vertex.up, vertex.right, vertex.down, vertex.left
    up_left, down_right = vertex.up_left, vertex.down_right

    if h == 0 and v == 0:
        return NeighbourEdgeSet(VertexKind.TOP_LEFT_CORNER, (
            (right(), down_right()),
            (down_right(), down()),
        ))
    if h == 0 and v == last_v:
        return NeighbourEdgeSet(VertexKind.BOTTOM_LEFT_CORNER, (
            (up(), right()),
        ))
    if h == last_h and v == 0:
        return NeighbourEdgeSet(VertexKind.TOP_RIGHT_CORNER, (
            (down(), left()),
        ))
    if h == last_h and v == last_v:
        return NeighbourEdgeSet(VertexKind.BOTTOM_RIGHT_CORNER, (
            (left(), up_left()),
            (up_left(), up()),
        ))
    if h == 0:
        return NeighbourEdgeSet(VertexKind.LEFT_EDGE, (
            (up(), right()),
            (right(), down_right()),
            (down_right(), down()),
        ))
    if h == last_h:
        return NeighbourEdgeSet(VertexKind.RIGHT_EDGE, (
            (down(), left()),
            (left(), up_left()),
            (up_left(), up()),
        ))
    if v == 0:
        return NeighbourEdgeSet(VertexKind.TOP_EDGE, (
            (right(), down_right()),
            (down_right(), down()),
            (down(), left()),
        ))
    if v == last_v:
        return NeighbourEdgeSet(VertexKind.BOTTOM_EDGE, (
            (left(), up_left()),
            (up_left(), up()),
            (up(), right()),
        ))
    return NeighbourEdgeSet(VertexKind.CENTRE, (
        (up(), right()),
        (right(), down_right()),
        (down_right(), down()),
        (down(), left()),
        (left(), up_left()),
        (up_left(), up()),
    ))


@lru_cache(maxsize=None)
def lattice_neighbours(vertex: GridVertex, width: int, height: int) -> Tuple[GridVertex, ...]:
    """Distinct lattice neighbours of ``vertex``, clockwise from straight up."""
    h, v = vertex
    if not (0 <= h < width and 0 <= v < height):
        raise IndexError(f"Vertex {vertex} outside {width}x{height} lattice")

    ring = (
        vertex.up(), vertex.up_right(), vertex.right(), vertex.down_right(),
        vertex.down(), vertex.down_left(), vertex.left(), vertex.up_left(),
    )
    return tuple(
        n for n in ring
        if 0 <= n.horizontal < width and 0 <= n.vertical < height
    )


