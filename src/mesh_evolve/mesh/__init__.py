"""Deformable triangle-mesh images: topology, mutation and rasterization."""

from mesh_evolve.mesh.topology import (
    GridVertex,
    VertexKind,
    NeighbourEdgeSet,
    classify_vertex,
    lattice_neighbours,
)
from mesh_evolve.mesh.rasters import AxisResolution, Resolution
from mesh_evolve.mesh.grid import GridImage

__all__ = [
    "GridVertex",
    "VertexKind",
    "NeighbourEdgeSet",
    "classify_vertex",
    "lattice_neighbours",
    "AxisResolution",
    "Resolution",
    "GridImage",
]
