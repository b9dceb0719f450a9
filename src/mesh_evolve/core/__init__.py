"""Geometry primitives: canvas points, colours, triangles and triangle fans."""

from mesh_evolve.core.point import Point, CANVAS_SIZE, COORD_MAX
from mesh_evolve.core.colour import Colour, mutate_colour
from mesh_evolve.core.triangle import Triangle
from mesh_evolve.core.polygon import Polygon
from mesh_evolve.core.rng import get_rng, seed_rng

__all__ = [
    "Point",
    "CANVAS_SIZE",
    "COORD_MAX",
    "Colour",
    "mutate_colour",
    "Triangle",
    "Polygon",
    "get_rng",
    "seed_rng",
]
