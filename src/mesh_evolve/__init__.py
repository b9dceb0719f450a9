"""mesh_evolve - evolve triangle-mesh images toward a target with a genetic algorithm."""

__version__ = "0.1.0"

from mesh_evolve.core.colour import Colour
from mesh_evolve.core.point import Point
from mesh_evolve.mesh.grid import GridImage
from mesh_evolve.mesh.rasters import AxisResolution, Resolution
from mesh_evolve.mesh.topology import GridVertex
from mesh_evolve.genetic.population import EvaluatedPopulation, Population
from mesh_evolve.evolution.member import GAImageMember
from mesh_evolve.evolution.target import TargetImage

__all__ = [
    "Colour",
    "Point",
    "GridImage",
    "GridVertex",
    "AxisResolution",
    "Resolution",
    "Population",
    "EvaluatedPopulation",
    "GAImageMember",
    "TargetImage",
]
