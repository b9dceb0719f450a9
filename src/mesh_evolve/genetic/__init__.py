"""Generic genetic-algorithm engine."""

from mesh_evolve.genetic.member import Member
from mesh_evolve.genetic.population import EvaluatedPopulation, Population

__all__ = [
    "Member",
    "Population",
    "EvaluatedPopulation",
]
