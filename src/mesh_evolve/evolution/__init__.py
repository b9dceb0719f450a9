"""Evolving grid images toward a target image."""

from mesh_evolve.evolution.member import (
    BreedMetadata,
    FitnessMetadata,
    GAImageMember,
)
from mesh_evolve.evolution.target import TargetImage
from mesh_evolve.evolution.evolutionary import (
    EvolutionConfig,
    MeshEvolution,
    run_evolution,
)

__all__ = [
    "BreedMetadata",
    "FitnessMetadata",
    "GAImageMember",
    "TargetImage",
    "EvolutionConfig",
    "MeshEvolution",
    "run_evolution",
]
