"""Evolution of a grid image toward a target image.

Wraps the generic population in a driver that owns configuration,
stopping conditions, progress history and periodic exports.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from mesh_evolve.evolution.member import (
    BreedMetadata,
    FitnessMetadata,
    GAImageMember,
    TargetPixel,
)
from mesh_evolve.genetic.population import EvaluatedPopulation, Population
from mesh_evolve.mesh.rasters import AxisResolution, Resolution

logger = logging.getLogger(__name__)


@dataclass
class EvolutionConfig:
    """Configuration for an evolution run."""

    # Mesh
    width: int = 16
    height: int = 16

    # Population
    population_size: int = 25
    mutation_rate: float = 0.05

    # Stopping; with neither set the run continues until interrupted
    generations: Optional[int] = None
    time_limit: Optional[float] = None

    # Fitness evaluation
    fitness_resolution: int = 64
    random_offset: bool = True
    workers: Optional[int] = None

    # Output
    output_dir: Optional[Path] = None
    export_interval: int = 250
    export_resolution: int = 1024
    verbose: bool = True

    def __post_init__(self):
        if self.width < 2 or self.height < 2:
            raise ValueError(f"Mesh must be at least 2x2, got {self.width}x{self.height}")
        if self.population_size < 2:
            raise ValueError(f"population_size must be at least 2, got {self.population_size}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1], got {self.mutation_rate}")
        if self.export_interval < 1:
            raise ValueError(f"export_interval must be positive, got {self.export_interval}")
        # Raises for anything that is not a power of two in 1..65536
        AxisResolution.from_pixel_count(self.fitness_resolution)
        AxisResolution.from_pixel_count(self.export_resolution)

    @property
    def resolution(self) -> Resolution:
        return Resolution.square(self.fitness_resolution)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.output_dir is not None:
            data['output_dir'] = str(self.output_dir)
        return data


class MeshEvolution:
    """Genetic algorithm evolving a triangle mesh toward a target."""

    def __init__(
        self,
        config: EvolutionConfig,
        target: TargetPixel,
        seed: Optional[int] = None,
    ):
        self.config = config
        self.target = target
        self.rng = np.random.default_rng(seed)

        self.population: Optional[Population[GAImageMember]] = None
        self.best_member: Optional[GAImageMember] = None
        self.best_fitness: int = 0
        self.generation: int = 0
        self.elapsed: float = 0.0

        self.history: Dict[str, List[Any]] = {
            'best_fitness': [],
            'worst_fitness': [],
            'mean_fitness': [],
        }

        self.output_dir: Optional[Path] = None
        if config.output_dir:
            self.output_dir = Path(config.output_dir)
            self.output_dir.mkdir(parents=True, exist_ok=True)

    def initialize_population(self) -> None:
        """Start every member from the same uniform grid."""
        members = [
            GAImageMember.uniform(self.config.width, self.config.height, self.target, self.rng)
            for _ in range(self.config.population_size)
        ]
        self.population = Population(members)
        self.generation = 0

        logger.info(
            f"Initialized population of {len(members)} "
            f"{self.config.width}x{self.config.height} meshes"
        )

    def fitness_metadata(self) -> FitnessMetadata:
        if self.config.random_offset:
            return FitnessMetadata.random(self.config.resolution, self.rng)
        return FitnessMetadata((0, 0), self.config.resolution)

    def breed_metadata(self) -> BreedMetadata:
        return BreedMetadata(self.config.mutation_rate, self.rng)

    def should_continue(self) -> bool:
        if self.config.generations is not None and self.generation >= self.config.generations:
            return False
        if self.config.time_limit is not None and self.elapsed >= self.config.time_limit:
            return False
        return True

    def evolve_generation(self) -> EvaluatedPopulation[GAImageMember]:
        """Evaluate the current population once and replace it with its children."""
        if self.population is None:
            self.initialize_population()

        evaluated, self.population = self.population.step(
            self.fitness_metadata(),
            self.breed_metadata(),
            rng=self.rng,
            workers=self.config.workers,
        )

        best, best_fitness = evaluated.best()
        _, worst_fitness = evaluated.worst()

        # Offsets change between generations, so the latest winner is kept
        self.best_member = best
        self.best_fitness = best_fitness

        self.history['best_fitness'].append(best_fitness)
        self.history['worst_fitness'].append(worst_fitness)
        self.history['mean_fitness'].append(evaluated.mean_fitness())

        self.generation += 1
        return evaluated

    def run(
        self,
        callback: Optional[Callable[[int, GAImageMember, int], None]] = None,
    ) -> Optional[GAImageMember]:
        """Run until a stopping condition is met or the user interrupts.

        Args:
            callback: Optional function called each generation with
                     (generation, best_member, best_fitness)

        Returns:
            Best member of the last evaluated generation.
        """
        level = logging.INFO if self.config.verbose else logging.DEBUG
        logger.log(level, "=" * 60)
        logger.log(level, "MESH EVOLUTION")
        logger.log(level, "=" * 60)
        logger.log(level, f"Mesh: {self.config.width}x{self.config.height}")
        logger.log(level, f"Population: {self.config.population_size}")
        logger.log(level, f"Generations: {self.config.generations or 'unbounded'}")
        logger.log(level, f"Time limit: {self.config.time_limit or 'none'}")
        logger.log(level, f"Fitness resolution: {self.config.fitness_resolution}")

        if self.population is None:
            self.initialize_population()

        start_time = time.time()

        try:
            while self.should_continue():
                gen_start = time.time()
                self.evolve_generation()
                self.elapsed = time.time() - start_time

                logger.log(
                    level,
                    f"Generation {self.generation}: best {self.best_fitness}, "
                    f"worst {self.history['worst_fitness'][-1]}, "
                    f"time {time.time() - gen_start:.2f}s",
                )

                if callback:
                    callback(self.generation, self.best_member, self.best_fitness)

                if self.generation % self.config.export_interval == 0:
                    self.export(f"gen_{self.generation:06d}")
        except KeyboardInterrupt:
            logger.info(f"Interrupted after {self.generation} generations")

        self.elapsed = time.time() - start_time

        logger.log(level, "=" * 60)
        logger.log(level, "EVOLUTION COMPLETE")
        logger.log(level, "=" * 60)
        logger.log(level, f"Generations: {self.generation}")
        logger.log(level, f"Total time: {self.elapsed:.1f}s")
        logger.log(level, f"Best fitness: {self.best_fitness}")

        if self.output_dir and self.best_member is not None:
            self.export("final")
            self.save_results()

        return self.best_member

    def export(self, name: str) -> None:
        """Write the comparison strip and vector mesh of the current best member."""
        if not self.output_dir or self.best_member is None:
            return

        from mesh_evolve.visualization.renderer import (
            render_comparison,
            save_rgb_image,
            save_vector_image,
        )

        resolution = Resolution.square(self.config.export_resolution)
        strip = render_comparison(self.best_member.image, self.target, resolution)
        save_rgb_image(strip, self.output_dir / f"{name}.png")
        save_vector_image(self.best_member.image, self.output_dir / f"{name}.svg")

        logger.debug(f"Exported {name} to {self.output_dir}")

    def save_results(self) -> None:
        """Save the fitness history and final summary."""
        if not self.output_dir:
            return

        results = {
            'generations': self.generation,
            'elapsed': self.elapsed,
            'best_fitness': self.best_fitness,
            'config': self.config.to_dict(),
            'history': self.history,
        }
        with open(self.output_dir / "history.json", 'w') as f:
            json.dump(results, f, indent=2)

        from mesh_evolve.visualization.renderer import plot_history

        plot_history(self.history, self.output_dir / "history.png")


def run_evolution(
    target: TargetPixel,
    generations: Optional[int] = 100,
    time_limit: Optional[float] = None,
    width: int = 16,
    height: int = 16,
    population_size: int = 25,
    output_dir: Optional[str] = None,
    seed: Optional[int] = None,
    verbose: bool = True,
) -> Optional[GAImageMember]:
    """Run an evolution with default settings.

    Args:
        target: Target-pixel oracle, e.g. a ``TargetImage``.
        generations: Number of generations to evolve.
        time_limit: Wall-clock limit in seconds.
        width: Mesh vertices per row.
        height: Mesh vertices per column.
        population_size: Size of population.
        output_dir: Directory to save exports to.
        seed: Random seed for reproducibility.
        verbose: Log progress at INFO.

    Returns:
        Best evolved member.
    """
    config = EvolutionConfig(
        width=width,
        height=height,
        population_size=population_size,
        generations=generations,
        time_limit=time_limit,
        output_dir=Path(output_dir) if output_dir else None,
        verbose=verbose,
    )

    evolution = MeshEvolution(config, target, seed=seed)
    return evolution.run()
