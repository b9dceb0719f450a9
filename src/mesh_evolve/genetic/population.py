"""Generic genetic-algorithm population.

A generation is two phases. :meth:`Population.run` scores every member
once and returns an :class:`EvaluatedPopulation` sorted by fitness, worst
first; only that evaluated form can :meth:`EvaluatedPopulation.breed` the
next :class:`Population`.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Generic, Iterator, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

from mesh_evolve.core.rng import get_rng
from mesh_evolve.genetic.member import Member

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Member)

# Normalised fitness spans 1 (worst) to this value (best) before squaring
MAX_NORMALISED_FITNESS = 10


def _check_size(count: int) -> None:
    if count < 2:
        raise ValueError(f"There should be at least 2 members of the population, got {count}")


class Population(Generic[M]):
    """An un-evaluated population of a fixed number of members."""

    def __init__(self, members: Sequence[M]):
        """Create a population.

        Args:
            members: The initial members; their count is the population size.

        Raises:
            ValueError: If there are fewer than 2 members.
        """
        _check_size(len(members))
        self._members: List[M] = list(members)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[M]:
        return iter(self._members)

    @property
    def members(self) -> Tuple[M, ...]:
        return tuple(self._members)

    def run(self, metadata: Any, workers: Optional[int] = None) -> 'EvaluatedPopulation[M]':
        """Score every member once and sort ascending by fitness.

        Args:
            metadata: Passed to each member's ``fitness``.
            workers: If given, evaluate members concurrently on this many
                threads. Fitness functions must then be thread-safe.

        Returns:
            The evaluated population, worst member first.
        """
        if workers and workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                fitnesses = list(pool.map(lambda m: m.fitness(metadata), self._members))
        else:
            fitnesses = [member.fitness(metadata) for member in self._members]

        return EvaluatedPopulation(list(zip(self._members, fitnesses)))

    def step(
        self,
        fitness_metadata: Any,
        breed_metadata: Any,
        rng: Optional[np.random.Generator] = None,
        workers: Optional[int] = None,
    ) -> Tuple['EvaluatedPopulation[M]', 'Population[M]']:
        """Run one generation: evaluate once, then breed once.

        Returns:
            The evaluated current generation and the next population.
        """
        evaluated = self.run(fitness_metadata, workers=workers)
        return evaluated, evaluated.breed(breed_metadata, rng=rng)


class EvaluatedPopulation(Generic[M]):
    """Members paired with their fitness, sorted worst to best."""

    def __init__(self, member_fitness: Sequence[Tuple[M, int]]):
        _check_size(len(member_fitness))
        self._member_fitness: List[Tuple[M, int]] = sorted(
            member_fitness, key=lambda pair: pair[1]
        )

    def __len__(self) -> int:
        return len(self._member_fitness)

    @property
    def member_fitness(self) -> Tuple[Tuple[M, int], ...]:
        return tuple(self._member_fitness)

    @property
    def fitnesses(self) -> List[int]:
        return [fitness for _, fitness in self._member_fitness]

    def best(self) -> Tuple[M, int]:
        """The best member of the population along with its fitness."""
        return self._member_fitness[-1]

    def worst(self) -> Tuple[M, int]:
        """The worst member of the population along with its fitness."""
        return self._member_fitness[0]

    def mean_fitness(self) -> float:
        return float(np.mean(self.fitnesses))

    def normalised_fitness(self, fitness: int) -> int:
        """Map a fitness onto 1 (worst) .. 10 (best).

        A population whose members all share one fitness maps everything
        to 1 so every member is equally likely to be chosen.
        """
        best_fitness = self.best()[1]
        worst_fitness = self.worst()[1]
        if best_fitness == worst_fitness:
            return 1
        scaled = (fitness - worst_fitness) * (MAX_NORMALISED_FITNESS - 1) / (best_fitness - worst_fitness)
        return int(round(1 + scaled))

    def mating_pool(self) -> List[int]:
        """Indices of every member except the best, each repeated norm^2 times."""
        pool: List[int] = []
        for index, (_, fitness) in enumerate(self._member_fitness[:-1]):
            pool.extend([index] * self.normalised_fitness(fitness) ** 2)
        return pool

    def breed(self, metadata: Any, rng: Optional[np.random.Generator] = None) -> Population[M]:
        """Breed the next generation.

        Every child has the best member as one parent; the other parent is
        drawn uniformly from the mating pool, which favours fitter members
        quadratically. Mutation is left to the member's ``breed``.

        Args:
            metadata: Passed to each member's ``breed``.
            rng: Random generator for drawing from the mating pool.

        Returns:
            A population of the same size.
        """
        if rng is None:
            rng = get_rng()

        best, best_fitness = self.best()
        pool = self.mating_pool()
        logger.debug(
            "Breeding %d children from best fitness %d with a mating pool of %d",
            len(self), best_fitness, len(pool),
        )

        member_type = type(best)
        children = []
        for _ in range(len(self)):
            partner, _ = self._member_fitness[pool[int(rng.integers(0, len(pool)))]]
            children.append(member_type.breed(best, partner, metadata))

        return Population(children)
