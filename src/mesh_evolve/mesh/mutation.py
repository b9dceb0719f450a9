"""Mutation and breeding operators for grid images."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

import numpy as np

from mesh_evolve.core.colour import mutate_colour_array
from mesh_evolve.core.rng import get_rng

if TYPE_CHECKING:
    from mesh_evolve.mesh.grid import GridImage, GridVertex

# Star-polygon samples drawn before a structural move is abandoned
MOVE_ATTEMPTS = 32


def _check_rate(mutation_rate: float) -> None:
    if not 0.0 <= mutation_rate <= 1.0:
        raise ValueError(f"mutation_rate must be in [0, 1], got {mutation_rate}")


class GridMutations:
    """Vertex-polygon structural mutation, colour mutation and breeding."""

    def mutate_structure(
        self: 'GridImage',
        vertex: 'GridVertex',
        radius: Optional[float] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Move one vertex to a random point in its star polygon.

        The new position is drawn uniformly by area from the polygon formed
        by the vertex's neighbours. The star polygon need not be convex, so
        a sample that would flip or flatten an incident triangle is rejected
        and redrawn, and the triangulation stays free of overlaps. When none
        of ``MOVE_ATTEMPTS`` samples qualifies the vertex stays where it is.

        Args:
            vertex: The vertex to move.
            radius: Optional cap on the distance moved. It is intersected
                with the star polygon.
            rng: Random generator, defaults to the process-wide one.

        Examples:
            >>> image = GridImage.uniform(16, 16)
            >>> image.mutate_structure(image.random_inner_vertex())
        """
        if rng is None:
            rng = get_rng()

        polygon = self.star_polygon(vertex)
        origin = polygon.root
        point = origin

        for _ in range(MOVE_ATTEMPTS):
            candidate = polygon.random_point(rng)
            if radius is not None and math.hypot(candidate.x - origin.x, candidate.y - origin.y) > radius:
                continue
            if polygon.keeps_orientation(candidate):
                point = candidate
                break

        self._positions[vertex.vertical, vertex.horizontal] = (point.x, point.y)

    def mutate_colours(
        self: 'GridImage',
        mutation_rate: float,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Jitter both triangle colours of every cell with probability ``mutation_rate``."""
        _check_rate(mutation_rate)
        self._colours = mutate_colour_array(self._colours, mutation_rate, rng)

    @classmethod
    def breed(
        cls,
        left: 'GridImage',
        right: 'GridImage',
        mutation_rate: float,
        rng: Optional[np.random.Generator] = None,
    ) -> 'GridImage':
        """Breed two parents into a new mutated child.

        The shape is inherited whole from one parent, each triangle colour
        is picked from either parent and may be jittered, and finally
        ``width * height`` Bernoulli(``mutation_rate``) trials each move a
        random inner vertex. The parents are not modified.

        Args:
            left: First parent.
            right: Second parent, with the same dimensions.
            mutation_rate: Probability in [0, 1] used for colour and
                structural mutation.
            rng: Random generator, defaults to the process-wide one.

        Returns:
            The child image.

        Raises:
            ValueError: If the parents differ in size or the rate is invalid.
        """
        if (left.width, left.height) != (right.width, right.height):
            raise ValueError(
                f"Cannot breed {left.width}x{left.height} with {right.width}x{right.height}"
            )
        _check_rate(mutation_rate)
        if rng is None:
            rng = get_rng()

        shape_parent = left if rng.random() < 0.5 else right
        positions = shape_parent._positions.copy()

        from_left = rng.random(left._colours.shape[:-1]) < 0.5
        colours = np.where(from_left[..., None], left._colours, right._colours)
        colours = mutate_colour_array(colours, mutation_rate, rng)

        child = cls(positions, colours)

        if child.has_inner_vertices():
            for _ in range(child.width * child.height):
                if rng.random() < mutation_rate:
                    child.mutate_structure(child.random_inner_vertex(rng), rng=rng)

        return child
