"""Grid images as members of a genetic-algorithm population."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from mesh_evolve.core.colour import Colour
from mesh_evolve.core.point import COORD_MAX
from mesh_evolve.core.rng import get_rng
from mesh_evolve.mesh.grid import GridImage
from mesh_evolve.mesh.rasters import Resolution

TargetPixel = Callable[[int, int], Tuple[int, int, int]]

# Upper bound on the colour difference of one output pixel
MAX_PIXEL_DIFFERENCE = 3 * 256


@dataclass(frozen=True)
class FitnessMetadata:
    """Where and how finely a member is compared with the target.

    Attributes:
        offset: Sampling phase in canvas units, below one block per axis.
        resolution: Resolution the member is rasterized at.
    """

    offset: Tuple[int, int]
    resolution: Resolution

    @classmethod
    def random(
        cls,
        resolution: Resolution,
        rng: Optional[np.random.Generator] = None,
    ) -> 'FitnessMetadata':
        """Draw an offset uniformly within one block so comparisons do not alias."""
        if rng is None:
            rng = get_rng()
        size_x, size_y = resolution.pixel_size
        offset = (int(rng.integers(0, size_x)), int(rng.integers(0, size_y)))
        return cls(offset, resolution)


@dataclass(frozen=True)
class BreedMetadata:
    """Mutation rate (and generator) used while breeding."""

    mutation_rate: float
    rng: Optional[np.random.Generator] = None

    def __post_init__(self):
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1], got {self.mutation_rate}")


class GAImageMember:
    """A grid image scored against a target-pixel oracle.

    The oracle maps canvas coordinates (0..65535 on both axes) to an RGB
    colour. Children share their left parent's oracle.
    """

    def __init__(self, image: GridImage, get_target_pixel: TargetPixel):
        self.image = image
        self.get_target_pixel = get_target_pixel

    @classmethod
    def uniform(
        cls,
        width: int,
        height: int,
        get_target_pixel: TargetPixel,
        rng: Optional[np.random.Generator] = None,
    ) -> 'GAImageMember':
        return cls(GridImage.uniform(width, height, rng), get_target_pixel)

    def __repr__(self) -> str:
        return f"GAImageMember({self.image!r})"

    def difference(self, metadata: FitnessMetadata) -> int:
        """Summed absolute channel difference against the target."""
        (size_x, size_y) = metadata.resolution.pixel_size
        offset_x, offset_y = metadata.offset

        difference = 0
        for point, colour in self.image.rasterize_scanline(metadata.resolution, metadata.offset):
            target = self.get_target_pixel(
                min(point.x * size_x + offset_x, COORD_MAX),
                min(point.y * size_y + offset_y, COORD_MAX),
            )
            difference += Colour.difference(colour, target)
        return difference

    def fitness(self, metadata: FitnessMetadata) -> int:
        """Maximum feasible difference minus the actual difference."""
        count_x, count_y = metadata.resolution.pixel_count
        ceiling = MAX_PIXEL_DIFFERENCE * count_x * count_y
        return max(0, ceiling - self.difference(metadata))

    @classmethod
    def breed(
        cls,
        left: 'GAImageMember',
        right: 'GAImageMember',
        metadata: BreedMetadata,
    ) -> 'GAImageMember':
        image = GridImage.breed(left.image, right.image, metadata.mutation_rate, metadata.rng)
        return cls(image, left.get_target_pixel)
