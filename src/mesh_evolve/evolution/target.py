"""Target images sampled as a pure function of canvas coordinates."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from mesh_evolve.core.colour import Colour
from mesh_evolve.core.point import CANVAS_SIZE, COORD_MAX
from mesh_evolve.mesh.rasters import Resolution, ResolutionLike, as_resolution


class TargetImage:
    """An RGB image addressed on the 65536 x 65536 canvas.

    Instances are callable as the target-pixel oracle: ``target(x, y)``
    returns the colour of the image pixel covering canvas point (x, y).
    Lookups only read the pixel array, so one instance can be shared by
    every member of a population.
    """

    def __init__(self, pixels: np.ndarray):
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Target pixels must have shape (H, W, 3), got {pixels.shape}")
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise ValueError("Target image is empty")

        self._pixels = pixels.astype(np.uint8)
        self._pixels.flags.writeable = False

    @classmethod
    def open(cls, path: str | Path, max_size: Optional[int] = None) -> 'TargetImage':
        """Load a target image from disk.

        Args:
            path: Any image format Pillow can decode.
            max_size: If given, downscale so neither side exceeds this.

        Returns:
            The loaded target.
        """
        from PIL import Image

        with Image.open(path) as img:
            img = img.convert("RGB")
            if max_size is not None:
                img.thumbnail((max_size, max_size))
            return cls(np.asarray(img))

    @classmethod
    def solid(cls, colour: Tuple[int, int, int], size: int = 1) -> 'TargetImage':
        """A single-colour target."""
        pixels = np.empty((size, size, 3), dtype=np.uint8)
        pixels[:] = colour
        return cls(pixels)

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def __call__(self, x: int, y: int) -> Colour:
        px = x * self.width // CANVAS_SIZE
        py = y * self.height // CANVAS_SIZE
        r, g, b = self._pixels[py, px]
        return Colour(int(r), int(g), int(b))

    def sample_grid(
        self,
        resolution: ResolutionLike,
        offset: Tuple[int, int] = (0, 0),
    ) -> np.ndarray:
        """Sample the target at the top left of every block of ``resolution``.

        Returns:
            uint8 array of shape (rows, columns, 3).
        """
        resolution: Resolution = as_resolution(resolution)
        (size_x, size_y), (count_x, count_y) = resolution.pixel_size, resolution.pixel_count

        xs = np.minimum(np.arange(count_x, dtype=np.int64) * size_x + offset[0], COORD_MAX)
        ys = np.minimum(np.arange(count_y, dtype=np.int64) * size_y + offset[1], COORD_MAX)

        columns = xs * self.width // CANVAS_SIZE
        rows = ys * self.height // CANVAS_SIZE
        return self._pixels[rows[:, None], columns[None, :]]
