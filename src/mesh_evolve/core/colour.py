"""RGB colours and per-channel jitter."""

from __future__ import annotations

from typing import NamedTuple, Optional, Tuple

import numpy as np

from mesh_evolve.core.rng import get_rng

# Maximum distance a channel may move in a single colour mutation
CHANNEL_JITTER = 20


class Colour(NamedTuple):
    r: int
    g: int
    b: int

    @classmethod
    def random(cls, rng: Optional[np.random.Generator] = None) -> 'Colour':
        """Create a uniformly random colour."""
        if rng is None:
            rng = get_rng()
        r, g, b = rng.integers(0, 256, size=3)
        return cls(int(r), int(g), int(b))

    def difference(self, other: Tuple[int, int, int]) -> int:
        """Sum of absolute channel differences."""
        return sum(abs(int(a) - int(b)) for a, b in zip(self, other))


def jitter_channel(value: int, rng: np.random.Generator) -> int:
    """Draw uniformly from [value - 20, value + 20] clamped to [0, 255]."""
    low = max(0, value - CHANNEL_JITTER)
    high = min(255, value + CHANNEL_JITTER)
    return int(rng.integers(low, high + 1))


def mutate_colour(
    colour: Colour,
    mutation_rate: float,
    rng: Optional[np.random.Generator] = None,
) -> Colour:
    """With probability ``mutation_rate`` jitter every channel of ``colour``.

    Args:
        colour: Colour to mutate.
        mutation_rate: Probability in [0, 1] that the colour changes at all.
        rng: Random generator, defaults to the process-wide one.

    Returns:
        The jittered colour, or ``colour`` itself when no mutation happens.
    """
    if rng is None:
        rng = get_rng()

    if rng.random() < mutation_rate:
        return Colour(
            jitter_channel(colour.r, rng),
            jitter_channel(colour.g, rng),
            jitter_channel(colour.b, rng),
        )
    return colour


def mutate_colour_array(
    colours: np.ndarray,
    mutation_rate: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Vectorised :func:`mutate_colour` over an array of RGB triples.

    Each colour (the last axis holds the three channels) is independently
    selected with probability ``mutation_rate``; every channel of a selected
    colour is redrawn from its clamped +/-20 window.

    Args:
        colours: uint8 array whose last axis has length 3.
        mutation_rate: Per-colour mutation probability in [0, 1].
        rng: Random generator, defaults to the process-wide one.

    Returns:
        A new uint8 array with the same shape as ``colours``.
    """
    if rng is None:
        rng = get_rng()

    channels = colours.astype(np.int64)
    selected = rng.random(colours.shape[:-1]) < mutation_rate
    if not selected.any():
        return colours.copy()

    low = np.maximum(0, channels - CHANNEL_JITTER)
    high = np.minimum(255, channels + CHANNEL_JITTER)
    jittered = rng.integers(low, high + 1)

    result = np.where(selected[..., None], jittered, channels)
    return result.astype(np.uint8)
