"""Process-wide random generator shared by the stochastic operators."""

from __future__ import annotations

from typing import Optional

import numpy as np

_default_rng: Optional[np.random.Generator] = None


def get_rng() -> np.random.Generator:
    """Get the process-wide generator, creating it on first use."""
    global _default_rng
    if _default_rng is None:
        _default_rng = np.random.default_rng()
    return _default_rng


def seed_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Replace the process-wide generator with a freshly seeded one."""
    global _default_rng
    _default_rng = np.random.default_rng(seed)
    return _default_rng
