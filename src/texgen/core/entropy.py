"""Randomness used for seed derivation and sketch jitter.

All non-determinism in texgen flows through an EntropySource. Per-pixel
and per-primitive math only ever sees a seed, so injecting a FixedEntropy
makes every generated image reproducible. Sketch jitter is drawn from a
numpy Generator seeded with the request seed (see seed_to_int).
"""

import math

import numpy as np


def seed_to_int(seed: float | int | None) -> int | None:
    """Map a seed in any accepted form to a non-negative integer for numpy.

    Fractions in (0, 1) keep 32 bits of their mantissa so that distinct
    random tokens stay distinct.

    Args:
        seed: Integer or real seed, or None for "no seed"

    Returns:
        Non-negative integer, or None if seed is None
    """
    if seed is None:
        return None
    if not math.isfinite(seed):
        raise ValueError(f"Seed must be finite, got {seed!r}")
    if 0 < seed < 1:
        return int(seed * 2**32)
    return abs(math.floor(seed))


class EntropySource:
    """Source of fresh per-request seeds."""

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()

    def next_seed(self) -> float:
        """Return a fresh real-valued seed in [0, 1)."""
        return float(self._rng.random())


class FixedEntropy(EntropySource):
    """Entropy source that always hands out the same seed."""

    def __init__(self, seed: float | int = 0) -> None:
        super().__init__(np.random.default_rng(0))
        self.seed = seed

    def next_seed(self) -> float | int:
        return self.seed
