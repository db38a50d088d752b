"""Subtle noise-driven tint overlay."""

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from .base import TextureGenerator
from .noise import NoiseField

RED = 255
GREEN_BASE = 240
GREEN_RANGE = 15
BLUE = 250
ALPHA_BASE = 25
ALPHA_RANGE = 30


def tint_rgba(value: float) -> tuple[int, int, int, int]:
    """Map one noise sample to a pale, mostly transparent pixel.

    Args:
        value: Noise value, nominally in [-1, 1]

    Returns:
        (R, G, B, A) with alpha between 25 and 55
    """
    normalized = min(max((value + 1) / 2, 0.0), 1.0)
    return (
        RED,
        GREEN_BASE + math.floor(normalized * GREEN_RANGE),
        BLUE,
        ALPHA_BASE + math.floor(normalized * ALPHA_RANGE),
    )


def _tint_array(values: NDArray[np.float64]) -> NDArray[np.uint8]:
    """Vectorized tint_rgba over a height x width array of samples."""
    normalized = np.clip((values + 1) / 2, 0.0, 1.0)
    rgba = np.empty(values.shape + (4,), dtype=np.uint8)
    rgba[..., 0] = RED
    rgba[..., 1] = GREEN_BASE + np.floor(normalized * GREEN_RANGE).astype(np.uint8)
    rgba[..., 2] = BLUE
    rgba[..., 3] = ALPHA_BASE + np.floor(normalized * ALPHA_RANGE).astype(np.uint8)
    return rgba


@dataclass
class NoiseTintTextureGenerator(TextureGenerator):
    """Generates a near-white overlay whose tint and opacity follow simplex noise.

    Attributes:
        width: Texture width in pixels
        height: Texture height in pixels
        seed: Noise seed; fractions in (0, 1) are accepted
        frequency: Pixel divisor before sampling (smaller = coarser features)
    """

    frequency: float = 100.0

    def generate(self) -> Image.Image:
        """Generate the tint overlay."""
        field = NoiseField(self.seed if self.seed is not None else 0)
        values = field.sample_grid(self.width, self.height, frequency=self.frequency)
        return Image.fromarray(_tint_array(values))
