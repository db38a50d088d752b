"""Base class for procedural texture generators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from ..core.entropy import seed_to_int
from ..core.errors import SurfaceError
from .sketch import parse_color


@dataclass
class TextureGenerator(ABC):
    """Abstract base class for procedural texture generators.

    Subclasses implement generate() to rasterize one style onto a canvas.
    The same seed and size always yield the same pixels.
    """

    width: int = 512
    height: int = 512
    seed: float | int | None = None

    def __post_init__(self) -> None:
        """Initialize random state if seed is provided."""
        if self.width <= 0 or self.height <= 0:
            raise SurfaceError(f"Canvas size must be positive, got {self.width}x{self.height}")
        self._rng = np.random.default_rng(seed_to_int(self.seed))

    @abstractmethod
    def generate(self) -> Image.Image:
        """Generate the texture image.

        Returns:
            PIL Image in RGBA mode
        """
        pass

    def generate_array(self) -> NDArray[np.uint8]:
        """Generate texture as numpy array.

        Returns:
            HxWx4 uint8 array in RGBA format
        """
        return np.array(self.generate())

    def _new_canvas(self, color: str | tuple[int, ...] = (0, 0, 0, 0), mode: str = "RGBA") -> Image.Image:
        """Acquire a blank drawing surface of the generator's size.

        Raises:
            SurfaceError: If the colour is invalid or the surface cannot be allocated
        """
        try:
            rgba = parse_color(color)
            color = rgba[:3] if mode == "RGB" else rgba
            return Image.new(mode, (self.width, self.height), color)
        except (ValueError, MemoryError) as exc:
            raise SurfaceError(
                f"Cannot create {self.width}x{self.height} {mode} canvas: {exc}"
            ) from exc

    def save(self, path: str) -> None:
        """Generate and save texture to file.

        Args:
            path: Output file path (e.g., 'texture.png')
        """
        self.generate().save(path)
