"""Pattern synthesis: pick a style, derive a seed, render both sizes.

Example:
    synthesizer = PatternSynthesizer()
    result = synthesizer.generate("noise-tint", "#ffffff")
    result.thumbnail.data_uri   # data:image/png;base64,...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from PIL import Image

from .core.config import SynthesisConfig
from .core.entropy import EntropySource
from .core.errors import InvalidModeError, RenderError
from .core.logging import get_logger
from .core.raster import PatternResult, RasterImage
from .textures.base import TextureGenerator
from .textures.hand_drawn import HandDrawnShape, HandDrawnTextureGenerator, ScatterSketchTextureGenerator
from .textures.mosaic import MosaicTextureGenerator
from .textures.tint import NoiseTintTextureGenerator

logger = get_logger(__name__)


class PatternMode(Enum):
    """Closed set of pattern styles."""
    MOSAIC = "mosaic"
    NOISE_TINT = "noise-tint"
    HAND_DRAWN_CIRCLES = "hand-drawn-circles"
    HAND_DRAWN_GRID = "hand-drawn-grid"
    HAND_DRAWN_WAVES = "hand-drawn-waves"

    @classmethod
    def parse(cls, value: PatternMode | str) -> PatternMode:
        """Resolve a mode name or legacy alias.

        Raises:
            InvalidModeError: If value names no known style
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            key = MODE_ALIASES.get(key, key)
            for mode in cls:
                if mode.value == key:
                    return mode
        valid = ", ".join(m.value for m in cls)
        raise InvalidModeError(f"Unknown pattern mode {value!r}; expected one of: {valid}")


# Names used by earlier versions of the editor
MODE_ALIASES = {
    "triangles": PatternMode.MOSAIC.value,
    "simplex": PatternMode.NOISE_TINT.value,
    "rough-circles": PatternMode.HAND_DRAWN_CIRCLES.value,
    "rough-grid": PatternMode.HAND_DRAWN_GRID.value,
    "rough-waves": PatternMode.HAND_DRAWN_WAVES.value,
}


class PatternStrategy(ABC):
    """Builds the texture generator for one style at one size."""

    @abstractmethod
    def texture(
        self,
        size: tuple[int, int],
        seed: float | int,
        background: str,
        config: SynthesisConfig,
    ) -> TextureGenerator:
        pass

    def render(
        self,
        size: tuple[int, int],
        seed: float | int,
        background: str,
        config: SynthesisConfig,
    ) -> Image.Image:
        return self.texture(size, seed, background, config).generate()


@dataclass(frozen=True)
class MosaicStrategy(PatternStrategy):
    """Triangle mosaic; the background colour is not used."""

    def texture(
        self,
        size: tuple[int, int],
        seed: float | int,
        background: str,
        config: SynthesisConfig,
    ) -> TextureGenerator:
        return MosaicTextureGenerator(width=size[0], height=size[1], seed=seed)


@dataclass(frozen=True)
class NoiseTintStrategy(PatternStrategy):
    """Simplex noise tint overlay; the background colour is not used."""

    def texture(
        self,
        size: tuple[int, int],
        seed: float | int,
        background: str,
        config: SynthesisConfig,
    ) -> TextureGenerator:
        return NoiseTintTextureGenerator(
            width=size[0],
            height=size[1],
            seed=seed,
            frequency=config.noise_frequency,
        )


@dataclass(frozen=True)
class HandDrawnStrategy(PatternStrategy):
    """Sketched shapes over a flat background."""

    shape: HandDrawnShape

    def texture(
        self,
        size: tuple[int, int],
        seed: float | int,
        background: str,
        config: SynthesisConfig,
    ) -> TextureGenerator:
        return HandDrawnTextureGenerator(
            width=size[0],
            height=size[1],
            seed=seed,
            shape=self.shape,
            background=background,
        )


STRATEGIES: dict[PatternMode, PatternStrategy] = {
    PatternMode.MOSAIC: MosaicStrategy(),
    PatternMode.NOISE_TINT: NoiseTintStrategy(),
    PatternMode.HAND_DRAWN_CIRCLES: HandDrawnStrategy(HandDrawnShape.CIRCLES),
    PatternMode.HAND_DRAWN_GRID: HandDrawnStrategy(HandDrawnShape.GRID),
    PatternMode.HAND_DRAWN_WAVES: HandDrawnStrategy(HandDrawnShape.WAVES),
}


class PatternSynthesizer:
    """Produces thumbnail/full image pairs for a pattern style.

    Holds no state between calls: every generate() draws a fresh seed from
    the entropy source and renders both canvases from it.

    Args:
        config: Sizes, noise frequency and encoding settings
        entropy: Seed source; pass a FixedEntropy for reproducible output
        strategies: Per-mode overrides of the built-in strategies
    """

    def __init__(
        self,
        config: SynthesisConfig | None = None,
        entropy: EntropySource | None = None,
        strategies: Mapping[PatternMode, PatternStrategy] | None = None,
    ) -> None:
        self.config = config or SynthesisConfig()
        self.entropy = entropy or EntropySource()
        self.strategies = dict(STRATEGIES)
        if strategies:
            self.strategies.update(strategies)

    def generate(self, mode: PatternMode | str, background_color: str = "#ffffff") -> PatternResult:
        """Generate a thumbnail and a full-size image for one style.

        Args:
            mode: Pattern mode or its name
            background_color: Web colour used by the hand-drawn styles

        Returns:
            PatternResult; the static blank result if rendering failed

        Raises:
            InvalidModeError: If mode is not a known style
        """
        pattern_mode = PatternMode.parse(mode)
        seed = None

        try:
            seed = self.entropy.next_seed()
            logger.debug("pattern_mode_selected", mode=pattern_mode.value, seed=seed)
            strategy = self.strategies[pattern_mode]
            thumbnail = self._render(strategy, self.config.thumbnail_size, seed, background_color)
            full = self._render(strategy, self.config.full_size, seed, background_color)
        except Exception:
            logger.exception("pattern_generation_failed", mode=pattern_mode.value, seed=seed)
            return self.fallback()

        return PatternResult(thumbnail=thumbnail, full=full)

    def generate_batch(
        self,
        mode: PatternMode | str,
        background_color: str = "#ffffff",
        count: int | None = None,
    ) -> list[PatternResult]:
        """Generate several independent candidates of the same style.

        Args:
            mode: Pattern mode or its name
            background_color: Web colour used by the hand-drawn styles
            count: Number of results (default: config.batch_size)
        """
        pattern_mode = PatternMode.parse(mode)
        count = self.config.batch_size if count is None else count
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        return [self.generate(pattern_mode, background_color) for _ in range(count)]

    def fallback(self) -> PatternResult:
        """The flat placeholder pair at the configured sizes."""
        return PatternResult.blank(self.config.thumbnail_size, self.config.full_size)

    def _render(
        self,
        strategy: PatternStrategy,
        size: tuple[int, int],
        seed: float | int,
        background: str,
    ) -> RasterImage:
        image = strategy.render(size, seed, background, self.config)
        if image.size != tuple(size):
            raise RenderError(f"Strategy produced {image.size}, expected {tuple(size)}")
        return RasterImage.from_image(image, self.config.image_format)


def generate_pattern(
    mode: PatternMode | str,
    background_color: str = "#ffffff",
    config: SynthesisConfig | None = None,
    entropy: EntropySource | None = None,
) -> PatternResult:
    """Convenience wrapper around a one-off PatternSynthesizer."""
    return PatternSynthesizer(config=config, entropy=entropy).generate(mode, background_color)


def generate_scatter_texture(
    width: int = 300,
    height: int = 300,
    seed: float | int | None = None,
    image_format: str = "PNG",
) -> RasterImage:
    """Render a pale sheet of scattered hand-drawn circles.

    Args:
        width: Width in pixels
        height: Height in pixels
        seed: Seed for placement and jitter; None for a random sheet
        image_format: Raster encoding
    """
    generator = ScatterSketchTextureGenerator(width=width, height=height, seed=seed)
    return RasterImage.from_image(generator.generate(), image_format)
