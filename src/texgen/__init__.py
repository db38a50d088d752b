"""Texgen - deterministic procedural background patterns."""

from .core.config import ConfigLoader, SynthesisConfig
from .core.entropy import EntropySource, FixedEntropy
from .core.errors import InvalidModeError, TexgenError
from .core.raster import PatternResult, RasterImage
from .synthesizer import PatternMode, PatternSynthesizer, generate_pattern, generate_scatter_texture
from .textures.noise import NoiseField

__version__ = "0.1.0"

__all__ = [
    "ConfigLoader",
    "SynthesisConfig",
    "EntropySource",
    "FixedEntropy",
    "InvalidModeError",
    "TexgenError",
    "PatternResult",
    "RasterImage",
    "PatternMode",
    "PatternSynthesizer",
    "generate_pattern",
    "generate_scatter_texture",
    "NoiseField",
]
