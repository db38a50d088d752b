"""Shared plumbing: errors, logging, configuration, entropy and encoding."""

from .config import ConfigLoader, SynthesisConfig
from .entropy import EntropySource, FixedEntropy, seed_to_int
from .errors import ConfigError, InvalidModeError, RenderError, SurfaceError, TexgenError
from .raster import PatternResult, RasterImage

__all__ = [
    "ConfigLoader",
    "SynthesisConfig",
    "EntropySource",
    "FixedEntropy",
    "seed_to_int",
    "TexgenError",
    "InvalidModeError",
    "SurfaceError",
    "RenderError",
    "ConfigError",
    "PatternResult",
    "RasterImage",
]
