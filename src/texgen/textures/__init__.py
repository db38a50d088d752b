"""Procedural texture generation module."""

from .base import TextureGenerator
from .noise import NoiseField, PermutationTable, normalize_seed
from .tint import NoiseTintTextureGenerator, tint_rgba
from .mosaic import MosaicTextureGenerator
from .sketch import SketchCanvas, SketchStyle, parse_color
from .hand_drawn import HandDrawnShape, HandDrawnTextureGenerator, ScatterSketchTextureGenerator

__all__ = [
    "TextureGenerator",
    "NoiseField",
    "PermutationTable",
    "normalize_seed",
    "NoiseTintTextureGenerator",
    "tint_rgba",
    "MosaicTextureGenerator",
    "SketchCanvas",
    "SketchStyle",
    "parse_color",
    "HandDrawnShape",
    "HandDrawnTextureGenerator",
    "ScatterSketchTextureGenerator",
]
