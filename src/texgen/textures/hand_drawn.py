"""Faint hand-drawn background textures: circles, grids, waves and scatter."""

import math
from dataclasses import dataclass
from enum import Enum

from PIL import Image

from .base import TextureGenerator
from .sketch import SketchCanvas, SketchStyle


class HandDrawnShape(Enum):
    """Primitive layout drawn by HandDrawnTextureGenerator."""
    CIRCLES = "circles"
    GRID = "grid"
    WAVES = "waves"


CIRCLE_STYLE = SketchStyle(stroke="rgba(0, 0, 0, 0.06)", fill="rgba(0, 0, 0, 0.02)", fill_style="solid")
GRID_STYLE = SketchStyle(stroke="rgba(0, 0, 0, 0.04)")
WAVE_STYLE = SketchStyle(stroke="rgba(0, 0, 0, 0.05)")


@dataclass
class HandDrawnTextureGenerator(TextureGenerator):
    """Generates a flat background overlaid with very faint sketched shapes.

    Attributes:
        width: Texture width in pixels
        height: Texture height in pixels
        seed: Seed for stroke jitter
        shape: Which primitive layout to draw
        background: Background colour in any web colour format
        pitch: Spacing of the circle grid, grid lines and wave rows
        circle_radius: Radius of each circle
        wave_step: Horizontal segment length and wave amplitude
    """

    shape: HandDrawnShape = HandDrawnShape.CIRCLES
    background: str = "#ffffff"
    pitch: int = 40
    circle_radius: float = 15.0
    wave_step: int = 20

    def generate(self) -> Image.Image:
        """Generate the sketch texture."""
        image = self._new_canvas(self.background)
        canvas = SketchCanvas(image, self._rng)

        if self.shape is HandDrawnShape.CIRCLES:
            self._draw_circles(canvas)
        elif self.shape is HandDrawnShape.GRID:
            self._draw_grid(canvas)
        else:
            self._draw_waves(canvas)

        return image

    def _draw_circles(self, canvas: SketchCanvas) -> None:
        start = self.pitch // 2
        for x in range(start, self.width, self.pitch):
            for y in range(start, self.height, self.pitch):
                canvas.circle(x, y, self.circle_radius, CIRCLE_STYLE)

    def _draw_grid(self, canvas: SketchCanvas) -> None:
        for x in range(0, self.width + 1, self.pitch):
            canvas.line(x, 0, x, self.height, GRID_STYLE)
        for y in range(0, self.height + 1, self.pitch):
            canvas.line(0, y, self.width, y, GRID_STYLE)

    def _draw_waves(self, canvas: SketchCanvas) -> None:
        step = self.wave_step
        for y in range(0, self.height + 1, step * 2):
            path = [
                (x, y + math.sin((x / self.width) * 2 * math.pi) * step)
                for x in range(0, self.width + 1, step)
            ]
            canvas.polyline(path, WAVE_STYLE)


@dataclass
class ScatterSketchTextureGenerator(TextureGenerator):
    """Generates a pale sheet with randomly scattered hachured circles.

    Attributes:
        width: Texture width in pixels
        height: Texture height in pixels
        seed: Seed for circle placement and jitter
        count: Number of circles
        background: Sheet colour
    """

    count: int = 20
    background: str = "#fefefe"

    def generate(self) -> Image.Image:
        """Generate the scattered sketch texture."""
        image = self._new_canvas(self.background)
        canvas = SketchCanvas(image, self._rng)

        for _ in range(self.count):
            x = self._rng.random() * self.width
            y = self._rng.random() * self.height
            diameter = 20 + self._rng.random() * 40
            style = SketchStyle(
                stroke="#e0e0e0",
                stroke_width=0.4,
                fill="rgba(240, 240, 240, 0.3)",
                fill_style="hachure",
                hachure_angle=self._rng.random() * 180,
                hachure_gap=8,
            )
            canvas.circle(x, y, diameter / 2, style)

        return image
