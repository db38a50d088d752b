"""Hand-drawn primitive renderer.

Draws lines and circles with the slight wobble of a freehand pen: every
stroke is traced twice along randomly bowed curves, and fills are either
solid or hachured with rough parallel lines. All jitter comes from the
numpy Generator handed to the canvas, so a seeded generator reproduces
the same drawing.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Literal, Sequence

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from ..core.errors import SurfaceError

RGBA = tuple[int, int, int, int]

_CSS_FUNCTION = re.compile(r"rgba?\(\s*([^)]*)\)", re.IGNORECASE)

# Largest endpoint displacement, in pixels, at roughness 1
MAX_RANDOMNESS_OFFSET = 2.0


def parse_color(value: str | Sequence[int]) -> RGBA:
    """Parse a web colour into an RGBA tuple.

    Accepts anything PIL's ImageColor understands plus CSS ``rgba()`` with
    a fractional alpha channel, e.g. ``rgba(0, 0, 0, 0.06)``.

    Raises:
        ValueError: If the colour cannot be parsed
    """
    if not isinstance(value, str):
        channels = tuple(int(c) for c in value)
        if len(channels) == 3:
            return channels + (255,)
        if len(channels) == 4:
            return channels
        raise ValueError(f"Colour tuple must have 3 or 4 channels, got {value!r}")

    match = _CSS_FUNCTION.fullmatch(value.strip())
    if match is None:
        return ImageColor.getcolor(value, "RGBA")

    parts = [p.strip() for p in match.group(1).split(",")]
    if len(parts) not in (3, 4):
        raise ValueError(f"Invalid colour: {value!r}")
    try:
        r, g, b = (min(max(int(float(p)), 0), 255) for p in parts[:3])
        alpha = 1.0
        if len(parts) == 4:
            alpha = float(parts[3][:-1]) / 100 if parts[3].endswith("%") else float(parts[3])
    except ValueError as exc:
        raise ValueError(f"Invalid colour: {value!r}") from exc
    return (r, g, b, round(min(max(alpha, 0.0), 1.0) * 255))


@dataclass(frozen=True)
class SketchStyle:
    """Drawing options for one primitive.

    Attributes:
        stroke: Outline colour
        stroke_width: Outline width in pixels
        fill: Fill colour, or None for no fill
        fill_style: "solid" or "hachure"
        hachure_angle: Hatch line angle in degrees
        hachure_gap: Distance between hatch lines (default 4x stroke width)
        roughness: Jitter multiplier; 0 draws clean geometry
        bowing: How far lines bend away from straight
    """

    stroke: str = "#000000"
    stroke_width: float = 1.0
    fill: str | None = None
    fill_style: Literal["solid", "hachure"] = "hachure"
    hachure_angle: float = -41.0
    hachure_gap: float | None = None
    roughness: float = 1.0
    bowing: float = 1.0

    def __post_init__(self) -> None:
        if self.fill_style not in ("solid", "hachure"):
            raise ValueError(f"Unknown fill style: {self.fill_style}")

    @property
    def gap(self) -> float:
        if self.hachure_gap is not None and self.hachure_gap > 0:
            return self.hachure_gap
        return max(self.stroke_width, 0.1) * 4


class SketchCanvas:
    """Draws hand-drawn-looking primitives onto an RGBA image.

    Every stroke and fill is composited over the existing pixels, so
    translucent ink accumulates and a translucent background keeps its alpha.

    Args:
        image: RGBA image to draw on (modified in place)
        rng: Source of stroke jitter
    """

    def __init__(self, image: Image.Image, rng: np.random.Generator) -> None:
        if image.mode != "RGBA":
            raise SurfaceError(f"Sketch canvas needs an RGBA image, got {image.mode}")
        self.image = image
        self._rng = rng

    def line(self, x1: float, y1: float, x2: float, y2: float, style: SketchStyle | None = None) -> None:
        """Draw a rough line from (x1, y1) to (x2, y2)."""
        style = style or SketchStyle()
        color = parse_color(style.stroke)
        self._stroke_line(x1, y1, x2, y2, style, color, passes=2)

    def polyline(self, points: Sequence[tuple[float, float]], style: SketchStyle | None = None) -> None:
        """Draw consecutive points as separate rough strokes."""
        for (x1, y1), (x2, y2) in zip(points, points[1:]):
            self.line(x1, y1, x2, y2, style)

    def circle(self, x: float, y: float, radius: float, style: SketchStyle | None = None) -> None:
        """Draw a rough circle centred on (x, y), filling it first if requested."""
        style = style or SketchStyle()
        if radius <= 0:
            return

        if style.fill is not None:
            fill = parse_color(style.fill)
            if style.fill_style == "solid":
                self._paint(self._ellipse_points(x, y, radius, style), fill, fill_shape=True)
            else:
                self._hachure_circle(x, y, radius, style, fill)

        color = parse_color(style.stroke)
        width = self._width(style)
        for _ in range(2):
            outline = self._ellipse_points(x, y, radius, style)
            # Overshoot the start point like a pen closing a loop
            self._paint(outline + outline[:2], color, width=width)

    def _paint(
        self,
        points: Sequence[tuple[float, float]],
        color: RGBA,
        width: int = 1,
        fill_shape: bool = False,
    ) -> None:
        """Draw one polyline or polygon on a transparent tile and composite it."""
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        pad = width + 2
        left = max(math.floor(min(xs) - pad), 0)
        top = max(math.floor(min(ys) - pad), 0)
        right = min(math.ceil(max(xs) + pad), self.image.width)
        bottom = min(math.ceil(max(ys) + pad), self.image.height)
        if right <= left or bottom <= top:
            return

        tile = Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
        draw = ImageDraw.Draw(tile)
        shifted = [(x - left, y - top) for x, y in points]
        if fill_shape:
            draw.polygon(shifted, fill=color)
        else:
            draw.line(shifted, fill=color, width=width, joint="curve")
        self.image.alpha_composite(tile, dest=(left, top))

    def _hachure_circle(self, cx: float, cy: float, radius: float, style: SketchStyle, color: RGBA) -> None:
        angle = math.radians(style.hachure_angle)
        dx, dy = math.cos(angle), math.sin(angle)
        nx, ny = -dy, dx
        gap = style.gap

        offset = -radius + gap / 2
        while offset < radius:
            half = math.sqrt(max(radius * radius - offset * offset, 0.0))
            mx, my = cx + nx * offset, cy + ny * offset
            self._stroke_line(
                mx - dx * half, my - dy * half,
                mx + dx * half, my + dy * half,
                style, color, passes=1,
            )
            offset += gap

    def _stroke_line(
        self,
        x1: float, y1: float, x2: float, y2: float,
        style: SketchStyle,
        color: RGBA,
        passes: int,
    ) -> None:
        width = self._width(style)
        for i in range(passes):
            points = self._bowed_curve(x1, y1, x2, y2, style, overlay=i > 0)
            self._paint(points, color, width=width)

    def _bowed_curve(
        self,
        x1: float, y1: float, x2: float, y2: float,
        style: SketchStyle,
        overlay: bool,
    ) -> list[tuple[float, float]]:
        """Sample a randomly bent cubic Bezier between two endpoints."""
        length_sq = (x1 - x2) ** 2 + (y1 - y2) ** 2
        length = math.sqrt(length_sq)

        offset = MAX_RANDOMNESS_OFFSET
        if offset * offset * 100 > length_sq:
            offset = length / 10
        if overlay:
            offset /= 2

        diverge = 0.2 + self._rng.random() * 0.2
        mid_dx = style.bowing * MAX_RANDOMNESS_OFFSET * (y2 - y1) / 200
        mid_dy = style.bowing * MAX_RANDOMNESS_OFFSET * (x1 - x2) / 200
        mid_dx = self._jitter(mid_dx, style)
        mid_dy = self._jitter(mid_dy, style)

        p0 = (x1 + self._jitter(offset, style), y1 + self._jitter(offset, style))
        c1 = (
            mid_dx + x1 + (x2 - x1) * diverge + self._jitter(offset, style),
            mid_dy + y1 + (y2 - y1) * diverge + self._jitter(offset, style),
        )
        c2 = (
            mid_dx + x1 + 2 * (x2 - x1) * diverge + self._jitter(offset, style),
            mid_dy + y1 + 2 * (y2 - y1) * diverge + self._jitter(offset, style),
        )
        p3 = (x2 + self._jitter(offset, style), y2 + self._jitter(offset, style))

        steps = int(min(max(length / 8, 4), 24))
        t = np.linspace(0.0, 1.0, steps + 1)
        mt = 1 - t
        bx = mt**3 * p0[0] + 3 * mt**2 * t * c1[0] + 3 * mt * t**2 * c2[0] + t**3 * p3[0]
        by = mt**3 * p0[1] + 3 * mt**2 * t * c1[1] + 3 * mt * t**2 * c2[1] + t**3 * p3[1]
        return list(zip(bx.tolist(), by.tolist()))

    def _ellipse_points(self, cx: float, cy: float, radius: float, style: SketchStyle) -> list[tuple[float, float]]:
        steps = max(9, int(2 * math.pi * radius / 6))
        start = self._rng.random() * 2 * math.pi
        wobble = min(radius * 0.1, 1.5)
        angles = start + np.linspace(0.0, 2 * math.pi, steps, endpoint=False)
        radii = radius + np.array([self._jitter(wobble, style) for _ in range(steps)])
        xs = cx + radii * np.cos(angles)
        ys = cy + radii * np.sin(angles)
        return list(zip(xs.tolist(), ys.tolist()))

    def _jitter(self, limit: float, style: SketchStyle) -> float:
        limit = abs(limit)
        return float(self._rng.uniform(-limit, limit)) * style.roughness if limit else 0.0

    @staticmethod
    def _width(style: SketchStyle) -> int:
        return max(1, round(style.stroke_width))
