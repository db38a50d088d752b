"""Low-poly triangle mosaic textures.

Points are laid out on a jittered grid in unit space and then scaled to the
canvas, so one seed yields the same triangulation at every size. Each
triangle is coloured by blending a horizontal and a vertical palette ramp at
its centroid.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw

from .base import TextureGenerator

# ColorBrewer sequential and diverging schemes (9 classes)
PALETTES: dict[str, tuple[str, ...]] = {
    "YlGnBu": ("#ffffd9", "#edf8b1", "#c7e9b4", "#7fcdbb", "#41b6c4", "#1d91c0", "#225ea8", "#253494", "#081d58"),
    "RdPu": ("#fff7f3", "#fde0dd", "#fcc5c0", "#fa9fb5", "#f768a1", "#dd3497", "#ae017e", "#7a0177", "#49006a"),
    "YlOrRd": ("#ffffcc", "#ffeda0", "#fed976", "#feb24c", "#fd8d3c", "#fc4e2a", "#e31a1c", "#bd0026", "#800026"),
    "PuBuGn": ("#fff7fb", "#ece2f0", "#d0d1e6", "#a6bddb", "#67a9cf", "#3690c0", "#02818a", "#016c59", "#014636"),
    "BuPu": ("#f7fcfd", "#e0ecf4", "#bfd3e6", "#9ebcda", "#8c96c6", "#8c6bb1", "#88419d", "#810f7c", "#4d004b"),
    "GnBu": ("#f7fcf0", "#e0f3db", "#ccebc5", "#a8ddb5", "#7bccc4", "#4eb3d3", "#2b8cbe", "#0868ac", "#084081"),
    "Spectral": ("#d53e4f", "#f46d43", "#fdae61", "#fee08b", "#ffffbf", "#e6f598", "#abdda4", "#66c2a5", "#3288bd"),
    "RdYlBu": ("#d73027", "#f46d43", "#fdae61", "#fee090", "#ffffbf", "#e0f3f8", "#abd9e9", "#74add1", "#4575b4"),
}


def _hex_to_rgb(palette: tuple[str, ...]) -> NDArray[np.float64]:
    return np.array(
        [[int(c[i:i + 2], 16) for i in (1, 3, 5)] for c in palette],
        dtype=np.float64,
    )


def _ramp(colors: NDArray[np.float64], t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Linearly interpolate a colour ramp at positions t in [0, 1]."""
    stops = np.linspace(0.0, 1.0, len(colors))
    return np.stack([np.interp(t, stops, colors[:, c]) for c in range(3)], axis=-1)


@dataclass
class MosaicTextureGenerator(TextureGenerator):
    """Generates a seeded low-poly triangle mosaic.

    Attributes:
        width: Texture width in pixels
        height: Texture height in pixels
        seed: Seed for point layout, palette choice and colour variance
        cells: Grid cells per side in unit space
        variance: How far interior points wander, as a fraction of a cell
        color_variance: Per-triangle brightness jitter, 0-255 scale
        palette: Palette name from PALETTES, or None to pick one from the seed
    """

    cells: int = 12
    variance: float = 0.75
    color_variance: float = 6.0
    palette: str | None = None

    def generate(self) -> Image.Image:
        """Generate the mosaic."""
        points = self._points()
        triangles = self._triangles()
        colors = self._colors(points, triangles)

        image = self._new_canvas("#000000", mode="RGB")
        draw = ImageDraw.Draw(image)
        scale = np.array([self.width, self.height], dtype=np.float64)
        pixels = points * scale

        for tri, color in zip(triangles, colors):
            corners = [tuple(p) for p in pixels[tri].tolist()]
            fill = tuple(int(c) for c in color)
            # Outline in the fill colour hides anti-aliasing seams
            draw.polygon(corners, fill=fill, outline=fill)

        return image.convert("RGBA")

    def _points(self) -> NDArray[np.float64]:
        """Jittered (cells+1)^2 lattice in unit space; border points stay on the border."""
        n = self.cells + 1
        grid = np.linspace(0.0, 1.0, n)
        xs, ys = np.meshgrid(grid, grid)
        points = np.stack([xs.ravel(), ys.ravel()], axis=-1)

        reach = self.variance / self.cells / 2
        jitter = self._rng.uniform(-reach, reach, size=points.shape)
        on_x_edge = np.isclose(points[:, 0], 0.0) | np.isclose(points[:, 0], 1.0)
        on_y_edge = np.isclose(points[:, 1], 0.0) | np.isclose(points[:, 1], 1.0)
        jitter[on_x_edge, 0] = 0.0
        jitter[on_y_edge, 1] = 0.0
        return points + jitter

    def _triangles(self) -> NDArray[np.int64]:
        """Split each lattice cell into two triangles along a random diagonal."""
        n = self.cells + 1
        flips = self._rng.random(self.cells * self.cells) < 0.5
        triangles = []
        for row in range(self.cells):
            for col in range(self.cells):
                a = row * n + col
                b = a + 1
                c = a + n
                d = c + 1
                if flips[row * self.cells + col]:
                    triangles.extend([(a, b, d), (a, d, c)])
                else:
                    triangles.extend([(a, b, c), (b, d, c)])
        return np.array(triangles, dtype=np.int64)

    def _colors(self, points: NDArray[np.float64], triangles: NDArray[np.int64]) -> NDArray[np.uint8]:
        names = sorted(PALETTES)
        name = self.palette or names[int(self._rng.integers(len(names)))]
        if name not in PALETTES:
            raise ValueError(f"Unknown palette: {name}")
        x_colors = _hex_to_rgb(PALETTES[name])
        y_colors = x_colors[::-1]

        centroids = np.clip(points[triangles].mean(axis=1), 0.0, 1.0)
        blended = (_ramp(x_colors, centroids[:, 0]) + _ramp(y_colors, centroids[:, 1])) / 2
        shade = self._rng.uniform(-self.color_variance, self.color_variance, size=(len(triangles), 1))
        return np.clip(np.round(blended + shade), 0, 255).astype(np.uint8)
