"""2D simplex noise with a seedable permutation table.

Implements gradient noise on a skewed triangular lattice. Each NoiseField
owns its permutation table, so independent fields never interfere.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

F2 = 0.5 * (math.sqrt(3) - 1)
G2 = (3 - math.sqrt(3)) / 6

# Output scale bringing the summed corner contributions into [-1, 1]
NORMALIZATION = 70.0

# x/y components of the 12 classic 3D gradient directions
GRAD3: tuple[tuple[int, int], ...] = (
    (1, 1), (-1, 1), (1, -1), (-1, -1),
    (1, 0), (-1, 0), (1, 0), (-1, 0),
    (0, 1), (0, -1), (0, 1), (0, -1),
)

# Ken Perlin's reference permutation
REFERENCE_PERMUTATION: tuple[int, ...] = (
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225, 140, 36, 103, 30, 69, 142,
    8, 99, 37, 240, 21, 10, 23, 190, 6, 148, 247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117,
    35, 11, 32, 57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175, 74, 165, 71,
    134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122, 60, 211, 133, 230, 220, 105, 92, 41,
    55, 46, 245, 40, 244, 102, 143, 54, 65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18,
    169, 200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64, 52, 217, 226,
    250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212, 207, 206, 59, 227, 47, 16, 58, 17,
    182, 189, 28, 42, 223, 183, 170, 213, 119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155,
    167, 43, 172, 9, 129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104, 218,
    246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241, 81, 51, 145, 235, 249,
    14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157, 184, 84, 204, 176, 115, 121, 50, 45, 127,
    4, 150, 254, 138, 236, 205, 93, 222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61,
    156, 180,
)


def normalize_seed(value: float | int) -> int:
    """Fold a seed into the 16-bit working range used by the table.

    Fractions in (0, 1) are scaled by 65536 first. Small seeds are copied
    into the high byte so both bytes of the table key vary.

    Args:
        value: Integer or real seed

    Returns:
        Integer whose low two bytes key the permutation

    Raises:
        ValueError: If value is not finite
    """
    if not math.isfinite(value):
        raise ValueError(f"Noise seed must be finite, got {value!r}")
    if 0 < value < 1:
        value *= 65536
    seed = math.floor(value)
    if abs(seed) < 256:
        seed |= seed << 8
    return seed


class PermutationTable:
    """Permuted byte table and per-entry gradients, doubled to 512 entries.

    Immutable once built; safe to share between readers.
    """

    __slots__ = ("perm", "grad_x", "grad_y", "_perm_list", "_grad_list")

    def __init__(self, seed: float | int = 0) -> None:
        key = normalize_seed(seed)
        low = key & 255
        high = (key >> 8) & 255

        values = [
            p ^ (low if i % 2 == 0 else high)
            for i, p in enumerate(REFERENCE_PERMUTATION)
        ]
        doubled = values + values
        grads = [GRAD3[v % 12] for v in doubled]

        self._perm_list = doubled
        self._grad_list = grads

        self.perm: NDArray[np.int64] = np.array(doubled, dtype=np.int64)
        self.grad_x: NDArray[np.float64] = np.array([g[0] for g in grads], dtype=np.float64)
        self.grad_y: NDArray[np.float64] = np.array([g[1] for g in grads], dtype=np.float64)
        for arr in (self.perm, self.grad_x, self.grad_y):
            arr.flags.writeable = False

    def __len__(self) -> int:
        return len(self._perm_list)

    def lookup(self, index: int) -> int:
        """Permuted value at index (0-511)."""
        return self._perm_list[index]

    def gradient(self, index: int) -> tuple[int, int]:
        """Gradient vector at index (0-511)."""
        return self._grad_list[index]


class NoiseField:
    """Seedable 2D simplex noise field.

    Example:
        field = NoiseField(seed=42)
        value = field.sample(1.5, 2.25)   # scalar in [-1, 1]
        grid = field.sample_grid(300, 100, frequency=100.0)
    """

    def __init__(self, seed: float | int = 0) -> None:
        self.table = PermutationTable(seed)

    def seed(self, value: float | int) -> None:
        """Rebuild the permutation table for a new seed."""
        self.table = PermutationTable(value)

    def sample(self, x: float, y: float) -> float:
        """Evaluate noise at a single coordinate.

        Args:
            x: X coordinate
            y: Y coordinate

        Returns:
            Noise value in approximately [-1, 1]; 0.0 for non-finite input
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            return 0.0

        # Skew into simplex space to find the containing cell
        s = (x + y) * F2
        if not (math.isfinite(x + s) and math.isfinite(y + s)):
            return 0.0
        i = float(math.floor(x + s))
        j = float(math.floor(y + s))

        # Unskewed distance from the cell origin
        t = (i + j) * G2
        x0 = x - i + t
        y0 = y - j + t

        # Lower or upper triangle of the cell
        if x0 > y0:
            i1, j1 = 1, 0
        else:
            i1, j1 = 0, 1

        x1 = x0 - i1 + G2
        y1 = y0 - j1 + G2
        x2 = x0 - 1 + 2 * G2
        y2 = y0 - 1 + 2 * G2

        perm = self.table.lookup
        grad = self.table.gradient
        ii = int(i) & 255
        jj = int(j) & 255
        g0 = grad(ii + perm(jj))
        g1 = grad(ii + i1 + perm(jj + j1))
        g2 = grad(ii + 1 + perm(jj + 1))

        return NORMALIZATION * (
            _corner(g0, x0, y0) + _corner(g1, x1, y1) + _corner(g2, x2, y2)
        )

    def sample_array(self, x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
        """Evaluate noise elementwise over broadcastable coordinate arrays.

        Produces exactly the same values as sample() for every element.

        Args:
            x: X coordinates
            y: Y coordinates

        Returns:
            Array of noise values with the broadcast shape of x and y
        """
        xs, ys = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64)
        )

        with np.errstate(invalid="ignore", over="ignore"):
            s = (xs + ys) * F2
            i = np.floor(xs + s)
            j = np.floor(ys + s)
            valid = np.isfinite(xs) & np.isfinite(ys) & np.isfinite(i) & np.isfinite(j)

            xs = np.where(valid, xs, 0.0)
            ys = np.where(valid, ys, 0.0)
            i = np.where(valid, i, 0.0)
            j = np.where(valid, j, 0.0)

            t = (i + j) * G2
            x0 = xs - i + t
            y0 = ys - j + t

        i1 = (x0 > y0).astype(np.int64)
        j1 = 1 - i1

        x1 = x0 - i1 + G2
        y1 = y0 - j1 + G2
        x2 = x0 - 1 + 2 * G2
        y2 = y0 - 1 + 2 * G2

        perm = self.table.perm
        ii = np.mod(i, 256).astype(np.int64)
        jj = np.mod(j, 256).astype(np.int64)
        gi0 = ii + perm[jj]
        gi1 = ii + i1 + perm[jj + j1]
        gi2 = ii + 1 + perm[jj + 1]

        n0 = self._corner_array(gi0, x0, y0)
        n1 = self._corner_array(gi1, x1, y1)
        n2 = self._corner_array(gi2, x2, y2)

        result = NORMALIZATION * (n0 + n1 + n2)
        return np.where(valid, result, 0.0)

    def sample_grid(
        self,
        width: int,
        height: int,
        frequency: float = 100.0,
    ) -> NDArray[np.float64]:
        """Sample noise at every pixel of a width x height canvas.

        Pixel (x, y) is sampled at (x / frequency, y / frequency).

        Returns:
            height x width array of noise values
        """
        xs = np.arange(width, dtype=np.float64) / frequency
        ys = np.arange(height, dtype=np.float64) / frequency
        xv, yv = np.meshgrid(xs, ys)
        return self.sample_array(xv, yv)

    def _corner_array(
        self,
        index: NDArray[np.int64],
        dx: NDArray[np.float64],
        dy: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """Vectorized radial falloff times gradient dot product."""
        t = 0.5 - dx * dx - dy * dy
        t2 = t * t
        dot = self.table.grad_x[index] * dx + self.table.grad_y[index] * dy
        return np.where(t < 0, 0.0, t2 * t2 * dot)


def _corner(g: tuple[int, int], dx: float, dy: float) -> float:
    t = 0.5 - dx * dx - dy * dy
    if t < 0:
        return 0.0
    t *= t
    return t * t * (g[0] * dx + g[1] * dy)
