"""Tests for the simplex noise field and its permutation table."""

import math

import numpy as np
import pytest

from texgen.textures.noise import (
    REFERENCE_PERMUTATION,
    NoiseField,
    PermutationTable,
    normalize_seed,
)

# Reference values for seed 0 (both seed bytes are zero, so the table is
# the untouched reference permutation)
KNOWN_SEED_ZERO = {
    (0.5, 0.25): -0.6471486502994073,
    (-3.7, 12.1): 0.6252001127697904,
    (1.1, 2.3): 0.020501645456618093,
    (100.3, -57.9): 0.15791208981716054,
}


@pytest.mark.parametrize("value,expected", [
    (0, 0),
    (1, 257),
    (2, 514),
    (255, 65535),
    (256, 256),
    (300.9, 300),
    (0.5, 32768),
    (0.25, 16384),
    (70000, 70000),
])
def test_normalize_seed(value, expected):
    """Fractions scale by 65536, small seeds fold into the high byte."""
    assert normalize_seed(value) == expected


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_normalize_seed_rejects_non_finite(value):
    with pytest.raises(ValueError):
        normalize_seed(value)


def test_seed_zero_table_is_reference_permutation():
    table = PermutationTable(0)
    assert len(table) == 512
    assert [table.lookup(i) for i in range(256)] == list(REFERENCE_PERMUTATION)


def test_table_is_doubled_and_gradients_follow_values():
    """Entries repeat after 256 and each gradient is GRAD3[value % 12]."""
    from texgen.textures.noise import GRAD3

    table = PermutationTable(12345)
    for i in range(256):
        assert table.lookup(i) == table.lookup(i + 256)
        assert table.gradient(i) == GRAD3[table.lookup(i) % 12]


def test_folded_small_seed_keeps_a_permutation():
    """Seeds below 256 XOR every entry with the same byte, so values stay a bijection."""
    table = PermutationTable(77)
    assert sorted(table.lookup(i) for i in range(256)) == list(range(256))


def test_table_xors_even_and_odd_entries_with_seed_bytes():
    """Even entries use the low seed byte, odd entries the high byte."""
    seed = 0x1234
    table = PermutationTable(seed)
    for i in range(256):
        key = 0x34 if i % 2 == 0 else 0x12
        assert table.lookup(i) == REFERENCE_PERMUTATION[i] ^ key


def test_table_arrays_are_read_only():
    table = PermutationTable(7)
    with pytest.raises(ValueError):
        table.perm[0] = 1


@pytest.mark.parametrize("point,expected", list(KNOWN_SEED_ZERO.items()))
def test_known_values(point, expected):
    field = NoiseField(0)
    assert field.sample(*point) == pytest.approx(expected, abs=1e-12)


def test_origin_is_zero():
    assert NoiseField(0).sample(0.0, 0.0) == 0.0
    assert NoiseField(999).sample(0.0, 0.0) == 0.0


def test_determinism_across_instances():
    """Same seed gives bit-identical values regardless of instance or call order."""
    points = [(x * 0.731, y * -1.37) for x in range(-20, 20) for y in range(-5, 5)]
    a = NoiseField(42)
    b = NoiseField(42)
    forward = [a.sample(x, y) for x, y in points]
    backward = [b.sample(x, y) for x, y in reversed(points)]
    assert forward == backward[::-1]
    assert forward == [a.sample(x, y) for x, y in points]


def test_reseed_is_idempotent():
    points = [(3.3 + k * 0.71, 4.4 - k * 1.13) for k in range(50)]
    field = NoiseField(5)
    before = [field.sample(x, y) for x, y in points]
    field.seed(77)
    changed = [field.sample(x, y) for x, y in points]
    field.seed(5)
    assert [field.sample(x, y) for x, y in points] == before
    assert changed != before


def test_fractional_seed_matches_scaled_integer():
    assert NoiseField(0.5).sample(1.7, 8.2) == NoiseField(32768).sample(1.7, 8.2)


def test_independent_fields_do_not_interfere():
    a = NoiseField(1)
    expected = a.sample(10.1, 20.2)
    b = NoiseField(2)
    b.seed(3)
    assert a.sample(10.1, 20.2) == expected


def test_sample_array_matches_scalar_exactly():
    """Vectorized path is bit-identical to the scalar path, negatives included."""
    field = NoiseField(31337)
    xs = np.linspace(-300.0, 300.0, 157)
    ys = np.linspace(-260.0, 510.0, 113)
    xv, yv = np.meshgrid(xs, ys)
    grid = field.sample_array(xv, yv)
    for (r, c) in [(0, 0), (5, 100), (56, 78), (112, 156), (77, 3)]:
        assert grid[r, c] == field.sample(float(xv[r, c]), float(yv[r, c]))
    scalar = np.array([[field.sample(float(x), float(y)) for x in xs[:40]] for y in ys[:20]])
    np.testing.assert_array_equal(grid[:20, :40], scalar)


def test_sample_grid_uses_pixel_over_frequency():
    field = NoiseField(9)
    grid = field.sample_grid(30, 12, frequency=100.0)
    assert grid.shape == (12, 30)
    assert grid[7, 19] == field.sample(19 / 100.0, 7 / 100.0)


def test_range_over_dense_grid():
    """Values stay within [-1, 1] over x, y in [-50, 50] step 0.37."""
    coords = np.arange(-50.0, 50.0, 0.37)
    xv, yv = np.meshgrid(coords, coords)
    for seed in (0, 1, 4242, 0.618):
        values = NoiseField(seed).sample_array(xv, yv)
        assert values.min() >= -1.0 - 1e-9
        assert values.max() <= 1.0 + 1e-9
        assert values.std() > 0.1


@pytest.mark.parametrize("origin", [0.0, 256.0, 512.0, -256.0, 256.0 * 40])
def test_continuity_across_table_wrap(origin):
    """Neighbouring samples 0.01 apart differ by a small bound, including at wrap boundaries."""
    field = NoiseField(2024)
    xs = np.arange(origin - 3.0, origin + 3.0, 0.01)
    for y in (origin - 0.5, 0.33, origin + 1.77):
        row = field.sample_array(xs, np.full_like(xs, y))
        assert np.abs(np.diff(row)).max() < 0.1
        col = field.sample_array(np.full_like(xs, y), xs)
        assert np.abs(np.diff(col)).max() < 0.1


def test_seed_sensitivity():
    """Different seeds give different fields over the same grid."""
    i, j = np.meshgrid(np.arange(100), np.arange(100))
    xs = i * 0.37 + 0.13
    ys = j * 0.37 + 0.29
    a = NoiseField(12345).sample_array(xs, ys)
    b = NoiseField(54321).sample_array(xs, ys)
    assert a.size == 10_000
    # The 12-direction gradient set makes a small share of coincidences unavoidable
    assert np.mean(a == b) < 0.05
    assert np.abs(a - b).mean() > 0.1


@pytest.mark.parametrize("x,y", [
    (math.nan, 1.0),
    (1.0, math.inf),
    (-math.inf, -math.inf),
    (1e308, 1e308),
])
def test_non_finite_coordinates_return_zero(x, y):
    field = NoiseField(3)
    assert field.sample(x, y) == 0.0
    assert field.sample_array([x], [y])[0] == 0.0


@pytest.mark.parametrize("x,y", [(1e300, -1e300), (-1e15, 3.5), (-123456.789, -0.001), (2**53, 2**40)])
def test_extreme_coordinates_do_not_crash(x, y):
    field = NoiseField(3)
    value = field.sample(x, y)
    assert math.isfinite(value)
    assert field.sample_array([x], [y])[0] == value
