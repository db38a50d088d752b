"""Tests for pattern synthesis: dispatch, dimensions, determinism and fallback."""

import base64
import typing
import io

import numpy as np
import pytest
from PIL import Image

from texgen import (
    FixedEntropy,
    InvalidModeError,
    PatternMode,
    PatternResult,
    PatternSynthesizer,
    SynthesisConfig,
    generate_pattern,
    generate_scatter_texture,
)
from texgen.core.raster import RasterImage
from texgen.synthesizer import HandDrawnStrategy, MosaicStrategy, NoiseTintStrategy, PatternStrategy
from texgen.textures import NoiseField, tint_rgba

MODES = [m.value for m in PatternMode]

# Small sizes keep the dispatch tests fast; the dimension contract test uses the defaults
SMALL = SynthesisConfig(thumbnail_size=(60, 20), full_size=(124, 175))


class ExplodingStrategy(PatternStrategy):
    """Strategy whose collaborator always fails."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def texture(self, size, seed, background, config):
        raise self.error


class WrongSizeStrategy(PatternStrategy):
    def texture(self, size, seed, background, config):
        raise NotImplementedError

    def render(self, size, seed, background, config):
        return Image.new("RGBA", (size[0] + 1, size[1]))


def _decode_uri(uri: str) -> bytes:
    header, payload = uri.split(",", 1)
    assert header.endswith(";base64")
    return base64.b64decode(payload)


def test_mode_names():
    assert MODES == ["mosaic", "noise-tint", "hand-drawn-circles", "hand-drawn-grid", "hand-drawn-waves"]


@pytest.mark.parametrize("alias,mode", [
    ("triangles", PatternMode.MOSAIC),
    ("simplex", PatternMode.NOISE_TINT),
    ("rough-circles", PatternMode.HAND_DRAWN_CIRCLES),
    ("rough-grid", PatternMode.HAND_DRAWN_GRID),
    ("rough-waves", PatternMode.HAND_DRAWN_WAVES),
    ("  Noise-Tint ", PatternMode.NOISE_TINT),
    (PatternMode.MOSAIC, PatternMode.MOSAIC),
])
def test_mode_parse(alias, mode):
    assert PatternMode.parse(alias) is mode


@pytest.mark.parametrize("mode", ["", "plasma", "hand-drawn", "hand-drawn-stars", "rough", None, 3])
def test_unknown_mode_is_rejected(mode):
    synthesizer = PatternSynthesizer(config=SMALL)
    with pytest.raises(InvalidModeError):
        synthesizer.generate(mode)
    with pytest.raises(ValueError):
        synthesizer.generate_batch(mode)


def test_unknown_mode_is_rejected_before_drawing():
    """No strategy runs and no seed is consumed for an invalid mode."""
    class CountingEntropy(FixedEntropy):
        calls = 0

        def next_seed(self):
            CountingEntropy.calls += 1
            return super().next_seed()

    synthesizer = PatternSynthesizer(config=SMALL, entropy=CountingEntropy())
    with pytest.raises(InvalidModeError):
        synthesizer.generate("nope")
    assert CountingEntropy.calls == 0


@pytest.mark.parametrize("mode", MODES)
def test_every_mode_renders(mode):
    result = PatternSynthesizer(config=SMALL).generate(mode, "#fafafa")
    assert not result.fallback
    for image, size in ((result.thumbnail, (60, 20)), (result.full, (124, 175))):
        assert image.mime_type == "image/png"
        assert (image.width, image.height) == size
        assert image.data_uri.startswith("data:image/png;base64,")
        decoded = Image.open(io.BytesIO(_decode_uri(image.data_uri)))
        assert decoded.format == "PNG"
        assert decoded.size == size
        assert decoded.mode == "RGBA"


@pytest.mark.parametrize("mode", MODES)
def test_default_dimensions(mode):
    """Thumbnail is always 300x100 and full is always 1240x1748."""
    result = PatternSynthesizer().generate(mode, "#ffffff")
    assert not result.fallback
    assert result.thumbnail.decode().size == (300, 100)
    assert result.full.decode().size == (1240, 1748)


@pytest.mark.parametrize("mode", MODES)
def test_fixed_seed_is_reproducible(mode):
    a = PatternSynthesizer(config=SMALL, entropy=FixedEntropy(0.31415)).generate(mode, "#eeeeff")
    b = PatternSynthesizer(config=SMALL, entropy=FixedEntropy(0.31415)).generate(mode, "#eeeeff")
    assert a == b
    np.testing.assert_array_equal(np.array(a.full.decode()), np.array(b.full.decode()))


def test_fresh_seed_per_call():
    synthesizer = PatternSynthesizer(config=SMALL)
    first = synthesizer.generate("noise-tint")
    second = synthesizer.generate("noise-tint")
    assert first.full.payload != second.full.payload


def test_noise_tint_pixel_matches_documented_mapping():
    """With seed 0, pixel (0, 0) is tint_rgba(sample(0, 0)) byte for byte."""
    result = PatternSynthesizer(entropy=FixedEntropy(0)).generate("noise-tint", "#ffffff")
    expected = tint_rgba(NoiseField(0).sample(0, 0))
    assert expected == (255, 247, 250, 40)

    thumbnail = result.thumbnail.decode()
    full = result.full.decode()
    assert thumbnail.getpixel((0, 0)) == expected
    assert full.getpixel((0, 0)) == expected
    field = NoiseField(0)
    assert full.getpixel((1000, 1500)) == tint_rgba(field.sample(10.0, 15.0))


def test_hand_drawn_uses_background_colour():
    result = PatternSynthesizer(config=SMALL, entropy=FixedEntropy(4)).generate("hand-drawn-grid", "#336699")
    assert result.thumbnail.decode().getpixel((20, 10))[:3] == (0x33, 0x66, 0x99)


@pytest.mark.parametrize("mode", MODES)
@pytest.mark.parametrize("error", [RuntimeError("boom"), MemoryError(), ValueError("bad"), ZeroDivisionError()])
def test_collaborator_failure_returns_fallback(mode, error):
    pattern_mode = PatternMode.parse(mode)
    synthesizer = PatternSynthesizer(strategies={pattern_mode: ExplodingStrategy(error)})
    result = synthesizer.generate(mode, "#ffffff")
    assert result == PatternResult.blank()
    assert result.fallback


def test_fallback_pair_contents():
    result = PatternSynthesizer(strategies={PatternMode.MOSAIC: ExplodingStrategy(RuntimeError())}).generate("mosaic")
    assert result.thumbnail.mime_type == "image/svg+xml"
    assert (result.thumbnail.width, result.thumbnail.height) == (300, 100)
    assert (result.full.width, result.full.height) == (1240, 1748)

    thumb_svg = _decode_uri(result.thumbnail.data_uri).decode()
    full_svg = _decode_uri(result.full.data_uri).decode()
    assert 'width="300"' in thumb_svg and 'height="100"' in thumb_svg
    assert 'fill="#f9f9f9"' in thumb_svg
    assert 'width="1240"' in full_svg and 'height="1748"' in full_svg
    assert 'fill="#ffffff"' in full_svg
    assert result.thumbnail.data_uri.startswith("data:image/svg+xml;base64,")


def test_invalid_background_falls_back():
    result = PatternSynthesizer(config=SMALL).generate("hand-drawn-circles", "not-a-colour")
    assert result.fallback
    assert (result.thumbnail.width, result.thumbnail.height) == (60, 20)


def test_wrong_size_output_falls_back():
    synthesizer = PatternSynthesizer(config=SMALL, strategies={PatternMode.NOISE_TINT: WrongSizeStrategy()})
    assert synthesizer.generate("noise-tint").fallback


def test_failure_in_full_size_discards_thumbnail():
    """No partial results: a failure on the second canvas still yields the blank pair."""
    class FailOnLarge(PatternStrategy):
        def texture(self, size, seed, background, config):
            from texgen.textures import NoiseTintTextureGenerator

            if size[0] > 100:
                raise RuntimeError("too big")
            return NoiseTintTextureGenerator(width=size[0], height=size[1], seed=seed)

    synthesizer = PatternSynthesizer(config=SMALL, strategies={PatternMode.NOISE_TINT: FailOnLarge()})
    result = synthesizer.generate("noise-tint")
    assert result == synthesizer.fallback()


def test_generate_batch():
    synthesizer = PatternSynthesizer(config=SMALL)
    results = synthesizer.generate_batch("hand-drawn-waves", "#ffffff")
    assert len(results) == 6
    assert all(not r.fallback for r in results)
    assert len(synthesizer.generate_batch("mosaic", count=2)) == 2
    assert synthesizer.generate_batch("mosaic", count=0) == []
    with pytest.raises(ValueError):
        synthesizer.generate_batch("mosaic", count=-1)


def test_generate_pattern_helper():
    result = generate_pattern("triangles", config=SMALL, entropy=FixedEntropy(1))
    assert not result.fallback
    assert set(result.as_dict()) == {"thumbnail", "full"}


def test_webp_encoding():
    config = SynthesisConfig(thumbnail_size=(30, 10), full_size=(40, 50), image_format="WEBP")
    result = PatternSynthesizer(config=config, entropy=FixedEntropy(0)).generate("noise-tint")
    assert result.thumbnail.mime_type == "image/webp"
    assert result.thumbnail.decode().getpixel((0, 0)) == (255, 247, 250, 40)


def test_generate_scatter_texture():
    image = generate_scatter_texture(80, 60, seed=3)
    assert isinstance(image, RasterImage)
    assert image.decode().size == (80, 60)
    assert generate_scatter_texture(80, 60, seed=3) == image


@pytest.mark.parametrize("background,expected", [
    ("rgba(0, 0, 0, 0)", (0, 0, 0, 0)),
    ("rgba(255, 0, 0, 0.5)", (255, 0, 0, 128)),
    ("#ff000080", (255, 0, 0, 128)),
])
def test_hand_drawn_background_alpha_survives_encoding(background, expected):
    result = PatternSynthesizer(config=SMALL, entropy=FixedEntropy(4)).generate("hand-drawn-grid", background)
    assert not result.fallback
    assert result.thumbnail.decode().getpixel((20, 10)) == expected
    assert result.full.decode().getpixel((20, 20)) == expected


def test_entropy_failure_returns_fallback():
    class BrokenEntropy(FixedEntropy):
        def next_seed(self):
            raise RuntimeError("no entropy")

    result = PatternSynthesizer(entropy=BrokenEntropy()).generate("noise-tint")
    assert result == PatternResult.blank()


@pytest.mark.parametrize("strategy", [MosaicStrategy, NoiseTintStrategy, HandDrawnStrategy])
def test_strategy_signatures_are_typed(strategy):
    hints = typing.get_type_hints(strategy.texture)
    assert set(hints) == {"size", "seed", "background", "config", "return"}
    assert hints["config"] is SynthesisConfig
