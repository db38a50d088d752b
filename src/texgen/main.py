"""Main entry point for texgen."""

from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path

from .core.config import ConfigLoader, SynthesisConfig
from .core.entropy import EntropySource, FixedEntropy
from .core.errors import TexgenError
from .core.logging import configure_logging, get_logger
from .core.raster import RasterImage
from .synthesizer import PatternMode, PatternSynthesizer, generate_scatter_texture

logger = get_logger(__name__)

_EXTENSIONS = {
    "image/png": "png",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}


def _parse_size(value: str) -> tuple[int, int]:
    try:
        width, height = (int(v) for v in value.lower().split("x"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected WxH, got {value!r}") from exc
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive, got {value!r}")
    return width, height


def _parse_seed(value: str) -> float:
    try:
        seed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected a number, got {value!r}") from exc
    if not math.isfinite(seed):
        raise argparse.ArgumentTypeError(f"Seed must be finite, got {value!r}")
    return seed


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="texgen",
        description="Texgen - Procedural Background Pattern Generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="YAML settings file (default: built-in settings)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    parser.add_argument(
        "-o", "--output",
        metavar="DIR",
        default=".",
        help="Directory to write images to (default: current directory)",
    )
    parser.add_argument(
        "--seed",
        type=_parse_seed,
        help="Fixed seed for reproducible output (default: random)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Render thumbnail and full images for a pattern mode")
    generate.add_argument(
        "mode",
        help=f"Pattern mode: {', '.join(m.value for m in PatternMode)}",
    )
    generate.add_argument(
        "-b", "--background",
        default="#ffffff",
        help="Background colour for hand-drawn modes (default: #ffffff)",
    )
    generate.add_argument(
        "-n", "--count",
        type=int,
        default=1,
        help="Number of candidates to render (default: 1)",
    )

    scatter = commands.add_parser("scatter", help="Render a scattered hand-drawn circle texture")
    scatter.add_argument(
        "--size",
        type=_parse_size,
        metavar="WxH",
        default=(300, 300),
        help="Texture size (default: 300x300)",
    )
    return parser.parse_args(argv)


def _write(image: RasterImage, directory: Path, stem: str) -> Path:
    path = directory / f"{stem}.{_EXTENSIONS[image.mime_type]}"
    image.save(str(path))
    return path


def main(argv: list[str] | None = None) -> int:
    """Run the texgen command line."""
    args = parse_args(argv)

    try:
        config = ConfigLoader().load(args.config) if args.config else SynthesisConfig()
    except TexgenError as exc:
        print(f"texgen: {exc.message}", file=sys.stderr)
        return 2
    configure_logging(args.log_level or config.log_level, config.log_format)

    output = Path(args.output)
    output.mkdir(parents=True, exist_ok=True)

    if args.command == "scatter":
        width, height = args.size
        image = generate_scatter_texture(width, height, seed=args.seed, image_format=config.image_format)
        path = _write(image, output, "scatter")
        logger.info("texture_written", path=str(path), width=width, height=height)
        return 0

    entropy = FixedEntropy(args.seed) if args.seed is not None else EntropySource()
    synthesizer = PatternSynthesizer(config=config, entropy=entropy)
    try:
        results = synthesizer.generate_batch(args.mode, args.background, count=args.count)
    except TexgenError as exc:
        print(f"texgen: {exc.message}", file=sys.stderr)
        return 2

    mode = PatternMode.parse(args.mode)
    for index, result in enumerate(results):
        suffix = f"-{index}" if len(results) > 1 else ""
        for label, image in (("thumbnail", result.thumbnail), ("full", result.full)):
            path = _write(image, output, f"{mode.value}{suffix}-{label}")
            logger.info(
                "pattern_written",
                path=str(path),
                width=image.width,
                height=image.height,
                fallback=result.fallback,
            )
    return 0


if __name__ == "__main__":
    sys.exit(main())
