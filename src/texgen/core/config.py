"""Synthesis settings and their YAML loader."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

LOG_FORMATS = ("console", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
IMAGE_FORMATS = ("PNG", "WEBP")


@dataclass(frozen=True)
class SynthesisConfig:
    """Settings shared by every generation request.

    Attributes:
        thumbnail_size: (width, height) of the preview image
        full_size: (width, height) of the full-page image
        noise_frequency: Pixel divisor applied before sampling noise
                         (smaller = coarser features)
        batch_size: Number of candidates produced by generate_batch()
        image_format: Raster encoding for data URIs
        log_level: Level name passed to configure_logging()
        log_format: "console" or "json"
    """

    thumbnail_size: tuple[int, int] = (300, 100)
    full_size: tuple[int, int] = (1240, 1748)
    noise_frequency: float = 100.0
    batch_size: int = 6
    image_format: str = "PNG"
    log_level: str = "INFO"
    log_format: str = "console"

    def __post_init__(self) -> None:
        for name in ("thumbnail_size", "full_size"):
            size = getattr(self, name)
            if len(size) != 2 or any(int(v) <= 0 for v in size):
                raise ConfigError(f"{name} must be two positive integers, got {size!r}")
        if self.noise_frequency <= 0:
            raise ConfigError(f"noise_frequency must be positive, got {self.noise_frequency}")
        if self.batch_size < 1:
            raise ConfigError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.image_format.upper() not in IMAGE_FORMATS:
            raise ConfigError(f"Unsupported image format: {self.image_format}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level}")
        if self.log_format not in LOG_FORMATS:
            raise ConfigError(f"Unknown log format: {self.log_format}")


class ConfigLoader:
    """Loads SynthesisConfig from YAML files.

    YAML format:
    ```yaml
    thumbnail_size: [300, 100]
    full_size: [1240, 1748]
    noise_frequency: 100
    batch_size: 6
    image_format: PNG
    logging:
      level: INFO
      format: console
    ```
    Missing keys fall back to the SynthesisConfig defaults.
    """

    def load(self, path: str | Path) -> SynthesisConfig:
        """Load settings from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            SynthesisConfig instance

        Raises:
            ConfigError: If the file is missing or its contents are invalid
        """
        yaml_path = Path(path)
        if not yaml_path.exists():
            raise ConfigError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {yaml_path}: {exc}") from exc

        return self.parse(data or {})

    def parse(self, data: dict[str, Any]) -> SynthesisConfig:
        """Build a SynthesisConfig from already-parsed YAML data."""
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

        converted = dict(data)
        logging_data = converted.pop("logging", None) or {}
        if not isinstance(logging_data, dict):
            raise ConfigError(f"logging must be a mapping, got {type(logging_data).__name__}")
        if "level" in logging_data:
            converted["log_level"] = str(logging_data["level"])
        if "format" in logging_data:
            converted["log_format"] = str(logging_data["format"])

        known = {f.name for f in fields(SynthesisConfig)}
        unknown = set(converted) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")

        # Convert size lists to tuples
        for key in ("thumbnail_size", "full_size"):
            if key in converted:
                converted[key] = self._parse_size(key, converted[key])

        try:
            if "noise_frequency" in converted:
                converted["noise_frequency"] = float(converted["noise_frequency"])
            if "batch_size" in converted:
                converted["batch_size"] = int(converted["batch_size"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid numeric value: {exc}") from exc

        return SynthesisConfig(**converted)

    def _parse_size(self, key: str, value: Any) -> tuple[int, int]:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise ConfigError(f"{key} must be a [width, height] pair, got {value!r}")
        try:
            return (int(value[0]), int(value[1]))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{key} must contain integers: {exc}") from exc
