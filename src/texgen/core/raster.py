"""Encoded images handed back to callers."""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass

from PIL import Image

from .errors import RenderError

THUMBNAIL_FALLBACK_COLOR = "#f9f9f9"
FULL_FALLBACK_COLOR = "#ffffff"

_MIME_TYPES = {
    "PNG": "image/png",
    "WEBP": "image/webp",
}
SVG_MIME_TYPE = "image/svg+xml"


@dataclass(frozen=True)
class RasterImage:
    """An encoded image of known pixel dimensions.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        mime_type: MIME type of the encoded payload
        payload: Encoded image bytes (PNG/WEBP, or SVG markup for placeholders)
    """

    width: int
    height: int
    mime_type: str
    payload: bytes

    @classmethod
    def from_image(cls, image: Image.Image, image_format: str = "PNG") -> RasterImage:
        """Encode a PIL image losslessly.

        Args:
            image: Image to encode; converted to RGBA first
            image_format: "PNG" or "WEBP"

        Returns:
            RasterImage wrapping the encoded bytes
        """
        image_format = image_format.upper()
        if image_format not in _MIME_TYPES:
            raise RenderError(f"Unsupported image format: {image_format}")

        buffer = io.BytesIO()
        options = {"lossless": True} if image_format == "WEBP" else {}
        image.convert("RGBA").save(buffer, format=image_format, **options)
        return cls(
            width=image.width,
            height=image.height,
            mime_type=_MIME_TYPES[image_format],
            payload=buffer.getvalue(),
        )

    @classmethod
    def placeholder(cls, width: int, height: int, color: str) -> RasterImage:
        """Build a minimal flat-colour SVG of the given size."""
        svg = (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}">'
            f'<rect width="{width}" height="{height}" fill="{color}"/></svg>'
        )
        return cls(width=width, height=height, mime_type=SVG_MIME_TYPE, payload=svg.encode("utf-8"))

    @property
    def is_vector(self) -> bool:
        return self.mime_type == SVG_MIME_TYPE

    @property
    def data_uri(self) -> str:
        """Base64 data URI suitable for an <img> src or CSS background."""
        encoded = base64.b64encode(self.payload).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    def decode(self) -> Image.Image:
        """Decode the raster payload back into an RGBA PIL image.

        Raises:
            RenderError: If the payload is a vector placeholder
        """
        if self.is_vector:
            raise RenderError("Vector placeholders cannot be decoded to pixels")
        return Image.open(io.BytesIO(self.payload)).convert("RGBA")

    def save(self, path: str) -> None:
        """Write the encoded payload to disk as-is."""
        with open(path, "wb") as f:
            f.write(self.payload)


@dataclass(frozen=True)
class PatternResult:
    """Thumbnail and full-size images produced by one generation request."""

    thumbnail: RasterImage
    full: RasterImage
    fallback: bool = False

    @classmethod
    def blank(
        cls,
        thumbnail_size: tuple[int, int] = (300, 100),
        full_size: tuple[int, int] = (1240, 1748),
    ) -> PatternResult:
        """The static result returned when generation fails."""
        return cls(
            thumbnail=RasterImage.placeholder(*thumbnail_size, THUMBNAIL_FALLBACK_COLOR),
            full=RasterImage.placeholder(*full_size, FULL_FALLBACK_COLOR),
            fallback=True,
        )

    def as_dict(self) -> dict[str, str]:
        """Data URIs keyed the way the editor expects them."""
        return {"thumbnail": self.thumbnail.data_uri, "full": self.full.data_uri}
