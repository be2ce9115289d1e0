"""Content-sniffing image decoder producing immutable raster images."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image

from ..errors import DecodeError, UnsupportedFormat
from ..logging import get_logger

logger = get_logger(__name__)

# Closed set of supported codecs, keyed by Pillow format name.
SIGNATURES = {
    "PNG": b"\x89PNG\r\n\x1a\n",
    "JPEG": b"\xff\xd8\xff",
}
SUPPORTED_FORMATS = tuple(SIGNATURES)

_GRAY_MODES = {"1", "L", "I", "I;16", "I;16B", "I;16L", "F"}
_DIRECT_RGBA_MODES = {"RGBA", "RGB", "P", "PA", "LA", "La", "RGBa"}


@dataclass(frozen=True, eq=False)
class RasterImage:
    """A decoded image: 8-bit samples stored row-major.

    ``pixels`` has shape ``(height, width)`` for mode ``L`` and
    ``(height, width, 4)`` for mode ``RGBA``; it is never writeable.
    """
    width: int
    height: int
    mode: str
    pixels: np.ndarray
    format: Optional[str] = None

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_pil(cls, img: Image.Image, format: Optional[str] = None) -> RasterImage:
        """Normalise a loaded Pillow image to ``L`` or ``RGBA`` and freeze it."""
        if img.mode in _GRAY_MODES:
            if img.mode != "L":
                img = img.convert("L")
        elif img.mode in _DIRECT_RGBA_MODES:
            if img.mode != "RGBA":
                img = img.convert("RGBA")
        else:
            # CMYK, YCbCr, LAB and friends go through RGB first.
            img = img.convert("RGB").convert("RGBA")

        pixels = np.array(img, dtype=np.uint8)
        pixels.setflags(write=False)
        width, height = img.size
        if width <= 0 or height <= 0:
            raise DecodeError(f"Decoded image has empty dimensions {width}x{height}")
        return cls(width=width, height=height, mode=img.mode, pixels=pixels, format=format)


def sniff_format(data: bytes) -> Optional[str]:
    """Return the format whose magic bytes prefix ``data``, if any."""
    for name, signature in SIGNATURES.items():
        if data.startswith(signature):
            return name
    return None


def decode_image(data: bytes, claimed_format: Optional[str] = None) -> RasterImage:
    """
    Decode an encoded image buffer into a RasterImage.

    The format is chosen from the buffer's magic bytes. ``claimed_format`` is
    only a hint; when it disagrees with the content a warning is logged and the
    sniffed format is used.

    Args:
        data: Encoded image bytes
        claimed_format: Format reported by the caller (e.g. from metadata)

    Returns:
        RasterImage with the decoded pixels

    Raises:
        UnsupportedFormat: If no supported signature matches
        DecodeError: If a signature matches but the payload is corrupt
    """
    fmt = sniff_format(data)
    if fmt is None:
        raise UnsupportedFormat(
            f"Unrecognised image signature {bytes(data[:8]).hex()!r}; "
            f"supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )

    if claimed_format is not None and claimed_format.upper().replace("JPG", "JPEG") != fmt:
        logger.warning(f"Claimed format {claimed_format!r} does not match content, decoding as {fmt}")

    try:
        with Image.open(io.BytesIO(data), formats=[fmt]) as img:
            img.load()
            raster = RasterImage.from_pil(img, format=fmt)
    except Image.DecompressionBombError as exc:
        raise DecodeError(f"{fmt} image exceeds the pixel limit: {exc}") from exc
    except (OSError, SyntaxError, ValueError, EOFError) as exc:
        raise DecodeError(f"Failed to decode {fmt} payload: {exc}") from exc

    logger.debug(f"Decoded {fmt} image {raster.width}x{raster.height} ({raster.mode})")
    return raster
