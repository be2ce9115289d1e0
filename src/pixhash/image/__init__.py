"""Decoding and reduction of raster images into hashable sample grids."""

from .decoder import RasterImage, decode_image, sniff_format, SUPPORTED_FORMATS
from .reducer import reduce, resample, to_luminance

__all__ = [
    "RasterImage",
    "decode_image",
    "sniff_format",
    "SUPPORTED_FORMATS",
    "reduce",
    "resample",
    "to_luminance",
]
