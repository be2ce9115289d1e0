"""
Deterministic grayscale conversion and downsampling.

All arithmetic here is done on integers so that the reduced grid, and
therefore the hash, is identical on every platform.
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np

from .decoder import RasterImage

# ITU-R BT.601 luma weights, in thousandths.
LUMA_WEIGHTS = (299, 587, 114)
LUMA_SCALE = 1000


def to_luminance(raster: RasterImage) -> np.ndarray:
    """Return an ``int64`` luminance plane of shape ``(height, width)``.

    ``Y = (299 R + 587 G + 114 B + 500) // 1000``; alpha is ignored.
    """
    if raster.mode == "L":
        return raster.pixels.astype(np.int64)
    if raster.mode != "RGBA":
        raise ValueError(f"Unsupported raster mode {raster.mode!r}")

    rgb = raster.pixels[..., :3].astype(np.int64)
    wr, wg, wb = LUMA_WEIGHTS
    weighted = wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]
    return (weighted + LUMA_SCALE // 2) // LUMA_SCALE


@lru_cache(maxsize=64)
def _triangle_weights(src: int, dst: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Integer triangle-filter weights mapping ``src`` samples onto ``dst``.

    In source-pixel units the distance between source centre ``j + 0.5`` and
    output centre ``(i + 0.5) * src / dst`` is ``|(2j+1)*dst - (2i+1)*src| / (2*dst)``.
    The kernel spans ``max(src/dst, 1)`` pixels, so multiplying through by
    ``2 * max(src, dst)`` gives exact integer weights.

    Returns:
        ``(weights, totals)`` where ``weights`` has shape ``(dst, src)`` and
        ``totals`` holds each row's sum
    """
    i = np.arange(dst, dtype=np.int64)[:, None]
    j = np.arange(src, dtype=np.int64)[None, :]
    distance = np.abs((2 * j + 1) * dst - (2 * i + 1) * src)
    weights = np.maximum(0, 2 * max(src, dst) - distance)
    totals = weights.sum(axis=1)
    weights.setflags(write=False)
    totals.setflags(write=False)
    return weights, totals


def _round_div(numerator: np.ndarray, denominator: np.ndarray) -> np.ndarray:
    # Round half up; both operands are non-negative.
    return (2 * numerator + denominator) // (2 * denominator)


def resample(plane: np.ndarray, rows: int, cols: int) -> np.ndarray:
    """
    Resize an integer sample plane to ``rows x cols`` with a triangle filter.

    The horizontal pass runs first and is rounded back to integers before
    the vertical pass, so results never depend on summation order.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError(f"Target grid must be positive, got {rows}x{cols}")
    height, width = plane.shape
    plane = plane.astype(np.int64, copy=False)

    if width != cols:
        weights, totals = _triangle_weights(width, cols)
        plane = _round_div(plane @ weights.T, totals[None, :])
    if height != rows:
        weights, totals = _triangle_weights(height, rows)
        plane = _round_div(weights @ plane, totals[:, None])
    return plane


def reduce(raster: RasterImage, rows: int, cols: int) -> np.ndarray:
    """Grayscale and downsample ``raster`` into a ``uint8`` grid of ``rows x cols``."""
    grid = resample(to_luminance(raster), rows, cols).astype(np.uint8)
    grid.setflags(write=False)
    return grid
