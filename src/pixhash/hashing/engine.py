"""Raster to perceptual hash pipeline."""

from __future__ import annotations

import imagehash

from ..image.decoder import RasterImage
from ..image.reducer import reduce
from ..logging import get_logger
from .algorithms import DEFAULT_ALGORITHM, DEFAULT_HASH_SIZE, HashAlgorithm, extract_bits, grid_shapes

logger = get_logger(__name__)


def compute_hash(
    raster: RasterImage,
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM,
    hash_size: int = DEFAULT_HASH_SIZE,
) -> imagehash.ImageHash:
    """
    Compute a perceptual hash of a decoded raster.

    The grid shapes, and therefore the hash length, are settled from
    ``algorithm`` and ``hash_size`` before any pixel is read.

    Args:
        raster: Decoded image
        algorithm: Hash algorithm to apply
        hash_size: Number of bits in the hash

    Returns:
        ImageHash wrapping a ``sqrt(hash_size)`` square boolean matrix

    Raises:
        ValueError: If ``hash_size`` is not supported
    """
    shapes = grid_shapes(algorithm, hash_size)
    grids = [reduce(raster, rows, cols) for rows, cols in shapes]
    bits = extract_bits(algorithm, grids, hash_size)

    result = imagehash.ImageHash(bits)
    logger.debug(f"{algorithm} hash ({hash_size} bits) of {raster.width}x{raster.height} image: {result}")
    return result
