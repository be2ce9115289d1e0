"""The closed family of perceptual hash algorithms and their bit rules."""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

# Powers of four keep every hash a square bit matrix with an even side.
SUPPORTED_HASH_SIZES = (16, 64, 256, 1024, 4096)
DEFAULT_HASH_SIZE = 64

# Edge length, in grid samples, of one Blockhash block.
BLOCK_SAMPLES = 4


class HashAlgorithm(Enum):
    MEAN = "Mean"
    GRADIENT = "Gradient"
    VERT_GRADIENT = "VertGradient"
    DOUBLE_GRADIENT = "DoubleGradient"
    BLOCKHASH = "Blockhash"

    @classmethod
    def parse(cls, token: str) -> HashAlgorithm:
        """Look up an algorithm by its wire name (``"Gradient"`` etc.)."""
        for member in cls:
            if member.value == token:
                return member
        raise ValueError(
            f"Unknown hash algorithm {token!r}; expected one of "
            f"{', '.join(m.value for m in cls)}"
        )

    def __str__(self) -> str:
        return self.value


DEFAULT_ALGORITHM = HashAlgorithm.GRADIENT


def hash_side(hash_size: int) -> int:
    """Validate ``hash_size`` and return the side of its square bit matrix."""
    if isinstance(hash_size, bool) or not isinstance(hash_size, int):
        raise ValueError(f"Hash size must be an integer, got {hash_size!r}")
    if hash_size not in SUPPORTED_HASH_SIZES:
        raise ValueError(
            f"Unsupported hash size {hash_size}; expected one of "
            f"{', '.join(str(n) for n in SUPPORTED_HASH_SIZES)}"
        )
    return math.isqrt(hash_size)


def grid_shapes(algorithm: HashAlgorithm, hash_size: int) -> list[tuple[int, int]]:
    """
    Return the ``(rows, cols)`` reduction grids an algorithm reads.

    Only DoubleGradient needs two grids; every other algorithm reads one.
    """
    side = hash_side(hash_size)
    if algorithm is HashAlgorithm.MEAN:
        return [(side, side)]
    if algorithm is HashAlgorithm.GRADIENT:
        return [(side, side + 1)]
    if algorithm is HashAlgorithm.VERT_GRADIENT:
        return [(side + 1, side)]
    if algorithm is HashAlgorithm.DOUBLE_GRADIENT:
        half = side // 2
        return [(half, side + 1), (side + 1, half)]
    if algorithm is HashAlgorithm.BLOCKHASH:
        return [(side * BLOCK_SAMPLES, side * BLOCK_SAMPLES)]
    raise ValueError(f"Unhandled hash algorithm {algorithm!r}")


def mean_bits(grid: np.ndarray) -> np.ndarray:
    """1 where a sample is strictly above the grid mean."""
    samples = grid.astype(np.int64)
    return samples * samples.size > samples.sum()


def horizontal_gradient_bits(grid: np.ndarray) -> np.ndarray:
    """1 where a sample is strictly darker than its right-hand neighbour."""
    samples = grid.astype(np.int64)
    return samples[:, :-1] < samples[:, 1:]


def vertical_gradient_bits(grid: np.ndarray) -> np.ndarray:
    """1 where a sample is strictly darker than the sample below it."""
    samples = grid.astype(np.int64)
    return samples[:-1, :] < samples[1:, :]


def block_bits(grid: np.ndarray, side: int) -> np.ndarray:
    """
    Split the grid into ``side x side`` blocks and compare each block's sum
    with the median of all block sums. Ties with the median yield 0.
    """
    rows, cols = grid.shape
    block_rows, block_cols = rows // side, cols // side
    samples = grid.astype(np.int64)[: side * block_rows, : side * block_cols]
    sums = samples.reshape(side, block_rows, side, block_cols).sum(axis=(1, 3))

    ordered = np.sort(sums, axis=None)
    count = ordered.size
    # Median doubled so an even-count median stays an integer.
    if count % 2:
        doubled_median = 2 * ordered[count // 2]
    else:
        doubled_median = ordered[count // 2 - 1] + ordered[count // 2]
    return 2 * sums > doubled_median


def extract_bits(algorithm: HashAlgorithm, grids: list[np.ndarray], hash_size: int) -> np.ndarray:
    """
    Apply an algorithm's bit rule to its reduced grids.

    Returns:
        Boolean array of shape ``(side, side)``, bits in row-major order
    """
    side = hash_side(hash_size)
    expected = grid_shapes(algorithm, hash_size)
    actual = [tuple(g.shape) for g in grids]
    if actual != expected:
        raise ValueError(f"{algorithm} expects grids {expected}, got {actual}")

    if algorithm is HashAlgorithm.MEAN:
        bits = mean_bits(grids[0])
    elif algorithm is HashAlgorithm.GRADIENT:
        bits = horizontal_gradient_bits(grids[0])
    elif algorithm is HashAlgorithm.VERT_GRADIENT:
        bits = vertical_gradient_bits(grids[0])
    elif algorithm is HashAlgorithm.DOUBLE_GRADIENT:
        bits = np.concatenate([
            horizontal_gradient_bits(grids[0]).ravel(),
            vertical_gradient_bits(grids[1]).ravel(),
        ])
    elif algorithm is HashAlgorithm.BLOCKHASH:
        bits = block_bits(grids[0], side)
    else:
        raise ValueError(f"Unhandled hash algorithm {algorithm!r}")

    return np.asarray(bits, dtype=bool).reshape(side, side)
