"""Perceptual hash algorithms, engine and transport codec."""

from .algorithms import (
    DEFAULT_ALGORITHM,
    DEFAULT_HASH_SIZE,
    SUPPORTED_HASH_SIZES,
    HashAlgorithm,
    extract_bits,
    grid_shapes,
    hash_side,
)
from .codec import decode, encode, hamming_distance
from .engine import compute_hash

__all__ = [
    "DEFAULT_ALGORITHM",
    "DEFAULT_HASH_SIZE",
    "SUPPORTED_HASH_SIZES",
    "HashAlgorithm",
    "compute_hash",
    "decode",
    "encode",
    "extract_bits",
    "grid_shapes",
    "hamming_distance",
    "hash_side",
]
