"""Base64 transport encoding and Hamming comparison of perceptual hashes."""

from __future__ import annotations

import base64
import binascii
import math
from typing import Union

import imagehash
import numpy as np

HashLike = Union[str, imagehash.ImageHash]


def encode(hash_value: imagehash.ImageHash) -> str:
    """Pack bits MSB-first into bytes and return padded standard base64."""
    bits = np.asarray(hash_value.hash, dtype=bool).ravel()
    if bits.size % 8:
        raise ValueError(f"Hash length {bits.size} is not a whole number of bytes")
    return base64.b64encode(np.packbits(bits).tobytes()).decode("ascii")


def decode(text: str) -> imagehash.ImageHash:
    """
    Inverse of :func:`encode`.

    Square bit lengths come back as a square matrix, others as a flat array.

    Raises:
        ValueError: If ``text`` is not padded base64 or is empty
    """
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid base64 hash {text!r}: {exc}") from exc
    if not raw:
        raise ValueError("Encoded hash is empty")

    bits = np.unpackbits(np.frombuffer(raw, dtype=np.uint8)).astype(bool)
    side = math.isqrt(bits.size)
    if side * side == bits.size:
        bits = bits.reshape(side, side)
    return imagehash.ImageHash(bits)


def _as_hash(value: HashLike) -> imagehash.ImageHash:
    return decode(value) if isinstance(value, str) else value


def hamming_distance(a: HashLike, b: HashLike) -> int:
    """
    Count differing bits between two hashes of equal length.

    Args:
        a: Encoded hash string or ImageHash
        b: Encoded hash string or ImageHash

    Raises:
        ValueError: If the hashes have different lengths
    """
    hash_a, hash_b = _as_hash(a), _as_hash(b)
    size_a, size_b = hash_a.hash.size, hash_b.hash.size
    if size_a != size_b:
        raise ValueError(f"Cannot compare hashes of {size_a} and {size_b} bits")
    return int(hash_a - hash_b)
