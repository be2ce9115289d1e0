"""Perceptual image fingerprints for objects in remote storage."""

from .errors import (
    ConfigurationError,
    DecodeError,
    FetchError,
    FetchErrorReason,
    InvalidRequest,
    PixhashError,
    UnsupportedFormat,
)
from .hashing import HashAlgorithm, compute_hash, decode, encode, hamming_distance
from .image import RasterImage, decode_image
from .service import HashRequest, HashResponse, fingerprint_bytes, handle_request

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "FetchError",
    "FetchErrorReason",
    "HashAlgorithm",
    "HashRequest",
    "HashResponse",
    "InvalidRequest",
    "PixhashError",
    "RasterImage",
    "UnsupportedFormat",
    "compute_hash",
    "decode",
    "decode_image",
    "encode",
    "fingerprint_bytes",
    "hamming_distance",
    "handle_request",
]
