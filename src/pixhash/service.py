"""Request validation and the fetch, decode and hash pipeline."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import InvalidRequest
from .hashing.algorithms import DEFAULT_ALGORITHM, DEFAULT_HASH_SIZE, HashAlgorithm, hash_side
from .hashing.codec import encode
from .hashing.engine import compute_hash
from .image.decoder import decode_image
from .logging import get_logger
from .storage import Fetcher

logger = get_logger(__name__)


@dataclass(frozen=True)
class HashRequest:
    path: str
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM
    hash_size: int = DEFAULT_HASH_SIZE

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        default_algorithm: HashAlgorithm = DEFAULT_ALGORITHM,
        default_hash_size: int = DEFAULT_HASH_SIZE,
    ) -> HashRequest:
        """
        Validate an incoming request payload.

        ``algorithm`` may also be supplied as ``algo``; both may be given only
        if they agree. Missing optional fields take the given defaults.

        Raises:
            InvalidRequest: If any field is missing or invalid
        """
        if not isinstance(payload, Mapping):
            raise InvalidRequest(f"Request must be a JSON object, got {type(payload).__name__}")

        path = payload.get("path")
        if not isinstance(path, str) or not path:
            raise InvalidRequest("Request field 'path' must be a non-empty string")

        token, alias = payload.get("algorithm"), payload.get("algo")
        if token is not None and alias is not None and token != alias:
            raise InvalidRequest(
                f"Request fields 'algorithm' ({token!r}) and 'algo' ({alias!r}) disagree"
            )
        if token is None:
            token = alias
        if token is None:
            algorithm = default_algorithm
        elif isinstance(token, str):
            try:
                algorithm = HashAlgorithm.parse(token)
            except ValueError as exc:
                raise InvalidRequest(str(exc)) from exc
        else:
            raise InvalidRequest(f"Request field 'algorithm' must be a string, got {token!r}")

        hash_size = payload.get("hash_size")
        if hash_size is None:
            hash_size = default_hash_size
        try:
            hash_side(hash_size)
        except ValueError as exc:
            raise InvalidRequest(str(exc)) from exc

        return cls(path=path, algorithm=algorithm, hash_size=hash_size)


@dataclass(frozen=True)
class HashResponse:
    hash_base64: str
    algorithm: HashAlgorithm
    image_size: Tuple[int, int]
    time_elapsed: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash_base64": self.hash_base64,
            "algorithm": self.algorithm.value,
            "image_size": list(self.image_size),
            "time_elapsed": self.time_elapsed,
        }


def fingerprint_bytes(
    data: bytes,
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM,
    hash_size: int = DEFAULT_HASH_SIZE,
    started: Optional[float] = None,
) -> HashResponse:
    """
    Decode ``data`` and hash it.

    Args:
        data: Encoded image bytes
        algorithm: Hash algorithm
        hash_size: Hash length in bits
        started: ``time.perf_counter()`` reading to measure from; defaults
            to entry into this function

    Raises:
        UnsupportedFormat, DecodeError: From the decoder
    """
    if started is None:
        started = time.perf_counter()

    raster = decode_image(data)
    hash_value = compute_hash(raster, algorithm, hash_size)
    elapsed = time.perf_counter() - started

    return HashResponse(
        hash_base64=encode(hash_value),
        algorithm=algorithm,
        image_size=raster.size,
        time_elapsed=max(0.0, elapsed),
    )


def handle_request(request: HashRequest, fetcher: Fetcher) -> HashResponse:
    """Fetch the requested image once and fingerprint it. Errors propagate unchanged."""
    logger.info(f"Hashing {request.path} with {request.algorithm} ({request.hash_size} bits)")
    started = time.perf_counter()
    data = fetcher.fetch(request.path)
    response = fingerprint_bytes(data, request.algorithm, request.hash_size, started=started)
    logger.info(
        f"Hashed {request.path}: {response.image_size[0]}x{response.image_size[1]} "
        f"in {response.time_elapsed:.4f}s"
    )
    return response
