from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigurationError
from .hashing.algorithms import DEFAULT_ALGORITHM, DEFAULT_HASH_SIZE, HashAlgorithm, hash_side


@dataclass
class Settings:
    default_algorithm: HashAlgorithm = DEFAULT_ALGORITHM
    default_hash_size: int = DEFAULT_HASH_SIZE
    bucket_name: Optional[str] = None
    storage_root: Path = Path(".")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """Build settings from ``PIXHASH_*`` environment variables.

        ``BUCKET_NAME`` is honoured as a fallback for deployments that already
        export it.

        Raises:
            ConfigurationError: If the default algorithm or hash size is not supported
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        token = env.get("PIXHASH_DEFAULT_ALGORITHM")
        try:
            default_algorithm = HashAlgorithm.parse(token) if token else defaults.default_algorithm
        except ValueError as exc:
            raise ConfigurationError(f"PIXHASH_DEFAULT_ALGORITHM: {exc}") from exc

        hash_size = env.get("PIXHASH_HASH_SIZE")
        try:
            default_hash_size = int(hash_size) if hash_size else defaults.default_hash_size
            hash_side(default_hash_size)
        except ValueError as exc:
            raise ConfigurationError(f"PIXHASH_HASH_SIZE must be a supported hash size, got {hash_size!r}: {exc}") from exc

        return cls(
            default_algorithm=default_algorithm,
            default_hash_size=default_hash_size,
            bucket_name=env.get("PIXHASH_BUCKET_NAME") or env.get("BUCKET_NAME") or None,
            storage_root=Path(env.get("PIXHASH_STORAGE_ROOT") or defaults.storage_root),
        )
