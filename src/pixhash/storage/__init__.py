"""Storage collaborators that fetch raw image bytes by path."""

from typing import Protocol

from ..config import Settings
from .local import LocalFetcher
from .s3 import S3Fetcher


class Fetcher(Protocol):
    def fetch(self, path: str) -> bytes:
        """Return the object's bytes or raise FetchError."""
        ...


def build_fetcher(settings: Settings) -> Fetcher:
    """S3 when a bucket is configured, otherwise the local storage root."""
    if settings.bucket_name:
        return S3Fetcher(settings.bucket_name)
    return LocalFetcher(settings.storage_root)


__all__ = ["Fetcher", "LocalFetcher", "S3Fetcher", "build_fetcher"]
