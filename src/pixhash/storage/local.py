from __future__ import annotations

from pathlib import Path

from ..errors import FetchError, FetchErrorReason
from ..logging import get_logger

logger = get_logger(__name__)


class LocalFetcher:
    """Serves image bytes from a directory, treating paths as keys under it."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        target = (self.root / path.lstrip("/")).resolve()
        if not target.is_relative_to(self.root):
            raise FetchError(FetchErrorReason.ACCESS_DENIED, path, f"Path escapes storage root: {path}")
        return target

    def fetch(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            data = target.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise FetchError(FetchErrorReason.NOT_FOUND, path) from exc
        except PermissionError as exc:
            raise FetchError(FetchErrorReason.ACCESS_DENIED, path) from exc
        except OSError as exc:
            raise FetchError(FetchErrorReason.NETWORK, path, f"Failed to read {path}: {exc}") from exc

        logger.debug(f"Read {target} ({len(data)} bytes)")
        return data
