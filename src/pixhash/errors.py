"""Error taxonomy shared by every stage of the fingerprint pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict


class PixhashError(Exception):
    """Base class for errors that terminate a fingerprint request."""

    kind = "PixhashError"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": str(self)}


class InvalidRequest(PixhashError):
    """Raised when a request payload is missing fields or carries bad values."""

    kind = "InvalidRequest"


class FetchErrorReason(str, Enum):
    NOT_FOUND = "NotFound"
    ACCESS_DENIED = "AccessDenied"
    NETWORK = "Network"


class FetchError(PixhashError):
    """Raised by a storage fetcher when the image bytes cannot be retrieved."""

    kind = "FetchError"

    def __init__(self, reason: FetchErrorReason, path: str, message: str = "") -> None:
        self.reason = reason
        self.path = path
        super().__init__(message or f"{reason.value}: {path}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason.value
        return data


class UnsupportedFormat(PixhashError):
    """Raised when the bytes match none of the supported image signatures."""

    kind = "UnsupportedFormat"


class DecodeError(PixhashError):
    """Raised when the bytes carry a supported signature but cannot be decoded."""

    kind = "DecodeError"


class ConfigurationError(PixhashError, ValueError):
    """Raised when environment settings name an unknown algorithm or hash size."""

    kind = "ConfigurationError"
