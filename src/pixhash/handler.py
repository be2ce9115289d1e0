"""Serverless entry point: one JSON event in, one JSON-ready dict out."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .config import Settings
from .errors import PixhashError
from .logging import get_logger
from .service import HashRequest, handle_request
from .storage import Fetcher, build_fetcher

logger = get_logger(__name__)

# Built on first invocation and reused while the process stays warm.
_settings: Optional[Settings] = None
_fetcher: Optional[Fetcher] = None


def _runtime() -> tuple[Settings, Fetcher]:
    global _settings, _fetcher
    if _settings is None:
        _settings = Settings.from_env()
    if _fetcher is None:
        _fetcher = build_fetcher(_settings)
    return _settings, _fetcher


def lambda_handler(event: Any, context: Any = None) -> Dict[str, Any]:
    request_id = getattr(context, "aws_request_id", None) or "-"
    logger.info(f"[{request_id}] handling a request")

    try:
        settings, fetcher = _runtime()
        request = HashRequest.from_payload(
            event,
            default_algorithm=settings.default_algorithm,
            default_hash_size=settings.default_hash_size,
        )
        response = handle_request(request, fetcher)
    except PixhashError as exc:
        logger.error(f"[{request_id}] {exc.kind}: {exc}")
        return {"error": exc.to_dict()}

    return response.to_dict()
