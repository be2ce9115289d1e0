from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from .config import Settings
from .errors import ConfigurationError, FetchError, PixhashError
from .hashing.algorithms import SUPPORTED_HASH_SIZES, HashAlgorithm
from .hashing.codec import hamming_distance
from .logging import get_logger
from .service import HashRequest, handle_request
from .storage import build_fetcher

logger = get_logger(__name__)

app = typer.Typer(help="pixhash – perceptual image fingerprints", no_args_is_help=True)


@app.command("hash")
def hash_image(
    path: str = typer.Argument(..., help="Object key or path of the image to hash"),
    algorithm: Optional[str] = typer.Option(None, "--algorithm", "-a", help="Hash algorithm (default: Gradient)"),
    hash_size: Optional[int] = typer.Option(None, "--hash-size", "-s", help="Hash length in bits"),
    root: Optional[Path] = typer.Option(None, "--root", help="Local directory to read images from"),
    bucket: Optional[str] = typer.Option(None, "--bucket", help="S3 bucket to read images from"),
) -> None:
    """
    Compute the perceptual hash of an image and print the response as JSON.

    Images are read from --bucket when given, otherwise from --root (or the
    PIXHASH_* environment settings).
    """
    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        logger.error(str(exc))
        raise typer.Exit(code=1) from exc
    if bucket:
        settings.bucket_name = bucket
    elif root is not None:
        settings.bucket_name = None
        settings.storage_root = root

    payload = {"path": path, "algorithm": algorithm, "hash_size": hash_size}
    try:
        request = HashRequest.from_payload(
            {key: value for key, value in payload.items() if value is not None},
            default_algorithm=settings.default_algorithm,
            default_hash_size=settings.default_hash_size,
        )
        response = handle_request(request, build_fetcher(settings))
    except FetchError as exc:
        logger.error(f"Failed to fetch {path}: {exc}")
        raise typer.Exit(code=2) from exc
    except PixhashError as exc:
        logger.error(f"{exc.kind}: {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(json.dumps(response.to_dict()))


@app.command()
def distance(
    first: str = typer.Argument(..., help="First base64-encoded hash"),
    second: str = typer.Argument(..., help="Second base64-encoded hash"),
) -> None:
    """Print the Hamming distance between two encoded hashes."""
    try:
        typer.echo(str(hamming_distance(first, second)))
    except ValueError as exc:
        logger.error(str(exc))
        raise typer.Exit(code=1) from exc


@app.command()
def algorithms() -> None:
    """List the supported algorithms and hash sizes."""
    for algorithm in HashAlgorithm:
        typer.echo(algorithm.value)
    typer.echo(f"hash sizes: {', '.join(str(n) for n in SUPPORTED_HASH_SIZES)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
