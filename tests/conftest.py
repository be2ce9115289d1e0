"""Test configuration for pytest."""

import logging
import os

import pytest

from helpers.image_factory import encode_image, noise_image, solid_image

os.environ.setdefault('PIXHASH_LOG_LEVEL', 'WARNING')


@pytest.fixture(autouse=True, scope="session")
def configure_test_logging():
    """Configure logging for tests to be minimal."""
    os.environ['PIXHASH_LOG_LEVEL'] = 'WARNING'
    logging.getLogger().setLevel(logging.WARNING)
    for logger_name in ['pixhash.cli', 'pixhash.handler']:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


@pytest.fixture
def png_bytes():
    """A 64x48 noisy PNG."""
    return encode_image(noise_image(64, 48), "PNG")


@pytest.fixture
def jpeg_bytes():
    """A 64x48 noisy JPEG."""
    return encode_image(noise_image(64, 48, seed=1), "JPEG", quality=90)


@pytest.fixture
def black_png():
    """An 8x8 solid black PNG."""
    return encode_image(solid_image(8, 8, (0, 0, 0)), "PNG")


@pytest.fixture
def image_root(tmp_path, png_bytes, jpeg_bytes, black_png):
    """A local storage root holding a few images."""
    (tmp_path / "photos").mkdir()
    (tmp_path / "photos" / "noise.png").write_bytes(png_bytes)
    (tmp_path / "photos" / "noise.jpg").write_bytes(jpeg_bytes)
    (tmp_path / "black.png").write_bytes(black_png)
    (tmp_path / "notes.txt").write_bytes(b"plain text, not an image")
    return tmp_path
