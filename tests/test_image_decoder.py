"""Tests for content-sniffing image decoding."""

import logging

import numpy as np
import pytest
from PIL import Image

from pixhash.errors import DecodeError, UnsupportedFormat
from pixhash.image.decoder import RasterImage, decode_image, sniff_format
from helpers.image_factory import encode_image, noise_image, solid_image


class TestSniffFormat:
    def test_png_signature(self, png_bytes):
        assert sniff_format(png_bytes) == "PNG"

    def test_jpeg_signature(self, jpeg_bytes):
        assert sniff_format(jpeg_bytes) == "JPEG"

    @pytest.mark.parametrize("data", [
        b"",
        b"GIF89a\x01\x00\x01\x00",
        b"BM\x00\x00\x00\x00",
        b"\x89PNG",  # signature prefix only
        b"plain text",
    ])
    def test_unknown_signatures(self, data):
        assert sniff_format(data) is None


class TestDecodeImage:
    def test_decode_png_dimensions(self, png_bytes):
        raster = decode_image(png_bytes)

        assert isinstance(raster, RasterImage)
        assert raster.format == "PNG"
        assert raster.size == (64, 48)
        assert raster.mode == "RGBA"
        assert raster.pixels.shape == (48, 64, 4)
        assert raster.pixels.dtype == np.uint8

    def test_decode_jpeg_dimensions(self, jpeg_bytes):
        raster = decode_image(jpeg_bytes)

        assert raster.format == "JPEG"
        assert (raster.width, raster.height) == (64, 48)

    def test_pixels_are_read_only(self, png_bytes):
        raster = decode_image(png_bytes)

        with pytest.raises(ValueError):
            raster.pixels[0, 0, 0] = 1

    def test_raster_is_frozen(self, png_bytes):
        raster = decode_image(png_bytes)

        with pytest.raises(AttributeError):
            raster.width = 10  # type: ignore

    def test_rgb_values_preserved(self):
        data = encode_image(solid_image(4, 3, (10, 20, 30)), "PNG")
        raster = decode_image(data)

        assert raster.pixels[..., 0].tolist() == [[10] * 4] * 3
        assert raster.pixels[..., 3].tolist() == [[255] * 4] * 3

    @pytest.mark.parametrize("mode,color,expected_mode", [
        ("L", 128, "L"),
        ("1", 1, "L"),
        ("I;16", 300, "L"),
        ("P", 3, "RGBA"),
        ("LA", (100, 50), "RGBA"),
        ("RGBA", (1, 2, 3, 4), "RGBA"),
    ])
    def test_png_modes_normalised(self, mode, color, expected_mode):
        data = encode_image(Image.new(mode, (5, 7), color=color), "PNG")
        raster = decode_image(data)

        assert raster.mode == expected_mode
        assert raster.size == (5, 7)

    def test_cmyk_jpeg_normalised_to_rgba(self):
        data = encode_image(Image.new("CMYK", (16, 16), (0, 0, 0, 0)), "JPEG")
        raster = decode_image(data)

        assert raster.mode == "RGBA"
        assert raster.pixels.shape == (16, 16, 4)

    def test_claimed_format_mismatch_warns(self, png_bytes, caplog):
        with caplog.at_level(logging.WARNING, logger="pixhash.image.decoder"):
            raster = decode_image(png_bytes, claimed_format="jpeg")

        assert raster.format == "PNG"
        assert "does not match content" in caplog.text

    def test_claimed_format_match_is_silent(self, jpeg_bytes, caplog):
        with caplog.at_level(logging.WARNING, logger="pixhash.image.decoder"):
            decode_image(jpeg_bytes, claimed_format="jpg")

        assert "does not match content" not in caplog.text


class TestErrorClassification:
    def test_unknown_bytes_are_unsupported(self):
        with pytest.raises(UnsupportedFormat):
            decode_image(b"definitely not an image")

    def test_empty_buffer_is_unsupported(self):
        with pytest.raises(UnsupportedFormat):
            decode_image(b"")

    def test_gif_is_unsupported(self):
        data = encode_image(solid_image(4, 4, (255, 0, 0)), "GIF")

        with pytest.raises(UnsupportedFormat):
            decode_image(data)

    def test_png_signature_with_garbage_is_decode_error(self):
        data = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

        with pytest.raises(DecodeError):
            decode_image(data)

    def test_jpeg_signature_with_garbage_is_decode_error(self):
        data = b"\xff\xd8\xff" + b"\x00" * 32

        with pytest.raises(DecodeError):
            decode_image(data)

    @pytest.mark.parametrize("format", ["PNG", "JPEG"])
    def test_truncated_payload_is_decode_error(self, format):
        data = encode_image(noise_image(128, 128, seed=3), format)
        truncated = data[: len(data) // 2]

        with pytest.raises(DecodeError) as exc_info:
            decode_image(truncated)
        assert not isinstance(exc_info.value, UnsupportedFormat)
