"""
Unit tests for SourceDecoder
"""
import pytest
from PIL import Image

from resize_backend.domain.exceptions import EncodingError, InvalidSourceError
from resize_backend.domain.value_objects import PipelineConfig
from resize_backend.infrastructure.raster.image_decoder import SourceDecoder
from resize_backend.tests.image_factories import encode, halves, quadrants


class TestSourceDecoder:
    def test_decodes_png(self, png_source):
        image = SourceDecoder().decode(png_source)
        assert image.format == "PNG"
        assert image.size == (200, 100)

    @pytest.mark.parametrize("fmt", ["JPEG", "WEBP"])
    def test_decodes_other_allowed_formats(self, fmt):
        image = SourceDecoder().decode(encode(quadrants(64), fmt))
        assert image.format == fmt
        assert image.size == (64, 64)

    def test_empty_upload(self):
        with pytest.raises(InvalidSourceError, match="Empty"):
            SourceDecoder().decode(b"")

    def test_upload_size_limit(self, png_source):
        decoder = SourceDecoder(PipelineConfig(max_upload_bytes=10))
        with pytest.raises(InvalidSourceError, match="too large") as excinfo:
            decoder.decode(png_source)
        assert excinfo.value.value == len(png_source)

    def test_garbage_bytes(self):
        with pytest.raises(InvalidSourceError, match="Invalid image file"):
            SourceDecoder().decode(b"definitely not an image")

    def test_disallowed_container(self):
        gif = encode(halves(20, 20).convert("P"), "GIF")
        with pytest.raises(InvalidSourceError, match="Invalid file format") as excinfo:
            SourceDecoder().decode(gif)
        assert excinfo.value.value == "GIF"

    def test_source_dimension_ceiling(self, png_source):
        decoder = SourceDecoder(PipelineConfig(max_source_dimension=150))
        with pytest.raises(InvalidSourceError, match="dimensions too large") as excinfo:
            decoder.decode(png_source)
        assert excinfo.value.value == "200x100"

    def test_truncated_payload(self):
        jpeg = encode(quadrants(256), "JPEG", quality=95)
        with pytest.raises(InvalidSourceError, match="validation failed"):
            SourceDecoder().decode(jpeg[: len(jpeg) // 2])

    def test_source_errors_are_encoding_errors(self):
        with pytest.raises(EncodingError) as excinfo:
            SourceDecoder().decode(b"")
        assert excinfo.value.operation == "decode"

    def test_transparency_survives_decoding(self, transparent_png):
        image = SourceDecoder().decode(transparent_png)
        assert image.mode == "RGBA"
        assert isinstance(image, Image.Image)
