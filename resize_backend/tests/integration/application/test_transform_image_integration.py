"""
End-to-end transform jobs through the real handler, decoder, pipeline and encoders.
"""
import time

import fitz
import pytest
from PIL import Image

from resize_backend.application.commands.transform_image import (
    TransformImageCommand,
    TransformImageHandler,
)
from resize_backend.application.dto.transform_options import TransformOptions
from resize_backend.domain.exceptions import InvalidDimensionError
from resize_backend.domain.value_objects import CropRectangle, OutputFormat, TransformRequest
from resize_backend.tests.image_factories import (
    BLUE,
    RED,
    alpha_extrema,
    decode,
    encode,
    halves,
    mean_rgb,
    noise,
    quadrants,
)


@pytest.fixture(scope="module")
def handler():
    return TransformImageHandler()


def run(handler, source, **fields):
    return handler.handle(TransformImageCommand(source=source, request=TransformRequest(**fields)))


class TestDensity:
    def test_physical_units_embed_print_density(self, handler, png_source):
        artifact = run(handler, png_source, width=1, height=0.5, unit="in")
        result = decode(artifact.data)
        assert result.size == (300, 150)
        assert result.info["dpi"] == pytest.approx((300, 300))

    def test_pixel_units_embed_screen_density(self, handler, png_source):
        result = decode(run(handler, png_source, width=120, height=60).data)
        assert result.info["dpi"] == pytest.approx((96, 96))

    def test_fixed_density_is_exact(self, handler, png_source):
        artifact = run(
            handler, png_source, width=1, height=1, unit="in", resolution_policy="fixed", density=150, output_format="png"
        )
        result = decode(artifact.data)
        assert result.size == (150, 150)
        assert result.info["dpi"] == pytest.approx((150, 150), rel=1e-3)

    def test_zero_fixed_density_fails_as_transform_error(self, handler, png_source):
        request = TransformOptions.parse(
            {"width": 10, "height": 10, "resolutionMode": "fixed", "dpi": 0}
        ).to_request()
        with pytest.raises(InvalidDimensionError) as excinfo:
            handler.handle(TransformImageCommand(source=png_source, request=request))
        assert excinfo.value.field == "dpi"

    def test_webp_carries_density_in_exif(self, handler, png_source):
        artifact = run(handler, png_source, width=2, height=1, unit="cm", output_format="webp")
        exif = decode(artifact.data).getexif()
        assert exif[0x011A] == 300
        assert exif[0x011B] == 300


class TestGeometry:
    def test_rotate_then_crop_selects_prerotation_bottom_left(self, handler):
        source = encode(quadrants(200))
        artifact = run(
            handler,
            source,
            width=50,
            height=50,
            output_format="png",
            rotation=90,
            crop=CropRectangle(0, 0, 50, 50, unit="%"),
        )
        assert mean_rgb(decode(artifact.data)) == pytest.approx(BLUE, abs=1)

    def test_percentage_crop_selects_top_left_color(self, handler, png_source):
        artifact = run(
            handler, png_source, width=40, height=40, output_format="png", crop=CropRectangle(0, 0, 50, 50, unit="%")
        )
        assert mean_rgb(decode(artifact.data)) == pytest.approx(RED, abs=1)

    @pytest.mark.parametrize("mode", ["stretch", "contain", "cover", "color", "blur"])
    def test_output_is_exact_target_size(self, handler, png_source, mode):
        artifact = run(handler, png_source, width=123, height=77, mode=mode, output_format="png")
        assert decode(artifact.data).size == (123, 77)

    def test_color_pad_of_transparent_source_is_opaque(self, handler, transparent_png):
        artifact = run(handler, transparent_png, width=100, height=100, mode="color", output_format="png")
        assert alpha_extrema(decode(artifact.data)) == (255, 255)

    def test_contain_keeps_transparency_in_png(self, handler, transparent_png):
        artifact = run(handler, transparent_png, width=100, height=100, mode="contain", output_format="png")
        assert alpha_extrema(decode(artifact.data))[0] == 0


class TestSizeConvergence:
    def test_compressible_source_fits(self, handler):
        source = encode(halves(800, 600, RED, BLUE))
        artifact = run(handler, source, width=800, height=600, max_size_kb=20)
        assert artifact.size <= 20 * 1024
        assert artifact.attempts <= 15

    def test_incompressible_source_terminates_within_cap(self, handler):
        source = encode(noise(600, 600))
        artifact = run(handler, source, width=600, height=600, max_size_kb=5)
        assert artifact.attempts <= 15
        assert artifact.quality == 1 or artifact.size <= 5 * 1024
        assert artifact.output_format is OutputFormat.JPEG


class TestDraft:
    def test_draft_png_request_yields_faster_jpeg(self, handler):
        source = encode(noise(800, 600))
        options = {"width": 2400, "height": 1800, "format": "png", "mode": "blur"}

        started = time.perf_counter()
        full = handler.handle(
            TransformImageCommand(source=source, request=TransformOptions.parse(options).to_request())
        )
        full_elapsed = time.perf_counter() - started

        started = time.perf_counter()
        draft = handler.handle(
            TransformImageCommand(
                source=source, request=TransformOptions.parse({**options, "isPreview": True}).to_request()
            )
        )
        draft_elapsed = time.perf_counter() - started

        assert full.output_format is OutputFormat.PNG
        assert draft.output_format is OutputFormat.JPEG
        assert draft.data[:2] == b"\xff\xd8"
        assert decode(draft.data).size == (1200, 900)
        assert draft_elapsed < full_elapsed


class TestDocumentOutput:
    def test_pdf_has_one_page_of_target_size(self, handler, png_source):
        artifact = run(handler, png_source, width=2, height=1, unit="in", output_format="pdf", mode="contain")

        assert artifact.mime_type == "application/pdf"
        assert artifact.data.startswith(b"%PDF-")
        with fitz.open(stream=artifact.data, filetype="pdf") as document:
            assert document.page_count == 1
            rect = document[0].rect
            assert (rect.width, rect.height) == (600, 300)

    def test_pdf_from_webp_source(self, handler):
        source = encode(Image.new("RGB", (64, 32), RED), "WEBP")
        artifact = run(handler, source, width=64, height=32, output_format="pdf")
        assert artifact.data.startswith(b"%PDF-")
