"""
Unit tests for TransformImage command handler
"""
import logging
from unittest.mock import Mock

import pytest
from PIL import Image

from resize_backend.application.commands.transform_image import (
    TransformImageCommand,
    TransformImageHandler,
)
from resize_backend.domain.exceptions import InvalidSourceError
from resize_backend.domain.value_objects import (
    CropRectangle,
    EncodedArtifact,
    OutputFormat,
    TargetGeometry,
    TransformRequest,
)
from resize_backend.tests.image_factories import decode, encode, halves

HANDLER_LOGGER = "resize_backend.application.commands.transform_image"


@pytest.fixture
def collaborators():
    source = Image.new("RGB", (40, 20))
    source.format = "PNG"
    processed = Image.new("RGB", (30, 30))

    decoder = Mock()
    decoder.decode.return_value = source
    resolver = Mock()
    resolver.resolve_target.return_value = TargetGeometry(30, 30, 96)
    pipeline = Mock()
    pipeline.apply.return_value = processed
    encoder = Mock()
    encoder.encode.return_value = EncodedArtifact(data=b"jpeg", output_format=OutputFormat.JPEG, quality=90)
    embedder = Mock()
    embedder.embed.return_value = EncodedArtifact(data=b"%PDF-", output_format=OutputFormat.PDF, quality=90)

    return {
        "decoder": decoder,
        "resolver": resolver,
        "pipeline": pipeline,
        "encoder": encoder,
        "embedder": embedder,
        "source": source,
        "processed": processed,
    }


def make_handler(collaborators):
    return TransformImageHandler(
        decoder=collaborators["decoder"],
        resolver=collaborators["resolver"],
        pipeline=collaborators["pipeline"],
        encoder=collaborators["encoder"],
        embedder=collaborators["embedder"],
    )


class TestTransformImageHandler:
    """Test TransformImageHandler orchestration with doubled stages."""

    def test_handle_runs_stages_in_order(self, collaborators):
        handler = make_handler(collaborators)
        request = TransformRequest(width=30, height=30, max_size_kb=50)

        result = handler.handle(TransformImageCommand(source=b"raw", request=request))

        assert result.data == b"jpeg"
        collaborators["decoder"].decode.assert_called_once_with(b"raw")
        collaborators["resolver"].resolve_target.assert_called_once_with(request)
        collaborators["pipeline"].apply.assert_called_once_with(
            collaborators["source"], request, TargetGeometry(30, 30, 96)
        )
        args, kwargs = collaborators["encoder"].encode.call_args
        assert args == (collaborators["processed"], OutputFormat.JPEG, 90)
        assert kwargs["max_size_kb"] == 50
        assert kwargs["density"] == 96
        collaborators["embedder"].embed.assert_not_called()

    def test_document_output_uses_embedder(self, collaborators):
        handler = make_handler(collaborators)
        request = TransformRequest(width=30, height=30, output_format="pdf", background_color="#000000")

        result = handler.handle(TransformImageCommand(source=b"raw", request=request))

        assert result.output_format is OutputFormat.PDF
        collaborators["embedder"].embed.assert_called_once_with(collaborators["processed"], 30, 30, "#000000")
        collaborators["encoder"].encode.assert_not_called()

    def test_draft_caps_geometry_and_forces_cheap_jpeg(self, collaborators):
        collaborators["resolver"].resolve_target.return_value = TargetGeometry(2400, 1200, 300)
        handler = make_handler(collaborators)
        request = TransformRequest(width=8, height=4, unit="in", output_format="pdf", draft=True, max_size_kb=10)

        handler.handle(TransformImageCommand(source=b"raw", request=request))

        target = collaborators["pipeline"].apply.call_args.args[2]
        assert target == TargetGeometry(1200, 600, 300)
        args, kwargs = collaborators["encoder"].encode.call_args
        assert args[1:] == (OutputFormat.JPEG, 60)
        assert kwargs["draft"] is True
        assert "max_size_kb" not in kwargs
        collaborators["embedder"].embed.assert_not_called()

    def test_failure_is_logged_and_reraised(self, collaborators, caplog):
        collaborators["decoder"].decode.side_effect = InvalidSourceError("Empty image file")
        handler = make_handler(collaborators)
        command = TransformImageCommand(source=b"", request=TransformRequest(width=1, height=1), filename="a.png")

        with caplog.at_level(logging.ERROR, logger=HANDLER_LOGGER):
            with pytest.raises(InvalidSourceError):
                handler.handle(command)

        record = caplog.records[-1]
        assert record.errorType == "InvalidSourceError"
        assert record.operation == "decode"
        assert "a.png" in record.getMessage()
        collaborators["pipeline"].apply.assert_not_called()

    def test_success_is_logged(self, collaborators, caplog):
        handler = make_handler(collaborators)
        with caplog.at_level(logging.INFO, logger=HANDLER_LOGGER):
            handler.handle(TransformImageCommand(source=b"raw", request=TransformRequest(width=30, height=30)))

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.attempts == 1
        assert record.mode == "stretch"


class TestPassthrough:
    """The original upload is reused only when it is already a valid answer."""

    @pytest.fixture
    def handler(self):
        return TransformImageHandler()

    def test_matching_upload_is_returned_untouched(self, handler, png_source):
        request = TransformRequest(width=200, height=100, output_format="png", max_size_kb=100)
        result = handler.handle(TransformImageCommand(source=png_source, request=request))
        assert result.data == png_source
        assert result.attempts == 0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"rotation": 180},
            {"crop": CropRectangle(0, 0, 200, 100, unit="px")},
            {"output_format": "jpeg"},
            {"width": 100},
            {"mode": "color"},
        ],
    )
    def test_any_change_disables_passthrough(self, handler, png_source, overrides):
        fields = {"width": 200, "height": 100, "output_format": "png", "max_size_kb": 100}
        fields.update(overrides)
        result = handler.handle(TransformImageCommand(source=png_source, request=TransformRequest(**fields)))
        assert result.data != png_source
        assert result.attempts >= 1

    def test_without_ceiling_source_is_reencoded(self, handler):
        source = encode(halves(50, 50), "JPEG", quality=95)
        request = TransformRequest(width=50, height=50)
        result = handler.handle(TransformImageCommand(source=source, request=request))
        assert result.data != source
        assert decode(result.data).size == (50, 50)
