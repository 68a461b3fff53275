"""TransformImage Command - runs one upload through the full transform pipeline.

Decode → resolve target → rotate/crop/composite → encode (or embed in a PDF).
Collaborators are injected so each stage can be replaced in tests.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from resize_backend.domain.exceptions import TransformException
from resize_backend.domain.services.resolution_resolver import ResolutionResolver
from resize_backend.domain.value_objects.encoded_artifact import EncodedArtifact
from resize_backend.domain.value_objects.output_format import OutputFormat
from resize_backend.domain.value_objects.pipeline_config import PipelineConfig
from resize_backend.domain.value_objects.target_geometry import TargetGeometry
from resize_backend.domain.value_objects.transform_request import TransformRequest
from resize_backend.infrastructure.pdf.document_embedder import DocumentEmbedder
from resize_backend.infrastructure.raster.image_decoder import SourceDecoder
from resize_backend.infrastructure.raster.raster_encoder import RasterEncoder
from resize_backend.infrastructure.raster.transform_pipeline import TransformPipeline

logger = logging.getLogger(__name__)

# Pillow format name -> container the same bytes would be served as.
_SOURCE_CONTAINERS = {
    "JPEG": OutputFormat.JPEG,
    "MPO": OutputFormat.JPEG,
    "PNG": OutputFormat.PNG,
    "WEBP": OutputFormat.WEBP,
}


@dataclass(frozen=True)
class TransformImageCommand:
    """Command carrying the raw upload and the request to apply to it."""

    source: bytes
    request: TransformRequest
    filename: Optional[str] = None


class TransformImageHandler:
    """Handles TransformImage commands."""

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        *,
        decoder: Optional[SourceDecoder] = None,
        resolver: Optional[ResolutionResolver] = None,
        pipeline: Optional[TransformPipeline] = None,
        encoder: Optional[RasterEncoder] = None,
        embedder: Optional[DocumentEmbedder] = None,
    ):
        self._config = config or PipelineConfig()
        self._decoder = decoder or SourceDecoder(self._config)
        self._resolver = resolver or ResolutionResolver(self._config)
        self._pipeline = pipeline or TransformPipeline(self._config)
        self._encoder = encoder or RasterEncoder(self._config)
        self._embedder = embedder or DocumentEmbedder(quality=self._config.document_quality)

    @property
    def config(self) -> PipelineConfig:
        return self._config

    def handle(self, command: TransformImageCommand) -> EncodedArtifact:
        request = command.request
        started = time.perf_counter()

        try:
            image = self._decoder.decode(command.source)
            target = self.resolve_target(request)
            processed = self._pipeline.apply(image, request, target)
            artifact = self._encode(processed, image, target, command)
        except TransformException as exc:
            logger.error(
                "Transform of %s failed during %s: %s",
                command.filename or "upload",
                exc.operation,
                exc,
                extra={"operation": exc.operation, "errorType": type(exc).__name__},
            )
            raise

        logger.info(
            "Transformed %s to %sx%s %s (%s bytes)",
            command.filename or "upload",
            target.width,
            target.height,
            artifact.output_format.value,
            artifact.size,
            extra={
                "mode": request.mode.value,
                "draft": request.draft,
                "quality": artifact.quality,
                "attempts": artifact.attempts,
                "elapsedMs": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return artifact

    def resolve_target(self, request: TransformRequest) -> TargetGeometry:
        target = self._resolver.resolve_target(request)
        if request.draft:
            target = target.fit_within(self._config.preview_max_dimension)
        return target

    def _encode(
        self,
        processed: Image.Image,
        source: Image.Image,
        target: TargetGeometry,
        command: TransformImageCommand,
    ) -> EncodedArtifact:
        request = command.request
        output_format = request.effective_format

        if request.draft:
            return self._encoder.encode(
                processed,
                output_format,
                self._config.preview_quality,
                density=target.density,
                background=request.background_color,
                draft=True,
            )

        if output_format.is_document:
            return self._embedder.embed(processed, target.width, target.height, request.background_color)

        return self._encoder.encode(
            processed,
            output_format,
            request.quality,
            max_size_kb=request.max_size_kb,
            density=target.density,
            background=request.background_color,
            passthrough=self._passthrough_candidate(source, target, command),
        )

    def _passthrough_candidate(
        self,
        source: Image.Image,
        target: TargetGeometry,
        command: TransformImageCommand,
    ) -> Optional[bytes]:
        """The original upload, when serving it as-is would be a correct result."""
        request = command.request
        if request.max_size_kb is None:
            return None
        if _SOURCE_CONTAINERS.get(source.format or "") is not request.output_format:
            return None
        if request.has_rotation or request.crop is not None or request.mode.flattens_alpha:
            return None
        if source.size != (target.width, target.height):
            return None
        return command.source
