"""Validation and decoding of uploaded source images."""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

from resize_backend.constants import ALLOWED_SOURCE_FORMATS
from resize_backend.domain.exceptions import InvalidSourceError
from resize_backend.domain.value_objects.pipeline_config import PipelineConfig

logger = logging.getLogger(__name__)


class SourceDecoder:
    """Decodes upload bytes into a fully loaded Pillow image.

    Everything that can be wrong with the upload itself is reported here as
    :class:`InvalidSourceError`, before any transform work starts.
    """

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self._config = config or PipelineConfig()

    def decode(self, data: bytes) -> Image.Image:
        if not data:
            raise InvalidSourceError("Empty image file")

        limit = self._config.max_upload_bytes
        if len(data) > limit:
            raise InvalidSourceError(
                f"File too large. Maximum size is {limit / (1024 * 1024):g}MB",
                value=len(data),
            )

        try:
            image = Image.open(BytesIO(data))
        except UnidentifiedImageError as exc:
            raise InvalidSourceError(
                "Invalid image file. Please upload a valid JPG, PNG, or WEBP image.", cause=exc
            ) from exc
        except Image.DecompressionBombError as exc:
            raise InvalidSourceError(f"Image validation failed: {exc}", cause=exc) from exc

        if image.format not in ALLOWED_SOURCE_FORMATS:
            raise InvalidSourceError(
                "Invalid file format. Supported: JPG, PNG, WEBP", value=image.format
            )

        width, height = image.size
        ceiling = self._config.max_source_dimension
        if width > ceiling or height > ceiling:
            raise InvalidSourceError(
                f"Image dimensions too large (max: {ceiling}x{ceiling})",
                value=f"{width}x{height}",
            )

        try:
            image.load()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            raise InvalidSourceError(f"Image validation failed: {exc}", cause=exc) from exc

        logger.debug("Decoded %s source %sx%s mode=%s", image.format, width, height, image.mode)
        return image
