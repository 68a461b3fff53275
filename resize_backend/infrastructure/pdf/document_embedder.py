"""Single-page PDF output for the infrastructure layer."""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional

import fitz  # type: ignore
from PIL import Image

from resize_backend.constants import DEFAULT_BACKGROUND, DOCUMENT_EMBED_QUALITY
from resize_backend.domain.exceptions import EncodingError
from resize_backend.domain.value_objects.encoded_artifact import EncodedArtifact
from resize_backend.domain.value_objects.output_format import OutputFormat
from resize_backend.infrastructure.raster.colors import flatten

logger = logging.getLogger(__name__)


class DocumentEmbedder:
    """Wraps a rendered raster as the only content of a one-page PDF."""

    def __init__(self, *, quality: int = DOCUMENT_EMBED_QUALITY) -> None:
        self._quality = quality

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def embed(
        self,
        image: Image.Image,
        width_px: int,
        height_px: int,
        background: Optional[str] = None,
    ) -> EncodedArtifact:
        """Return a PDF whose single page is ``width_px`` x ``height_px`` points.

        The raster is re-encoded as an opaque JPEG at the embedder's fixed
        quality and placed at the origin, filling the page.
        """

        if width_px < 1 or height_px < 1:
            raise EncodingError(
                "Document page must be at least 1x1", operation="embed", value=f"{width_px}x{height_px}"
            )

        jpeg = self._to_jpeg(image, background or DEFAULT_BACKGROUND)

        try:
            with fitz.open() as document:
                page = document.new_page(width=width_px, height=height_px)
                page.insert_image(fitz.Rect(0, 0, width_px, height_px), stream=jpeg)
                data = document.tobytes(garbage=3, deflate=True)
        except Exception as exc:  # noqa: BLE001 - PyMuPDF raises engine-specific types
            raise EncodingError(f"PDF generation failed: {exc}", operation="embed", cause=exc) from exc

        logger.debug("Embedded %s-byte JPEG into %sx%s page (%s bytes)", len(jpeg), width_px, height_px, len(data))
        return EncodedArtifact(data=data, output_format=OutputFormat.PDF, quality=self._quality)

    def _to_jpeg(self, image: Image.Image, background: str) -> bytes:
        buffer = BytesIO()
        try:
            flatten(image, background).save(buffer, format="JPEG", quality=self._quality)
        except (OSError, ValueError) as exc:
            raise EncodingError(f"Failed to encode page raster: {exc}", operation="embed", cause=exc) from exc
        return buffer.getvalue()
