"""Raster encoding with an optional byte-size ceiling."""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Dict, Optional

from PIL import Image

from resize_backend.constants import DEFAULT_BACKGROUND
from resize_backend.domain.exceptions import EncodingError
from resize_backend.domain.services.quality_strategy import ProportionalStepStrategy, QualityStrategy
from resize_backend.domain.value_objects.encoded_artifact import EncodedArtifact
from resize_backend.domain.value_objects.output_format import OutputFormat
from resize_backend.domain.value_objects.pipeline_config import PipelineConfig
from resize_backend.utils.numbers import round_half_up

from .colors import flatten, to_working_mode

logger = logging.getLogger(__name__)


class RasterEncoder:
    """Encodes processed pixels to JPEG, PNG or WebP.

    Without a size ceiling this is a single pass at the requested quality.
    With one, quality is stepped down (see :class:`QualityStrategy`) until the
    output fits, the floor is reached, or the attempt budget runs out; the
    smallest candidate wins when nothing fits. Missing the ceiling is never
    an error.
    """

    def __init__(self, config: Optional[PipelineConfig] = None, strategy: Optional[QualityStrategy] = None) -> None:
        self._config = config or PipelineConfig()
        self._strategy = strategy or ProportionalStepStrategy.from_config(self._config)

    def encode(
        self,
        image: Image.Image,
        output_format: OutputFormat,
        quality: int,
        *,
        max_size_kb: Optional[float] = None,
        density: Optional[int] = None,
        background: str = DEFAULT_BACKGROUND,
        draft: bool = False,
        passthrough: Optional[bytes] = None,
    ) -> EncodedArtifact:
        """Encode ``image``.

        Args:
            image: Processed pixels
            output_format: Raster container; documents go through DocumentEmbedder
            quality: Requested quality, clamped to [1, 100]
            max_size_kb: Optional byte ceiling in kilobytes (1 KB = 1024 bytes)
            density: Pixels per inch written to metadata (``dpi`` for
                JPEG/PNG, EXIF X/YResolution for WebP)
            background: Color alpha is flattened onto for JPEG
            draft: Use the cheapest encoder settings and skip the size search
            passthrough: Already-encoded bytes in ``output_format`` that are a
                valid result as-is; returned untouched if they fit the ceiling
        """
        if output_format.is_document:
            raise EncodingError(
                "Document output must be produced by the document embedder",
                operation="encode",
                value=output_format.value,
            )

        prepared = self.prepare(image, output_format, background)
        quality = self._strategy.initial_quality(quality)

        if max_size_kb is None or draft:
            data = self._save(prepared, output_format, quality, density, fast=draft)
            return EncodedArtifact(data=data, output_format=output_format, quality=quality)

        return self._converge(prepared, output_format, quality, int(max_size_kb * 1024), density, passthrough)

    def prepare(self, image: Image.Image, output_format: OutputFormat, background: str) -> Image.Image:
        if output_format.supports_alpha:
            return to_working_mode(image)
        return flatten(image, background)

    # ------------------------------------------------------------------
    # Size convergence
    # ------------------------------------------------------------------
    def _converge(
        self,
        image: Image.Image,
        output_format: OutputFormat,
        quality: int,
        target_bytes: int,
        density: Optional[int],
        passthrough: Optional[bytes],
    ) -> EncodedArtifact:
        if passthrough is not None and len(passthrough) <= target_bytes:
            logger.debug("Source already fits %s bytes; returning it unchanged", target_bytes)
            return EncodedArtifact(data=passthrough, output_format=output_format, attempts=0)

        palette = output_format is OutputFormat.PNG
        cap = self._config.max_size_attempts
        best: Optional[EncodedArtifact] = None
        attempts = 0

        while attempts < cap:
            data = self._save(image, output_format, quality, density, palette=palette)
            attempts += 1
            candidate = EncodedArtifact(data=data, output_format=output_format, quality=quality, attempts=attempts)
            logger.debug("Attempt %s at quality %s: %s bytes (target %s)", attempts, quality, len(data), target_bytes)

            if candidate.size <= target_bytes:
                return candidate
            best = _smaller(best, candidate)

            if quality <= self._strategy.floor:
                # Encoding is deterministic: a second pass at the floor would return the same bytes.
                if attempts < cap:
                    attempts += 1
                    last = self._last_resort(image, output_format, attempts, palette)
                    if last.size <= target_bytes:
                        return last
                    best = _smaller(best, last)
                break

            quality = self._strategy.next_quality(quality, candidate.size, target_bytes)

        if best is None:
            raise EncodingError("Size search made no attempts", operation="encode", value=cap)
        logger.warning(
            "Could not reach %s bytes; returning best effort of %s bytes at quality %s",
            target_bytes,
            best.size,
            best.quality,
            extra={"targetBytes": target_bytes, "resultBytes": best.size, "attempts": attempts},
        )
        return best

    def _last_resort(self, image: Image.Image, output_format: OutputFormat, attempt: int, palette: bool) -> EncodedArtifact:
        quality = self._config.last_resort_quality
        data = self._save(image, output_format, quality, None, palette=palette, strip_metadata=True)
        logger.debug("Last-resort attempt at quality %s: %s bytes", quality, len(data))
        return EncodedArtifact(data=data, output_format=output_format, quality=quality, attempts=attempt)

    # ------------------------------------------------------------------
    # Engine calls
    # ------------------------------------------------------------------
    def _save(
        self,
        image: Image.Image,
        output_format: OutputFormat,
        quality: int,
        density: Optional[int],
        *,
        fast: bool = False,
        palette: bool = False,
        strip_metadata: bool = False,
    ) -> bytes:
        params: Dict[str, Any] = {}
        if output_format is OutputFormat.JPEG:
            params.update(quality=quality, optimize=not fast)
        elif output_format is OutputFormat.WEBP:
            params.update(quality=quality, method=0 if fast else 4)
        elif output_format is OutputFormat.PNG:
            if fast:
                params["compress_level"] = 1
            else:
                params["optimize"] = True
            if palette:
                image = image.quantize(
                    colors=palette_size(quality),
                    method=Image.Quantize.FASTOCTREE,
                    dither=Image.Dither.NONE,
                )

        if density and not strip_metadata:
            if output_format is OutputFormat.WEBP:
                params["exif"] = density_exif(density)
            else:
                params["dpi"] = (density, density)

        buffer = BytesIO()
        try:
            image.save(buffer, format=output_format.pillow_format, **params)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodingError(
                f"Failed to encode {output_format.value}: {exc}",
                operation="encode",
                value=output_format.value,
                cause=exc,
            ) from exc
        return buffer.getvalue()


def palette_size(quality: int) -> int:
    """Palette colors used for PNG at a given quality inside the size search.

    Examples:
        >>> palette_size(100)
        256
        >>> palette_size(10)
        26
    """
    return max(2, min(256, round_half_up(256 * quality / 100)))


def density_exif(density: int) -> bytes:
    """EXIF block carrying X/YResolution in inches; WebP has no ``dpi`` save option."""
    exif = Image.Exif()
    exif[_EXIF_X_RESOLUTION] = density
    exif[_EXIF_Y_RESOLUTION] = density
    exif[_EXIF_RESOLUTION_UNIT] = 2
    return exif.tobytes()


_EXIF_X_RESOLUTION = 0x011A
_EXIF_Y_RESOLUTION = 0x011B
_EXIF_RESOLUTION_UNIT = 0x0128


def _smaller(current: Optional[EncodedArtifact], candidate: EncodedArtifact) -> EncodedArtifact:
    if current is None or candidate.size < current.size:
        return candidate
    return current
