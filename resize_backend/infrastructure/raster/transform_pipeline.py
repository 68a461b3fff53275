"""Rotate → crop → resize/composite pipeline over decoded source pixels."""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from PIL import Image

from resize_backend.domain.value_objects.crop_rectangle import CropRectangle, PixelRect
from resize_backend.domain.value_objects.pipeline_config import PipelineConfig
from resize_backend.domain.value_objects.target_geometry import TargetGeometry
from resize_backend.domain.value_objects.transform_request import TransformRequest

from .colors import fill_for, to_working_mode
from .compositor import Compositor

logger = logging.getLogger(__name__)

# Clockwise quarter turns expressed as Pillow transposes (which turn counter-clockwise).
_QUARTER_TURNS = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


class TransformPipeline:
    """Applies the geometric part of a :class:`TransformRequest`.

    Order matters: rotation first, because callers pick crop rectangles on the
    already-rotated preview; the crop is therefore resolved against the
    post-rotation size, and only then is the result fitted to the target.
    """

    def __init__(self, config: Optional[PipelineConfig] = None, compositor: Optional[Compositor] = None) -> None:
        self._config = config or PipelineConfig()
        self._compositor = compositor or Compositor(self._config)

    def apply(self, image: Image.Image, request: TransformRequest, target: TargetGeometry) -> Image.Image:
        working = to_working_mode(image)
        working = self.rotate(working, request.rotation, request.background_color)
        working = self.crop(working, request.crop)

        resample = Image.Resampling.BILINEAR if request.draft else Image.Resampling.LANCZOS
        return self._compositor.apply(
            working,
            request.mode,
            (target.width, target.height),
            request.background_color,
            resample=resample,
        )

    def rotate(self, image: Image.Image, degrees: float, background: str) -> Image.Image:
        """Rotate clockwise by ``degrees``.

        Quarter turns are lossless transposes. Any other angle expands the
        canvas and paints the exposed corners with ``background``.
        """
        normalized = degrees % 360
        if normalized == 0:
            return image

        transpose = _QUARTER_TURNS.get(normalized)
        if transpose is not None:
            rotated = image.transpose(transpose)
        else:
            rotated = image.rotate(
                -normalized,
                resample=Image.Resampling.BICUBIC,
                expand=True,
                fillcolor=fill_for(image, background),
            )
        logger.debug("Rotated %s degrees: %sx%s -> %sx%s", degrees, image.width, image.height, rotated.width, rotated.height)
        return rotated

    def resolve_crop(self, size: Tuple[int, int], crop: Optional[CropRectangle]) -> Optional[PixelRect]:
        if crop is None:
            return None
        if crop.unit_inferred:
            logger.warning(
                "Crop has no unit; treating %sx%s as percentages. Send unit='%%' or unit='px' explicitly.",
                crop.width,
                crop.height,
                extra={"cropUnitInferred": "percent"},
            )
        return crop.resolve(*size)

    def crop(self, image: Image.Image, crop: Optional[CropRectangle]) -> Image.Image:
        rect = self.resolve_crop(image.size, crop)
        if rect is None:
            if crop is not None:
                logger.debug("Crop %s is empty against %sx%s; skipping", crop.to_dict(), image.width, image.height)
            return image
        return image.crop(rect.box())
