"""Resize/composite strategies mapping a working image onto the target canvas."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple

from PIL import Image, ImageEnhance, ImageFilter, ImageOps

from resize_backend.domain.exceptions import UnsupportedModeError
from resize_backend.domain.value_objects.pipeline_config import PipelineConfig
from resize_backend.domain.value_objects.resize_mode import ResizeMode
from resize_backend.utils.numbers import round_half_up

from .colors import TRANSPARENT, fill_for, flatten, has_alpha, opaque

logger = logging.getLogger(__name__)

Size = Tuple[int, int]


def fit_size(source: Size, target: Size, *, cover: bool = False) -> Size:
    """Uniformly scaled size of ``source`` that fits (or covers) ``target``.

    Examples:
        >>> fit_size((400, 200), (100, 100))
        (100, 50)
        >>> fit_size((400, 200), (100, 100), cover=True)
        (200, 100)
    """
    sw, sh = source
    tw, th = target
    scale_x, scale_y = tw / sw, th / sh
    scale = max(scale_x, scale_y) if cover else min(scale_x, scale_y)
    return (max(1, round_half_up(sw * scale)), max(1, round_half_up(sh * scale)))


def centered_offset(inner: Size, outer: Size) -> Tuple[int, int]:
    return ((outer[0] - inner[0]) // 2, (outer[1] - inner[1]) // 2)


class Compositor:
    """Applies one :class:`ResizeMode` to produce an exactly target-sized canvas."""

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self._config = config or PipelineConfig()
        self._strategies: Dict[ResizeMode, Callable[..., Image.Image]] = {
            ResizeMode.STRETCH: self.stretch,
            ResizeMode.CONTAIN: self.contain,
            ResizeMode.COVER: self.cover,
            ResizeMode.COLOR_PAD: self.color_pad,
            ResizeMode.BLUR_PAD: self.blur_pad,
        }

    def apply(
        self,
        image: Image.Image,
        mode: ResizeMode,
        size: Size,
        background: str,
        *,
        resample: Image.Resampling = Image.Resampling.LANCZOS,
    ) -> Image.Image:
        strategy = self._strategies.get(mode)
        if strategy is None:
            raise UnsupportedModeError(mode)
        logger.debug("Compositing %sx%s -> %sx%s mode=%s", image.width, image.height, size[0], size[1], mode.value)
        return strategy(image, size, background, resample=resample)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------
    def stretch(self, image: Image.Image, size: Size, background: str, *, resample=Image.Resampling.LANCZOS) -> Image.Image:
        return image.resize(size, resample)

    def contain(self, image: Image.Image, size: Size, background: str, *, resample=Image.Resampling.LANCZOS) -> Image.Image:
        """Letterbox: padding takes the background color, image alpha is kept."""
        resized = image.resize(fit_size(image.size, size), resample)
        canvas = Image.new(resized.mode, size, fill_for(resized, background))
        canvas.paste(resized, centered_offset(resized.size, size))
        return canvas

    def cover(self, image: Image.Image, size: Size, background: str, *, resample=Image.Resampling.LANCZOS) -> Image.Image:
        return ImageOps.fit(image, size, method=resample, centering=(0.5, 0.5))

    def color_pad(self, image: Image.Image, size: Size, background: str, *, resample=Image.Resampling.LANCZOS) -> Image.Image:
        """Letterbox with transparency flattened into the background; always RGB."""
        resized = image.resize(fit_size(image.size, size), resample)
        canvas = Image.new("RGBA", size, opaque(background))
        canvas.alpha_composite(resized.convert("RGBA"), dest=centered_offset(resized.size, size))
        return canvas.convert("RGB")

    def blur_pad(self, image: Image.Image, size: Size, background: str, *, resample=Image.Resampling.LANCZOS) -> Image.Image:
        """Contained foreground over a blurred, darkened cover-scaled copy of itself."""
        backdrop = self.blurred_backdrop(image, size, background, resample=resample)

        resized = image.resize(fit_size(image.size, size), resample)
        foreground = Image.new("RGBA", size, TRANSPARENT)
        foreground.paste(resized.convert("RGBA"), centered_offset(resized.size, size))

        composite = backdrop.convert("RGBA")
        composite.alpha_composite(foreground)
        return composite.convert("RGB")

    def blurred_backdrop(self, image: Image.Image, size: Size, background: str, *, resample=Image.Resampling.LANCZOS) -> Image.Image:
        layer = ImageOps.fit(image, size, method=resample, centering=(0.5, 0.5))
        if has_alpha(layer):
            layer = flatten(layer, background)
        layer = layer.filter(ImageFilter.GaussianBlur(self._config.blur_radius))
        return ImageEnhance.Brightness(layer).enhance(self._config.blur_brightness)
